"""Local image store backed by the Docker daemon via aiodocker."""

from typing import Any

import aiodocker
import logfire

from secure_import.config import RegistryConfig
from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.imports.model.image import LocalImage
from secure_import.domain.shared.error import ExternalServiceError


def split_name(reference: str) -> tuple[str, str]:
    """Split ``host/repo:tag`` into ``("host/repo", "tag")``."""
    ref = ImageReference.parse(reference)
    if ref.tag is None:
        raise ExternalServiceError(f"A tag is required to push {reference}")
    name = f"{ref.registry}/{ref.repository}" if ref.registry else ref.repository
    return name, ref.tag


def _raise_on_stream_error(progress: Any, action: str, reference: str) -> None:
    """The daemon reports pull/push failures inside the progress stream."""
    entries = progress if isinstance(progress, list) else [progress]
    for entry in entries:
        if isinstance(entry, dict) and entry.get("error"):
            raise ExternalServiceError(f"Failed to {action} {reference}: {entry['error']}")


class DockerImageStore:
    """Pulls, tags, pushes and inspects images through the local daemon."""

    def __init__(self, docker: aiodocker.Docker, config: RegistryConfig) -> None:
        self._docker = docker
        self._config = config

    async def pull(self, reference: str) -> LocalImage:
        logfire.info("Pulling image", image=reference)
        try:
            progress = await self._docker.images.pull(reference)
        except aiodocker.DockerError as e:
            logfire.error("Docker error pulling image", image=reference, error=str(e))
            raise ExternalServiceError(f"Failed to pull image {reference}: {e}") from e
        _raise_on_stream_error(progress, "pull", reference)
        return await self.load(reference)

    async def load(self, reference: str) -> LocalImage:
        try:
            info = await self._docker.images.inspect(reference)
        except aiodocker.DockerError as e:
            if e.status == 404:
                raise ExternalServiceError(f"Image {reference} not found in local daemon") from e
            raise ExternalServiceError(f"Docker error inspecting {reference}: {e}") from e
        return LocalImage(name=reference, image_id=info.get("Id"))

    async def push(self, image: LocalImage, reference: str) -> None:
        name, tag = split_name(reference)
        try:
            await self._docker.images.tag(image.name, repo=name, tag=tag)
            logfire.info("Pushing image", image=reference)
            progress = await self._docker.images.push(name, tag=tag, auth=self._auth(reference))
        except aiodocker.DockerError as e:
            logfire.error("Docker error pushing image", image=reference, error=str(e))
            raise ExternalServiceError(f"Failed to push image {reference}: {e}") from e
        _raise_on_stream_error(progress, "push", reference)

    def _auth(self, reference: str) -> dict[str, str] | None:
        if not self._config.username:
            return None
        registry = ImageReference.parse(reference).registry or "docker.io"
        return {
            "username": self._config.username,
            "password": self._config.password or "",
            "serveraddress": registry,
        }
