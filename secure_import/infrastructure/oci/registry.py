"""OCI adapter for the Registry port."""

from secure_import.domain.imports.model.image import LocalImage
from secure_import.infrastructure.oci.docker_store import DockerImageStore
from secure_import.infrastructure.oci.registry_client import HttpRegistryClient


class OciRegistry:
    """Manifest lookups go over HTTP; image bytes move through the Docker daemon."""

    def __init__(self, client: HttpRegistryClient, store: DockerImageStore) -> None:
        self._client = client
        self._store = store

    async def exists(self, reference: str) -> bool:
        return await self._client.exists(reference)

    async def digest(self, reference: str) -> str:
        return await self._client.digest(reference)

    async def pull(self, reference: str) -> LocalImage:
        return await self._store.pull(reference)

    async def load(self, reference: str) -> LocalImage:
        return await self._store.load(reference)

    async def push(self, image: LocalImage, reference: str) -> None:
        await self._store.push(image, reference)
