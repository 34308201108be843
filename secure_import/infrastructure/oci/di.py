from typing import AsyncIterable

import aiodocker
import httpx
from dishka import Provider, Scope, provide

from secure_import.config import Config
from secure_import.domain.imports.port.registry import Registry
from secure_import.infrastructure.oci.docker_store import DockerImageStore
from secure_import.infrastructure.oci.registry import OciRegistry
from secure_import.infrastructure.oci.registry_client import HttpRegistryClient


class OciProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_docker(self) -> AsyncIterable[aiodocker.Docker]:
        docker = aiodocker.Docker()
        yield docker
        await docker.close()

    @provide(scope=Scope.APP)
    async def get_http_client(self, config: Config) -> AsyncIterable[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            timeout=config.registry.timeout_seconds,
            follow_redirects=True,
        ) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_registry(
        self, client: httpx.AsyncClient, docker: aiodocker.Docker, config: Config
    ) -> Registry:
        return OciRegistry(
            client=HttpRegistryClient(client, config.registry),
            store=DockerImageStore(docker, config.registry),
        )
