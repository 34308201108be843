"""Registry port - the four transport capabilities the importer needs."""

from __future__ import annotations

from typing import Protocol

from secure_import.domain.imports.model.image import LocalImage


class Registry(Protocol):
    """Protocol for talking to source and target registries.

    References are full strings such as ``registry.example.com/team/app:1.0``.
    """

    async def exists(self, reference: str) -> bool:
        """True if the manifest exists; False on not-found. Other failures raise."""
        ...

    async def digest(self, reference: str) -> str:
        """Content digest of the manifest, e.g. ``sha256:...``."""
        ...

    async def pull(self, reference: str) -> LocalImage: ...

    async def load(self, reference: str) -> LocalImage:
        """Look up an image already present locally (e.g. a patch result)."""
        ...

    async def push(self, image: LocalImage, reference: str) -> None: ...
