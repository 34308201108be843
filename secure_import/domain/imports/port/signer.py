from __future__ import annotations

from typing import Protocol


class Signer(Protocol):
    """Protocol for signing pushed artifacts by digest."""

    def available(self) -> bool: ...

    async def sign(self, key: str, reference: str) -> None: ...
