from __future__ import annotations

from pathlib import Path
from typing import Protocol


class Patcher(Protocol):
    """Protocol for a tool that rebuilds an image with fixed OS packages."""

    def available(self) -> bool: ...

    async def patch(self, report_file: Path, image: str, tag: str) -> None:
        """Patch ``image`` using the scan report; the result is tagged ``tag`` locally."""
        ...
