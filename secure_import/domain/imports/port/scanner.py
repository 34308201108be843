from __future__ import annotations

from pathlib import Path
from typing import Protocol

from secure_import.domain.imports.model.scan import ScanFindings


class Scanner(Protocol):
    """Protocol for a vulnerability scanner."""

    def available(self) -> bool: ...

    async def scan(self, image: str, report_file: Path) -> ScanFindings:
        """Scan ``image``, write the raw report to ``report_file`` and parse it."""
        ...
