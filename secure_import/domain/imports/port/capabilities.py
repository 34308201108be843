from __future__ import annotations

from dataclasses import dataclass

from secure_import.domain.imports.port.patcher import Patcher
from secure_import.domain.imports.port.scanner import Scanner
from secure_import.domain.imports.port.signer import Signer


@dataclass(frozen=True)
class Capabilities:
    """Optional tools handed to the import pipeline.

    A missing tool is either ``None`` or reports ``available() == False``;
    both mean the corresponding step is skipped.
    """

    scanner: Scanner | None = None
    patcher: Patcher | None = None
    signer: Signer | None = None

    def can_scan(self) -> bool:
        return self.scanner is not None and self.scanner.available()

    def can_patch(self) -> bool:
        return self.patcher is not None and self.patcher.available()

    def can_sign(self) -> bool:
        return self.signer is not None and self.signer.available()
