from secure_import.domain.imports.model.image import LocalImage
from secure_import.domain.imports.model.outcome import ChartOutcome, ImportOutcome, ImportStatus
from secure_import.domain.imports.model.scan import ScanFindings, ScanResult

__all__ = [
    "ChartOutcome",
    "ImportOutcome",
    "ImportStatus",
    "LocalImage",
    "ScanFindings",
    "ScanResult",
]
