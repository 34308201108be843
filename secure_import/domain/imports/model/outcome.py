from enum import StrEnum

from pydantic import computed_field

from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.shared.model.value import ValueObject


class ImportStatus(StrEnum):
    PUSHED = "pushed"
    SKIPPED = "skipped"  # already present in the target registry
    FAILED = "failed"


class ImportOutcome(ValueObject):
    """What happened to one image. Created once by the worker that handled it."""

    reference: ImageReference
    status: ImportStatus
    existed_already: bool = False
    scanned: bool = False
    vulnerabilities_found: int = 0
    patched: bool = False
    signed: bool = False
    error: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pushed(self) -> bool:
        return self.status == ImportStatus.PUSHED

    @classmethod
    def skipped(cls, reference: ImageReference) -> "ImportOutcome":
        return cls(reference=reference, status=ImportStatus.SKIPPED, existed_already=True)

    @classmethod
    def failed(cls, reference: ImageReference, error: Exception | str) -> "ImportOutcome":
        return cls(reference=reference, status=ImportStatus.FAILED, error=str(error))


class ChartOutcome(ValueObject):
    """Result of the chart stage, produced before any image is processed."""

    reference: str  # e.g., registry.example.com/charts/argo-cd:7.3.4
    pushed: bool = False
    signed: bool = False
