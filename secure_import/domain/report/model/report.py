from datetime import datetime

from secure_import.domain.imports.model.outcome import ChartOutcome, ImportOutcome
from secure_import.domain.shared.model.value import ValueObject


class ReportMetadata(ValueObject):
    generated_at: datetime
    version: str
    dry_run: bool = False


class ReportSummary(ValueObject):
    total_images: int = 0
    images_pushed: int = 0
    images_skipped: int = 0
    images_failed: int = 0
    total_vulnerabilities: int = 0
    chart_pushed: bool = False


class Report(ValueObject):
    """Everything one run did, ready to serialize."""

    metadata: ReportMetadata
    chart: ChartOutcome
    images: tuple[ImportOutcome, ...] = ()
    summary: ReportSummary = ReportSummary()
