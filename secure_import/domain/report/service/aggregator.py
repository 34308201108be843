"""ReportAggregator - folds chart and image outcomes into a Report."""

from datetime import UTC, datetime
from typing import Callable, Iterable

from secure_import import __version__
from secure_import.domain.imports.model.outcome import ChartOutcome, ImportOutcome, ImportStatus
from secure_import.domain.report.model.report import Report, ReportMetadata, ReportSummary


class ReportAggregator:
    def __init__(
        self,
        version: str = __version__,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._version = version
        self._clock = clock

    def summarize(self, chart: ChartOutcome, images: Iterable[ImportOutcome]) -> ReportSummary:
        outcomes = list(images)
        return ReportSummary(
            total_images=len(outcomes),
            images_pushed=sum(1 for o in outcomes if o.status == ImportStatus.PUSHED),
            images_skipped=sum(1 for o in outcomes if o.status == ImportStatus.SKIPPED),
            images_failed=sum(1 for o in outcomes if o.status == ImportStatus.FAILED),
            total_vulnerabilities=sum(o.vulnerabilities_found for o in outcomes),
            chart_pushed=chart.pushed,
        )

    def aggregate(
        self,
        chart: ChartOutcome,
        images: Iterable[ImportOutcome],
        dry_run: bool = False,
    ) -> Report:
        """Build the report. Images are ordered by reference, whatever order they finished in."""
        ordered = tuple(sorted(images, key=lambda o: o.reference))
        return Report(
            metadata=ReportMetadata(
                generated_at=self._clock(),
                version=self._version,
                dry_run=dry_run,
            ),
            chart=chart,
            images=ordered,
            summary=self.summarize(chart, ordered),
        )
