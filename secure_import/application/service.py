"""ImportService - one end-to-end run: chart stage, discovery, image pool, report."""

import logging
import tempfile
from pathlib import Path

from secure_import.config import ImportOptions
from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.discovery.service.discovery import ImageDiscovery
from secure_import.domain.imports.port.renderer import ChartRenderer
from secure_import.domain.imports.service.chart import ChartImporter
from secure_import.domain.imports.service.pool import WorkerPool
from secure_import.domain.report.model.report import Report
from secure_import.domain.report.service.aggregator import ReportAggregator
from secure_import.domain.shared.error import DiscoveryError, SecureImportError
from secure_import.domain.shared.service import Service
from secure_import.infrastructure.yaml.parser import parse_documents

logger = logging.getLogger(__name__)


class ImportService(Service):
    """Runs the chart stage, then fans the discovered images out to the pool.

    Chart-stage and discovery errors propagate and abort the run. Image
    failures are already folded into outcomes by the pool.
    """

    options: ImportOptions
    charts: ChartImporter
    renderer: ChartRenderer
    discovery: ImageDiscovery
    pool: WorkerPool
    aggregator: ReportAggregator

    async def run(self) -> Report:
        options = self.options
        if options.dry_run:
            logger.info("DRY RUN MODE - No changes will be made")

        with tempfile.TemporaryDirectory(prefix="helm-import-") as workdir:
            archive = await self.charts.pull(options.chart, options.version, options.repo, Path(workdir))
            chart = await self.charts.publish(archive, options.chart, options.version)

            logger.info("Extracting container images from chart...")
            references = await self.discover(archive)

        if not references:
            logger.info("No container images found in chart")
        else:
            logger.info(
                "Found %d container image(s) to process: %s",
                len(references),
                ", ".join(str(r) for r in references),
            )

        outcomes = await self.pool.run(references)
        return self.aggregator.aggregate(chart, outcomes, dry_run=options.dry_run)

    async def discover(self, archive: Path) -> list[ImageReference]:
        try:
            rendered = await self.renderer.render(archive, self.options.values)
        except SecureImportError as e:
            raise DiscoveryError(f"Failed to template chart: {e}") from e
        return self.discovery.discover(parse_documents(rendered))
