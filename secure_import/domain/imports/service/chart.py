"""ChartImporter - pulls the chart and publishes it before any image work starts."""

import logging
from pathlib import Path

from secure_import.domain.imports.model.outcome import ChartOutcome
from secure_import.domain.imports.port.registry import Registry
from secure_import.domain.imports.port.renderer import ChartRenderer
from secure_import.domain.imports.port.signer import Signer
from secure_import.domain.shared.error import ChartImportError
from secure_import.domain.shared.service import Service

logger = logging.getLogger(__name__)

CHARTS_PATH = "charts"


class ChartImporter(Service):
    """Sequential chart stage. Every failure here aborts the run."""

    renderer: ChartRenderer
    registry: Registry
    target_registry: str
    signer: Signer | None = None
    sign_key: str | None = None
    dry_run: bool = False

    def chart_reference(self, chart: str, version: str) -> str:
        return f"{self.target_registry}/{CHARTS_PATH}/{chart}:{version}"

    async def pull(self, chart: str, version: str, repo: str, dest: Path) -> Path:
        logger.info("Pulling chart %s:%s from %s...", chart, version, repo)
        try:
            return await self.renderer.pull(chart, version, repo, dest)
        except Exception as e:
            raise ChartImportError(f"Failed to pull chart {chart}:{version} from {repo}: {e}") from e

    async def publish(self, archive: Path, chart: str, version: str) -> ChartOutcome:
        """Push and sign the chart unless the target registry already has it."""
        reference = self.chart_reference(chart, version)

        logger.info("Checking if chart exists in registry: %s", reference)
        try:
            exists = await self.registry.exists(reference)
        except Exception as e:
            raise ChartImportError(f"Failed to check chart {reference}: {e}") from e

        if exists:
            logger.info("Chart %s:%s already exists. Skipping push.", chart, version)
            return ChartOutcome(reference=reference, pushed=False)

        if self.dry_run:
            logger.info("Would push and sign chart: %s", reference)
            return ChartOutcome(reference=reference, pushed=True)

        logger.info("Pushing and signing chart: %s", reference)
        try:
            await self.renderer.push(archive, f"oci://{self.target_registry}/{CHARTS_PATH}/")
        except Exception as e:
            raise ChartImportError(f"Failed to push chart {reference}: {e}") from e

        signed = await self._sign(chart, reference)
        return ChartOutcome(reference=reference, pushed=True, signed=signed)

    async def _sign(self, chart: str, reference: str) -> bool:
        if self.signer is None or not self.signer.available():
            logger.info("Skipping chart signing - signer is not available")
            return False
        if not self.sign_key:
            logger.info("Skipping chart signing as no signing key was provided")
            return False

        try:
            digest = await self.registry.digest(reference)
            signed_ref = f"{self.target_registry}/{CHARTS_PATH}/{chart}@{digest}"
            await self.signer.sign(self.sign_key, signed_ref)
        except Exception as e:
            raise ChartImportError(f"Failed to sign chart {reference}: {e}") from e
        logger.info("Signed %s", signed_ref)
        return True
