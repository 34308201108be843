"""ImportPipeline - the per-image state machine.

    start -> exists? -> skipped
                     -> pull -> scan? -> patch? -> push -> rescan? -> sign? -> pushed

Any failing step raises ImageImportError naming the step and the image.
Missing optional tools are skip branches, never errors.
"""

import logging
import tempfile
from pathlib import Path
from typing import Awaitable, TypeVar

from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.imports.model.image import LocalImage
from secure_import.domain.imports.model.outcome import ImportOutcome, ImportStatus
from secure_import.domain.imports.model.scan import ScanFindings
from secure_import.domain.imports.port.capabilities import Capabilities
from secure_import.domain.imports.port.registry import Registry
from secure_import.domain.shared.error import ImageImportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

PATCHED_TAG = "patched"


class ImportPipeline:
    """Drives one image reference from its source registry into the target registry."""

    def __init__(
        self,
        registry: Registry,
        capabilities: Capabilities,
        target_registry: str,
        sign_key: str | None = None,
        dry_run: bool = False,
    ) -> None:
        self._registry = registry
        self._capabilities = capabilities
        self._target_registry = target_registry
        self._sign_key = sign_key
        self._dry_run = dry_run

    async def run(self, reference: ImageReference) -> ImportOutcome:
        """Import one image.

        Raises:
            ImageImportError: If any step fails. The caller decides how to record it.
        """
        target = reference.target(self._target_registry)

        exists = await self._step("existence check", reference, self._registry.exists(target))
        if exists:
            logger.info("Image %s already exists in registry. Skipping push.", target)
            return ImportOutcome.skipped(reference)

        if self._dry_run:
            return self._plan(reference, target)

        image = await self._step("pull", reference, self._registry.pull(reference.source))

        findings: ScanFindings | None = None
        patched = False
        with tempfile.TemporaryDirectory(prefix="secure-import-") as workdir:
            report_file = Path(workdir) / "scan.json"
            if self._capabilities.can_scan():
                findings = await self._step(
                    "scan", reference, self._capabilities.scanner.scan(reference.source, report_file)
                )
            else:
                logger.info("Skipping vulnerability scanning - scanner is not available")

            if findings is not None and findings.has_vulnerabilities:
                image, patched = await self._patch(reference, image, report_file)
            elif findings is not None:
                logger.info("No vulnerabilities were found in %s", reference)

        await self._step("push", reference, self._registry.push(image, target))
        logger.info("Pushed %s", target)

        await self._rescan(target)
        signed = await self._sign(reference, target)

        return ImportOutcome(
            reference=reference,
            status=ImportStatus.PUSHED,
            scanned=findings is not None,
            vulnerabilities_found=findings.vulnerability_count if findings else 0,
            patched=patched,
            signed=signed,
        )

    async def _patch(
        self, reference: ImageReference, image: LocalImage, report_file: Path
    ) -> tuple[LocalImage, bool]:
        if not self._capabilities.can_patch():
            logger.info("Skipping patching of %s - patcher is not available", reference)
            return image, False

        logger.info("Patching %s...", reference)
        await self._step(
            "patch",
            reference,
            self._capabilities.patcher.patch(report_file, reference.source, PATCHED_TAG),
        )
        patched_ref = reference.with_tag(PATCHED_TAG).source
        patched = await self._step("load patched image", reference, self._registry.load(patched_ref))
        return patched, True

    async def _rescan(self, target: str) -> None:
        """Informational scan of what was pushed. Never fails the import."""
        if not self._capabilities.can_scan():
            return
        with tempfile.TemporaryDirectory(prefix="secure-import-") as workdir:
            try:
                findings = await self._capabilities.scanner.scan(target, Path(workdir) / "rescan.json")
            except Exception as e:
                logger.warning("Post-push scan of %s failed: %s", target, e)
                return
        logger.info(
            "Post-push scan of %s: %d vulnerabilit%s",
            target,
            findings.vulnerability_count,
            "y" if findings.vulnerability_count == 1 else "ies",
        )

    async def _sign(self, reference: ImageReference, target: str) -> bool:
        if not self._capabilities.can_sign():
            logger.info("Skipping image signing - signer is not available")
            return False
        if not self._sign_key:
            logger.info("Skipping image signing as no signing key was provided")
            return False

        digest = await self._step("digest", reference, self._registry.digest(target))
        signed_ref = reference.at_digest(self._target_registry, digest)
        await self._step("sign", reference, self._capabilities.signer.sign(self._sign_key, signed_ref))
        logger.info("Signed %s", signed_ref)
        return True

    def _plan(self, reference: ImageReference, target: str) -> ImportOutcome:
        logger.info("Would pull %s", reference.source)
        if self._capabilities.can_scan():
            logger.info("Would scan %s for vulnerabilities and patch if any are found", reference)
        logger.info("Would push %s", target)
        if self._capabilities.can_sign() and self._sign_key:
            logger.info("Would sign %s", target)
        return ImportOutcome(reference=reference, status=ImportStatus.PUSHED)

    async def _step(self, operation: str, reference: ImageReference, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except Exception as e:
            raise ImageImportError(str(reference), operation, e) from e
