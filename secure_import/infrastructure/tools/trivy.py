"""Trivy adapter for the Scanner port."""

from pathlib import Path

import logfire
from pydantic import ValidationError as PydanticValidationError

from secure_import.domain.imports.model.scan import ScanFindings
from secure_import.domain.shared.error import ExternalServiceError
from secure_import.infrastructure.tools.process import ToolRunner


class TrivyScanner:
    def __init__(
        self,
        runner: ToolRunner,
        trivy: str = "trivy",
        extra_args: list[str] | None = None,
    ) -> None:
        self._runner = runner
        self._trivy = trivy
        self._extra_args = extra_args if extra_args is not None else []

    def available(self) -> bool:
        return self._runner.available(self._trivy)

    async def scan(self, image: str, report_file: Path) -> ScanFindings:
        await self._runner.run(
            self._trivy,
            "image",
            *self._extra_args,
            "-f",
            "json",
            "-o",
            str(report_file),
            image,
        )
        return self.parse_report(report_file)

    def parse_report(self, report_file: Path) -> ScanFindings:
        """Parse a JSON report.

        Raises:
            ExternalServiceError: If the report is missing or malformed.
        """
        if not report_file.exists():
            raise ExternalServiceError(f"Scanner did not produce {report_file.name}")
        try:
            findings = ScanFindings.model_validate_json(report_file.read_text())
        except PydanticValidationError as e:
            raise ExternalServiceError(f"Malformed scanner output in {report_file.name}: {e}") from e
        logfire.info(
            "Scan finished",
            report=str(report_file),
            vulnerabilities=findings.vulnerability_count,
        )
        return findings
