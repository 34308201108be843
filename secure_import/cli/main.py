"""Main CLI application using Cyclopts.

One default command runs an import end to end; ``version`` prints the
tool version. Logs go to stderr, the report to stdout or ``--report-file``.
"""

import asyncio
import sys
from pathlib import Path

import cyclopts
import logfire
from pydantic import ValidationError as PydanticValidationError

from secure_import import __version__
from secure_import.application.di import create_container
from secure_import.application.service import ImportService
from secure_import.cli.console import get_console
from secure_import.cli.report import write_report
from secure_import.config import Config, ImportOptions, ReportFormat, configure_logging
from secure_import.domain.report.model.report import Report
from secure_import.domain.shared.error import SecureImportError, ValidationError

app = cyclopts.App(
    name="helm-secure-import",
    help="Import a Helm chart and its container images into a private registry, "
    "scanning, patching and signing each image on the way.",
    version=__version__,
    version_flags=[],
)


async def _run(config: Config, options: ImportOptions) -> Report:
    container = create_container(config, options)
    try:
        service = await container.get(ImportService)
        return await service.run()
    finally:
        await container.close()


@app.default
def import_chart(
    chart: str | None = None,
    *,
    version: str | None = None,
    repo: str | None = None,
    registry: str | None = None,
    values: Path | None = None,
    sign_key: str | None = None,
    report_format: ReportFormat = "table",
    report_file: Path | None = None,
    dry_run: bool = False,
) -> None:
    """Import a chart and every image it references.

    Args:
        chart: Chart name (may also be given positionally).
        version: Chart version (semver).
        repo: Chart repository URL, or an oci:// reference.
        registry: Target registry host. Defaults to $HELM_REGISTRY.
        values: Values file passed to helm template.
        sign_key: Cosign key. Defaults to $HELM_SIGN_KEY.
        report_format: Report output format.
        report_file: Write the report here instead of stdout.
        dry_run: Show what would happen without pushing or signing.
    """
    console = get_console()

    try:
        config = Config()
    except PydanticValidationError as e:
        console.error(f"Invalid configuration: {e}")
        sys.exit(1)
    configure_logging(config.logging)
    logfire.configure(send_to_logfire="if-token-present", console=False, service_name="helm-secure-import")
    logfire.instrument_httpx()

    given = {
        "chart": chart,
        "version": version,
        "repo": repo,
        "registry": registry,
        "values": values,
        "sign_key": sign_key,
        "report_format": report_format,
        "report_file": report_file.resolve() if report_file else None,
        "dry_run": dry_run,
    }
    options = ImportOptions(**{k: v for k, v in given.items() if v is not None})

    try:
        options.check()
    except ValidationError as e:
        console.error(e.message)
        sys.exit(1)

    try:
        report = asyncio.run(_run(config, options))
    except SecureImportError as e:
        console.error(e.message)
        sys.exit(1)

    write_report(report, options.report_format, options.report_file, console)
    if options.report_file:
        console.success(f"Report written to {options.report_file}")


@app.command
def version() -> None:
    """Print the helm-secure-import version."""
    get_console().print(f"helm-secure-import version {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
