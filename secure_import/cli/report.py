"""Report serialization: JSON document or rich tables."""

import json
from pathlib import Path
from typing import Any

from rich.console import Console as RichConsole
from rich.table import Table

from secure_import.cli.console import Console
from secure_import.domain.imports.model.outcome import ChartOutcome, ImportOutcome, ImportStatus
from secure_import.domain.report.model.report import Report

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "metadata": {
            "generated_at": report.metadata.generated_at.isoformat(),
            "version": report.metadata.version,
            "dry_run": report.metadata.dry_run,
        },
        "chart": {
            "name": report.chart.reference,
            "pushed": report.chart.pushed,
            "signed": report.chart.signed,
        },
        "images": [
            {
                "name": str(outcome.reference),
                "status": outcome.status.value,
                "pushed": outcome.pushed,
                "vulnerabilities_found": outcome.vulnerabilities_found,
                "patched": outcome.patched,
                "signed": outcome.signed,
                "error": outcome.error,
            }
            for outcome in report.images
        ],
        "summary": report.summary.model_dump(),
    }


def render_json(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2)


def chart_status(chart: ChartOutcome) -> str:
    if not chart.pushed:
        return "⏭️ Skipped (already exists)"
    status = "✅ Pushed"
    if chart.signed:
        status += " & ✍️ Signed"
    return status


def image_status(outcome: ImportOutcome) -> str:
    match outcome.status:
        case ImportStatus.SKIPPED:
            return "⏭️ Skipped (already exists)"
        case ImportStatus.FAILED:
            return f"❌ Failed: {outcome.error}" if outcome.error else "❌ Failed"
    status = "✅ Pushed"
    if outcome.patched:
        status += " & 🔧 Patched"
    if outcome.signed:
        status += " & ✍️ Signed"
    return status


def render_table(report: Report, out: RichConsole) -> None:
    out.print("[bold]=== HELM SECURE IMPORT REPORT ===[/bold]")
    header = Table.grid(padding=(0, 2))
    header.add_row("Generated at:", report.metadata.generated_at.strftime(TIMESTAMP_FORMAT).strip())
    header.add_row("Version:", report.metadata.version)
    if report.metadata.dry_run:
        header.add_row("Mode:", "DRY RUN")
    out.print(header)
    out.print()

    summary = report.summary
    out.print("[bold]=== SUMMARY ===[/bold]")
    counts = Table.grid(padding=(0, 2))
    counts.add_row("Chart pushed:", str(summary.chart_pushed).lower())
    counts.add_row("Total images:", str(summary.total_images))
    counts.add_row("Images pushed:", str(summary.images_pushed))
    counts.add_row("Images skipped:", str(summary.images_skipped))
    if summary.images_failed:
        counts.add_row("Images failed:", str(summary.images_failed))
    if summary.total_vulnerabilities:
        counts.add_row("Total vulnerabilities found:", str(summary.total_vulnerabilities))
    out.print(counts)
    out.print()

    artifacts = Table(title="ARTIFACTS", show_header=True, header_style="bold", title_justify="left")
    artifacts.add_column("ARTIFACT")
    artifacts.add_column("PUSHED")
    artifacts.add_column("VULNERABILITIES")
    artifacts.add_column("STATUS")
    artifacts.add_row(
        report.chart.reference,
        str(report.chart.pushed).lower(),
        "-",
        chart_status(report.chart),
    )
    for outcome in report.images:
        vulns = str(outcome.vulnerabilities_found) if outcome.vulnerabilities_found else "-"
        artifacts.add_row(
            str(outcome.reference),
            str(outcome.pushed).lower(),
            vulns,
            image_status(outcome),
        )
    out.print(artifacts)


def write_report(report: Report, fmt: str, file: Path | None, console: Console) -> None:
    """Write the report to ``file``, or to stdout when no file is given."""
    if fmt == "json":
        text = render_json(report)
        if file is not None:
            file.write_text(text + "\n")
        else:
            console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
        return

    if file is not None:
        with file.open("w") as f:
            render_table(report, RichConsole(file=f, width=160, no_color=True))
    else:
        render_table(report, console.out)
