"""Tests for report serialization."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from secure_import.cli.console import Console
from secure_import.cli.report import (
    image_status,
    chart_status,
    render_json,
    report_to_dict,
    write_report,
)
from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.imports.model.outcome import ChartOutcome, ImportOutcome, ImportStatus
from secure_import.domain.report.service.aggregator import ReportAggregator


@pytest.fixture
def report():
    images = [
        ImportOutcome(
            reference=ImageReference.parse("org/api:v1"),
            status=ImportStatus.PUSHED,
            scanned=True,
            vulnerabilities_found=4,
            patched=True,
            signed=True,
        ),
        ImportOutcome.skipped(ImageReference.parse("org/db:13")),
        ImportOutcome.failed(ImageReference.parse("org/web:2"), "pull failed for org/web:2: denied"),
    ]
    chart = ChartOutcome(reference="registry.example.com/charts/app:1.0.0", pushed=True, signed=True)
    return ReportAggregator(version="1.2.3", clock=lambda: datetime(2024, 5, 1, tzinfo=UTC)).aggregate(
        chart, images
    )


class TestReportToDict:
    def test_schema(self, report):
        data = report_to_dict(report)

        assert data["metadata"] == {
            "generated_at": "2024-05-01T00:00:00+00:00",
            "version": "1.2.3",
            "dry_run": False,
        }
        assert data["chart"] == {
            "name": "registry.example.com/charts/app:1.0.0",
            "pushed": True,
            "signed": True,
        }
        assert data["images"][0] == {
            "name": "org/api:v1",
            "status": "pushed",
            "pushed": True,
            "vulnerabilities_found": 4,
            "patched": True,
            "signed": True,
            "error": None,
        }
        assert data["images"][2]["status"] == "failed"
        assert data["images"][2]["error"] == "pull failed for org/web:2: denied"
        assert data["summary"] == {
            "total_images": 3,
            "images_pushed": 1,
            "images_skipped": 1,
            "images_failed": 1,
            "total_vulnerabilities": 4,
            "chart_pushed": True,
        }

    def test_render_json_round_trips(self, report):
        assert json.loads(render_json(report)) == report_to_dict(report)


class TestStatusStrings:
    def test_image_statuses(self, report):
        pushed, skipped, failed = report.images
        assert image_status(pushed) == "✅ Pushed & 🔧 Patched & ✍️ Signed"
        assert image_status(skipped) == "⏭️ Skipped (already exists)"
        assert image_status(failed).startswith("❌ Failed")

    def test_chart_statuses(self):
        assert chart_status(ChartOutcome(reference="r", pushed=False)) == "⏭️ Skipped (already exists)"
        assert chart_status(ChartOutcome(reference="r", pushed=True)) == "✅ Pushed"


class TestWriteReport:
    def test_json_to_file(self, report, tmp_path: Path):
        out = tmp_path / "report.json"

        write_report(report, "json", out, Console())

        assert json.loads(out.read_text())["summary"]["total_images"] == 3

    def test_table_to_file(self, report, tmp_path: Path):
        out = tmp_path / "report.txt"

        write_report(report, "table", out, Console())

        text = out.read_text()
        assert "=== HELM SECURE IMPORT REPORT ===" in text
        assert "org/api:v1" in text
        assert "Images failed:" in text

    def test_json_to_stdout(self, report, capsys: pytest.CaptureFixture[str]):
        write_report(report, "json", None, Console(force_terminal=False))

        assert json.loads(capsys.readouterr().out)["chart"]["pushed"] is True
