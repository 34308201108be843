"""Tests for the helm, trivy, copa and cosign adapters."""

import json
from pathlib import Path

import pytest

from secure_import.domain.shared.error import ExternalServiceError, ToolError
from secure_import.infrastructure.tools.copa import CopaPatcher
from secure_import.infrastructure.tools.cosign import CosignSigner
from secure_import.infrastructure.tools.helm import HelmRenderer
from secure_import.infrastructure.tools.process import ProcessResult, ToolRunner
from secure_import.infrastructure.tools.trivy import TrivyScanner


class FakeRunner(ToolRunner):
    """Records invocations instead of spawning processes."""

    def __init__(self, installed: set[str] | None = None, stdout: str = "", side_effect=None):
        self.installed = installed if installed is not None else {"helm", "trivy", "copa", "cosign"}
        self.stdout = stdout
        self.side_effect = side_effect
        self.calls: list[tuple[str, ...]] = []

    def available(self, tool: str) -> bool:
        return tool in self.installed

    async def run(self, tool: str, *args: str, cwd: Path | None = None) -> ProcessResult:
        self.calls.append((tool, *args))
        if self.side_effect is not None:
            self.side_effect(tool, args)
        return ProcessResult(returncode=0, stdout=self.stdout, stderr="")


class TestHelmRenderer:
    @pytest.mark.asyncio
    async def test_pull_from_http_repo(self, tmp_path: Path):
        def produce(tool, args):
            (tmp_path / "argo-cd-7.3.4.tgz").write_bytes(b"chart")

        runner = FakeRunner(side_effect=produce)

        archive = await HelmRenderer(runner).pull("argo-cd", "7.3.4", "https://argoproj.github.io/argo-helm", tmp_path)

        assert archive == tmp_path / "argo-cd-7.3.4.tgz"
        assert runner.calls == [
            (
                "helm",
                "pull",
                "argo-cd",
                "--version",
                "7.3.4",
                "--repo",
                "https://argoproj.github.io/argo-helm",
                "--destination",
                str(tmp_path),
            )
        ]

    @pytest.mark.asyncio
    async def test_pull_from_oci_repo(self, tmp_path: Path):
        runner = FakeRunner(side_effect=lambda t, a: (tmp_path / "app-1.0.0.tgz").write_bytes(b""))

        await HelmRenderer(runner).pull("app", "1.0.0", "oci://ghcr.io/org/charts/", tmp_path)

        assert runner.calls[0][1:3] == ("pull", "oci://ghcr.io/org/charts/app")

    @pytest.mark.asyncio
    async def test_pull_without_archive_raises(self, tmp_path: Path):
        with pytest.raises(ExternalServiceError, match="did not produce"):
            await HelmRenderer(FakeRunner()).pull("app", "1.0.0", "https://charts.example.com", tmp_path)

    @pytest.mark.asyncio
    async def test_render_with_values(self, tmp_path: Path):
        runner = FakeRunner(stdout="kind: Pod\n")
        archive = tmp_path / "app-1.0.0.tgz"
        values = tmp_path / "values.yaml"

        rendered = await HelmRenderer(runner).render(archive, values)

        assert rendered == "kind: Pod\n"
        assert runner.calls == [("helm", "template", str(archive), "-f", str(values))]

    @pytest.mark.asyncio
    async def test_push(self, tmp_path: Path):
        runner = FakeRunner()
        archive = tmp_path / "app-1.0.0.tgz"

        await HelmRenderer(runner).push(archive, "oci://registry.example.com/charts/")

        assert runner.calls == [("helm", "push", str(archive), "oci://registry.example.com/charts/")]


class TestTrivyScanner:
    @pytest.mark.asyncio
    async def test_scan_writes_and_parses_report(self, tmp_path: Path):
        report_file = tmp_path / "scan.json"
        report = {"Results": [{"Target": "app", "Vulnerabilities": [{"VulnerabilityID": "CVE-1"}]}]}
        runner = FakeRunner(side_effect=lambda t, a: report_file.write_text(json.dumps(report)))
        scanner = TrivyScanner(runner, extra_args=["--vuln-type", "os", "--ignore-unfixed"])

        findings = await scanner.scan("docker.io/org/app:v1", report_file)

        assert findings.vulnerability_count == 1
        assert runner.calls == [
            (
                "trivy",
                "image",
                "--vuln-type",
                "os",
                "--ignore-unfixed",
                "-f",
                "json",
                "-o",
                str(report_file),
                "docker.io/org/app:v1",
            )
        ]

    def test_parse_null_vulnerabilities(self, tmp_path: Path):
        report_file = tmp_path / "scan.json"
        report_file.write_text('{"Results": [{"Target": "app", "Vulnerabilities": null}]}')

        assert TrivyScanner(FakeRunner()).parse_report(report_file).vulnerability_count == 0

    def test_parse_missing_report(self, tmp_path: Path):
        with pytest.raises(ExternalServiceError, match="did not produce"):
            TrivyScanner(FakeRunner()).parse_report(tmp_path / "scan.json")

    def test_parse_malformed_report(self, tmp_path: Path):
        report_file = tmp_path / "scan.json"
        report_file.write_text("not json")

        with pytest.raises(ExternalServiceError, match="Malformed"):
            TrivyScanner(FakeRunner()).parse_report(report_file)

    def test_available(self):
        assert TrivyScanner(FakeRunner()).available()
        assert not TrivyScanner(FakeRunner(installed=set())).available()


class TestCopaPatcher:
    @pytest.mark.asyncio
    async def test_patch(self, tmp_path: Path):
        runner = FakeRunner()

        await CopaPatcher(runner).patch(tmp_path / "scan.json", "docker.io/org/app:v1", "patched")

        assert runner.calls == [
            ("copa", "patch", "-r", str(tmp_path / "scan.json"), "-i", "docker.io/org/app:v1", "-t", "patched")
        ]


class TestCosignSigner:
    @pytest.mark.asyncio
    async def test_sign_without_tlog(self):
        runner = FakeRunner()

        await CosignSigner(runner).sign("cosign.key", "registry.example.com/app@sha256:abc")

        assert runner.calls == [
            (
                "cosign",
                "sign",
                "--tlog-upload=false",
                "--yes",
                "--key",
                "cosign.key",
                "registry.example.com/app@sha256:abc",
            )
        ]

    @pytest.mark.asyncio
    async def test_sign_with_tlog(self):
        runner = FakeRunner()

        await CosignSigner(runner, tlog_upload=True).sign("k", "r/app@sha256:abc")

        assert "--tlog-upload=true" in runner.calls[0]


class TestToolRunner:
    def test_available_for_missing_tool(self):
        assert not ToolRunner().available("definitely-not-a-real-tool-xyz")

    @pytest.mark.asyncio
    async def test_missing_tool_raises(self):
        with pytest.raises(ToolError) as exc_info:
            await ToolRunner().run("definitely-not-a-real-tool-xyz", "--help")

        assert exc_info.value.returncode == 127
