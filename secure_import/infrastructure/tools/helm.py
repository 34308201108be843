"""Helm adapter for the ChartRenderer port."""

from pathlib import Path

from secure_import.domain.shared.error import ExternalServiceError
from secure_import.infrastructure.tools.process import ToolRunner


class HelmRenderer:
    def __init__(self, runner: ToolRunner, helm: str = "helm") -> None:
        self._runner = runner
        self._helm = helm

    async def pull(self, chart: str, version: str, repo: str, dest: Path) -> Path:
        if repo.startswith("oci://"):
            args = ["pull", f"{repo.rstrip('/')}/{chart}", "--version", version]
        else:
            args = ["pull", chart, "--version", version, "--repo", repo]
        await self._runner.run(self._helm, *args, "--destination", str(dest))

        archive = dest / f"{chart}-{version}.tgz"
        if not archive.exists():
            raise ExternalServiceError(f"helm pull did not produce {archive.name}")
        return archive

    async def render(self, archive: Path, values: Path | None = None) -> str:
        args = ["template", str(archive)]
        if values is not None:
            args += ["-f", str(values)]
        result = await self._runner.run(self._helm, *args)
        return result.stdout

    async def push(self, archive: Path, destination: str) -> None:
        await self._runner.run(self._helm, "push", str(archive), destination)
