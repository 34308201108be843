"""ChartRenderer port - fetching, templating and publishing the chart archive."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ChartRenderer(Protocol):
    async def pull(self, chart: str, version: str, repo: str, dest: Path) -> Path:
        """Download the chart archive into ``dest`` and return its path."""
        ...

    async def render(self, archive: Path, values: Path | None = None) -> str:
        """Render the chart templates to a multi-document YAML string."""
        ...

    async def push(self, archive: Path, destination: str) -> None:
        """Push the archive to an OCI destination such as ``oci://host/charts/``."""
        ...
