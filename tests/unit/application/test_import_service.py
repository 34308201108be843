"""Unit tests for ImportService orchestration."""

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from secure_import.application.service import ImportService
from secure_import.config import ImportOptions
from secure_import.domain.discovery.service.discovery import ImageDiscovery
from secure_import.domain.imports.model.outcome import ChartOutcome, ImportOutcome, ImportStatus
from secure_import.domain.report.service.aggregator import ReportAggregator
from secure_import.domain.shared.error import ChartImportError, DiscoveryError, ToolError

RENDERED = """
apiVersion: apps/v1
kind: Deployment
spec:
  template:
    spec:
      containers:
        - name: server
          image: quay.io/argoproj/argocd:v2.11.3
        - name: redis
          image: public.ecr.aws/docker/library/redis:7.2.4-alpine
          ports:
            - name: redis
              containerPort: 6379
---
apiVersion: v1
kind: Service
metadata:
  name: release-name-argocd-repo-server
  annotations:
    endpoint: release-name-argocd-repo-server:8081
"""


@pytest.fixture
def options() -> ImportOptions:
    return ImportOptions(
        chart="argo-cd",
        version="7.3.4",
        repo="https://argoproj.github.io/argo-helm",
        registry="registry.example.com",
    )


@pytest.fixture
def charts() -> MagicMock:
    charts = MagicMock()
    charts.pull = AsyncMock(side_effect=lambda chart, version, repo, dest: dest / f"{chart}-{version}.tgz")
    charts.publish = AsyncMock(
        return_value=ChartOutcome(reference="registry.example.com/charts/argo-cd:7.3.4", pushed=True)
    )
    return charts


@pytest.fixture
def renderer() -> MagicMock:
    renderer = MagicMock()
    renderer.render = AsyncMock(return_value=RENDERED)
    return renderer


@pytest.fixture
def pool() -> MagicMock:
    pool = MagicMock()
    pool.run = AsyncMock(
        side_effect=lambda refs: [ImportOutcome(reference=r, status=ImportStatus.PUSHED) for r in refs]
    )
    return pool


def service(options, charts, renderer, pool) -> ImportService:
    return ImportService(
        options=options,
        charts=charts,
        renderer=renderer,
        discovery=ImageDiscovery(),
        pool=pool,
        aggregator=ReportAggregator(clock=lambda: datetime(2024, 1, 1, tzinfo=UTC)),
    )


class TestImportService:
    @pytest.mark.asyncio
    async def test_run_end_to_end(self, options, charts, renderer, pool):
        report = await service(options, charts, renderer, pool).run()

        assert report.chart.pushed
        assert [str(o.reference) for o in report.images] == [
            "public.ecr.aws/docker/library/redis:7.2.4-alpine",
            "quay.io/argoproj/argocd:v2.11.3",
        ]
        assert report.summary.images_pushed == 2

        archive = charts.publish.await_args.args[0]
        assert archive.name == "argo-cd-7.3.4.tgz"
        # the run workspace is gone once the chart stage is over
        assert not Path(archive).parent.exists()

    @pytest.mark.asyncio
    async def test_chart_stage_runs_before_pool(self, options, charts, renderer, pool):
        order: list[str] = []
        charts.publish.side_effect = lambda *a: order.append("chart") or ChartOutcome(reference="r", pushed=True)
        pool.run.side_effect = lambda refs: order.append("pool") or []

        await service(options, charts, renderer, pool).run()

        assert order == ["chart", "pool"]

    @pytest.mark.asyncio
    async def test_chart_failure_aborts(self, options, charts, renderer, pool):
        charts.publish.side_effect = ChartImportError("Failed to push chart")

        with pytest.raises(ChartImportError):
            await service(options, charts, renderer, pool).run()

        pool.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_render_failure_is_discovery_error(self, options, charts, renderer, pool):
        renderer.render.side_effect = ToolError("helm", 1, "template error")

        with pytest.raises(DiscoveryError, match="Failed to template chart"):
            await service(options, charts, renderer, pool).run()

        pool.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_values_file_is_passed_to_renderer(self, options, charts, renderer, pool, tmp_path):
        values = tmp_path / "values.yaml"
        values.write_text("replicas: 1\n")
        options = options.model_copy(update={"values": values})

        await service(options, charts, renderer, pool).run()

        assert renderer.render.await_args.args[1] == values
