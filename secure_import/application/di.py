from dishka import AsyncContainer, Provider, Scope, from_context, make_async_container, provide

from secure_import.application.service import ImportService
from secure_import.config import Config, ImportOptions
from secure_import.domain.discovery.service.discovery import ImageDiscovery
from secure_import.domain.imports.port.capabilities import Capabilities
from secure_import.domain.imports.port.registry import Registry
from secure_import.domain.imports.port.renderer import ChartRenderer
from secure_import.domain.imports.port.signer import Signer
from secure_import.domain.imports.service.chart import ChartImporter
from secure_import.domain.imports.service.pipeline import ImportPipeline
from secure_import.domain.imports.service.pool import WorkerPool
from secure_import.domain.report.service.aggregator import ReportAggregator
from secure_import.infrastructure.oci.di import OciProvider
from secure_import.infrastructure.tools.di import ToolsProvider


class ImportProvider(Provider):
    scope = Scope.APP

    config = from_context(provides=Config, scope=Scope.APP)
    options = from_context(provides=ImportOptions, scope=Scope.APP)

    @provide
    def get_discovery(self) -> ImageDiscovery:
        return ImageDiscovery()

    @provide
    def get_aggregator(self) -> ReportAggregator:
        return ReportAggregator()

    @provide
    def get_chart_importer(
        self,
        renderer: ChartRenderer,
        registry: Registry,
        signer: Signer,
        options: ImportOptions,
    ) -> ChartImporter:
        return ChartImporter(
            renderer=renderer,
            registry=registry,
            target_registry=options.registry,
            signer=signer,
            sign_key=options.sign_key,
            dry_run=options.dry_run,
        )

    @provide
    def get_pipeline(
        self, registry: Registry, capabilities: Capabilities, options: ImportOptions
    ) -> ImportPipeline:
        return ImportPipeline(
            registry=registry,
            capabilities=capabilities,
            target_registry=options.registry,
            sign_key=options.sign_key,
            dry_run=options.dry_run,
        )

    @provide
    def get_pool(self, pipeline: ImportPipeline, config: Config) -> WorkerPool:
        return WorkerPool(pipeline, max_workers=config.max_workers)

    @provide
    def get_service(
        self,
        options: ImportOptions,
        charts: ChartImporter,
        renderer: ChartRenderer,
        discovery: ImageDiscovery,
        pool: WorkerPool,
        aggregator: ReportAggregator,
    ) -> ImportService:
        return ImportService(
            options=options,
            charts=charts,
            renderer=renderer,
            discovery=discovery,
            pool=pool,
            aggregator=aggregator,
        )


def create_container(config: Config, options: ImportOptions) -> AsyncContainer:
    return make_async_container(
        ImportProvider(),
        OciProvider(),
        ToolsProvider(),
        context={Config: config, ImportOptions: options},
    )
