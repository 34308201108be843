from dishka import Provider, Scope, provide

from secure_import.config import Config
from secure_import.domain.imports.port.capabilities import Capabilities
from secure_import.domain.imports.port.patcher import Patcher
from secure_import.domain.imports.port.renderer import ChartRenderer
from secure_import.domain.imports.port.scanner import Scanner
from secure_import.domain.imports.port.signer import Signer
from secure_import.infrastructure.tools.copa import CopaPatcher
from secure_import.infrastructure.tools.cosign import CosignSigner
from secure_import.infrastructure.tools.helm import HelmRenderer
from secure_import.infrastructure.tools.process import ToolRunner
from secure_import.infrastructure.tools.trivy import TrivyScanner


class ToolsProvider(Provider):
    scope = Scope.APP

    runner = provide(ToolRunner)

    @provide
    def get_renderer(self, runner: ToolRunner, config: Config) -> ChartRenderer:
        return HelmRenderer(runner, helm=config.tools.helm)

    @provide
    def get_scanner(self, runner: ToolRunner, config: Config) -> Scanner:
        return TrivyScanner(runner, trivy=config.tools.trivy, extra_args=config.tools.trivy_args)

    @provide
    def get_patcher(self, runner: ToolRunner, config: Config) -> Patcher:
        return CopaPatcher(runner, copa=config.tools.copa)

    @provide
    def get_signer(self, runner: ToolRunner, config: Config) -> Signer:
        return CosignSigner(runner, cosign=config.tools.cosign, tlog_upload=config.tools.cosign_tlog_upload)

    @provide
    def get_capabilities(self, scanner: Scanner, patcher: Patcher, signer: Signer) -> Capabilities:
        return Capabilities(scanner=scanner, patcher=patcher, signer=signer)
