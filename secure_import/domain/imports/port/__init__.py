from secure_import.domain.imports.port.capabilities import Capabilities
from secure_import.domain.imports.port.patcher import Patcher
from secure_import.domain.imports.port.registry import Registry
from secure_import.domain.imports.port.renderer import ChartRenderer
from secure_import.domain.imports.port.scanner import Scanner
from secure_import.domain.imports.port.signer import Signer

__all__ = ["Capabilities", "ChartRenderer", "Patcher", "Registry", "Scanner", "Signer"]
