"""Error hierarchy for secure-import.

Error layers:
- SecureImportError: Base class for all secure-import errors
- DomainError: Bad input or rule violations (pre-flight, malformed references)
- InfrastructureError: Failures of external tools, registries or the Docker daemon

Stage errors (ChartImportError, DiscoveryError) are fatal for the run.
ImageImportError is isolated per image by the worker pool.
"""


class SecureImportError(Exception):
    """Base class for all secure-import errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(SecureImportError):
    """Base class for domain errors."""


class ValidationError(DomainError):
    """Pre-flight validation of run options failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidReferenceError(DomainError):
    """A string could not be parsed as an image reference."""


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(SecureImportError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """External service (registry, Docker daemon) is unavailable or failed."""


class RegistryError(ExternalServiceError):
    """Registry answered with an unexpected status."""

    def __init__(self, message: str, reference: str, status: int | None = None) -> None:
        super().__init__(message, code="REGISTRY_ERROR")
        self.reference = reference
        self.status = status


class ToolError(ExternalServiceError):
    """An external command-line tool exited with a non-zero status."""

    def __init__(self, tool: str, returncode: int, stderr: str = "") -> None:
        message = f"{tool} exited with code {returncode}"
        if stderr:
            message = f"{message}: {stderr[:500]}"
        super().__init__(message, code="TOOL_ERROR")
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr


# =============================================================================
# Stage Errors
# =============================================================================


class ChartImportError(SecureImportError):
    """Pulling, pushing or signing the chart failed. Aborts the run."""


class DiscoveryError(SecureImportError):
    """Rendering the chart or extracting image references failed. Aborts the run."""


class ImageImportError(SecureImportError):
    """A single image failed somewhere in its import pipeline."""

    def __init__(self, reference: str, operation: str, cause: Exception) -> None:
        super().__init__(f"{operation} failed for {reference}: {cause}")
        self.reference = reference
        self.operation = operation
        self.cause = cause
