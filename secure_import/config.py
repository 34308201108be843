import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from secure_import.domain.shared.error import ValidationError

# =============================================================================
# Run Options (one invocation of the importer)
# =============================================================================

ReportFormat = Literal["table", "json"]

CHART_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
SEMVER_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(-[a-zA-Z0-9.-]+)?(\+[a-zA-Z0-9.-]+)?$")


class ImportOptions(BaseSettings):
    """Options for a single import run.

    ``registry`` and ``sign_key`` fall back to HELM_REGISTRY / HELM_SIGN_KEY
    when not passed explicitly. Pass only the values the user actually gave;
    an explicit value always wins over the environment.
    """

    chart: str = ""
    version: str = ""
    repo: str = ""
    registry: str = Field(default="", validation_alias="HELM_REGISTRY")
    values: Path | None = None
    sign_key: str | None = Field(default=None, validation_alias="HELM_SIGN_KEY")
    report_format: str = "table"
    report_file: Path | None = None
    dry_run: bool = False

    model_config = {
        "env_prefix": "HELM_SECURE_IMPORT_",
        "populate_by_name": True,
        "extra": "ignore",
    }

    def check(self) -> None:
        """Pre-flight validation.

        Raises:
            ValidationError: On the first problem found, naming the offending field.
        """
        missing = [
            name
            for name, value in (
                ("chart", self.chart),
                ("version", self.version),
                ("repo", self.repo),
                ("registry", self.registry),
            )
            if not value
        ]
        if missing:
            raise ValidationError(
                f"Missing required flags: {', '.join(missing)}. "
                "Run 'helm secure-import --help' for usage information",
                field=missing[0],
            )

        if not CHART_NAME_PATTERN.match(self.chart):
            raise ValidationError(
                f"Invalid chart name '{self.chart}': must contain only alphanumeric "
                "characters, hyphens, and underscores",
                field="chart",
            )

        if not SEMVER_PATTERN.match(self.version):
            raise ValidationError(
                f"Invalid version '{self.version}': must follow semantic versioning "
                "format (e.g., 1.2.3, 1.0.0-alpha)",
                field="version",
            )

        if self.values is not None and not self.values.exists():
            raise ValidationError(f"Values file does not exist: {self.values}", field="values")

        if not self.registry.startswith("localhost:") and "." not in self.registry:
            raise ValidationError(f"Invalid registry format: {self.registry}", field="registry")

        if self.report_format not in ("table", "json"):
            raise ValidationError(
                f"Invalid report format: {self.report_format}", field="report_format"
            )


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by SECURE_IMPORT_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        config_file = os.environ.get("SECURE_IMPORT_CONFIG_FILE")
        if config_file:
            path = Path(config_file).expanduser()
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from SECURE_IMPORT_LOG_FILE env var."""
        return os.environ.get("SECURE_IMPORT_LOG_FILE")


class RegistryConfig(BaseModel):
    """Credentials and transport settings for registry HTTP calls."""

    username: str | None = None
    password: str | None = None
    plain_http: list[str] = ["localhost", "127.0.0.1"]  # hosts reached over http://
    timeout_seconds: float = 30.0

    def scheme_for(self, host: str) -> str:
        hostname = host.split(":", 1)[0]
        return "http" if hostname in self.plain_http else "https"


class ToolsConfig(BaseModel):
    """Executable names of the external tools (looked up on PATH)."""

    helm: str = "helm"
    trivy: str = "trivy"
    copa: str = "copa"
    cosign: str = "cosign"
    trivy_args: list[str] = ["--vuln-type", "os", "--ignore-unfixed"]
    cosign_tlog_upload: bool = False


class Config(BaseSettings):
    logging: LoggingConfig = LoggingConfig()
    registry: RegistryConfig = RegistryConfig()
    tools: ToolsConfig = ToolsConfig()
    max_workers: int = Field(default=4, ge=1, le=4)  # upper bound on concurrent image imports

    model_config = {
        "env_prefix": "SECURE_IMPORT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows SECURE_IMPORT_REGISTRY__USERNAME override
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority (highest to lowest): init, env, .env, YAML file, secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Call once at CLI startup, before any work is done.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        # stdout carries the report; logs go to stderr
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiodocker").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
