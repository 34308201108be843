"""Structured scanner findings (the ``results[].vulnerabilities[]`` shape)."""

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from secure_import.domain.shared.model.value import ValueObject


class ScanResult(ValueObject):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    target: str = Field(default="", alias="Target")
    vulnerabilities: list[dict[str, Any]] = Field(default_factory=list, alias="Vulnerabilities")

    @field_validator("vulnerabilities", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        # The scanner writes null rather than [] for clean targets
        return value if value is not None else []


class ScanFindings(ValueObject):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    results: list[ScanResult] = Field(default_factory=list, alias="Results")

    @field_validator("results", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return value if value is not None else []

    @property
    def vulnerability_count(self) -> int:
        return sum(len(r.vulnerabilities) for r in self.results)

    @property
    def has_vulnerabilities(self) -> bool:
        return self.vulnerability_count > 0
