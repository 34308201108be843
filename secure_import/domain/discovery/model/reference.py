from __future__ import annotations

import re
from enum import StrEnum
from functools import total_ordering

from pydantic import model_validator

from secure_import.domain.shared.error import InvalidReferenceError
from secure_import.domain.shared.model.value import ValueObject

DEFAULT_SOURCE_REGISTRY = "docker.io"

# [host[:port]/]segment(/segment)*:tag, matched end to end
IMAGE_PATTERN = re.compile(
    r"(?:[A-Za-z0-9][A-Za-z0-9.-]*(?::[0-9]+)?/)?"
    r"[A-Za-z0-9_-]+(?:/[A-Za-z0-9_-]+)*"
    r":[A-Za-z0-9._+-]+"
)


def matches_image_grammar(text: str) -> bool:
    return IMAGE_PATTERN.fullmatch(text) is not None


class CandidateOrigin(StrEnum):
    STRUCTURAL = "structural"  # repository + tag siblings in one mapping
    SCALAR = "scalar"  # a whole scalar value
    EMBEDDED = "embedded"  # value after the last '=' in a flag-style scalar


class Candidate(ValueObject):
    """Raw string pulled out of a document that may denote an image."""

    text: str
    origin: CandidateOrigin


class RejectReason(StrEnum):
    GRAMMAR = "grammar"
    PORT = "port"
    LABEL = "label"
    METRIC = "metric"


class Verdict(ValueObject):
    accepted: bool
    reason: RejectReason | None = None

    @classmethod
    def accept(cls) -> Verdict:
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectReason) -> Verdict:
        return cls(accepted=False, reason=reason)


@total_ordering
class ImageReference(ValueObject):
    """Immutable reference to a container image.

    Equality and ordering follow the canonical string form.
    """

    registry: str | None = None  # e.g., ghcr.io, localhost:5000
    repository: str  # e.g., bitnami/redis
    tag: str | None = None  # e.g., 7.2.4
    digest: str | None = None  # e.g., sha256:abc123...

    @model_validator(mode="after")
    def _check_parts(self) -> ImageReference:
        if not self.repository:
            raise ValueError("repository must not be empty")
        if bool(self.tag) == bool(self.digest):
            raise ValueError("exactly one of tag or digest is required")
        return self

    @classmethod
    def parse(cls, value: str) -> ImageReference:
        """Parse ``[registry/]repository(:tag|@digest)``.

        The first path segment is treated as a registry host when it looks
        like one: it contains a dot or a port, or is ``localhost``.
        """
        text = value.strip()
        registry: str | None = None
        remainder = text
        first, sep, rest = text.partition("/")
        if sep and ("." in first or ":" in first or first == "localhost"):
            registry, remainder = first, rest

        tag: str | None = None
        digest: str | None = None
        if "@" in remainder:
            repository, _, digest = remainder.partition("@")
        else:
            repository, sep, tag = remainder.rpartition(":")
            if not sep:
                raise InvalidReferenceError(f"No tag or digest in image reference: {value}")

        try:
            return cls(registry=registry, repository=repository, tag=tag, digest=digest)
        except ValueError as e:
            raise InvalidReferenceError(f"Invalid image reference '{value}': {e}") from e

    @property
    def version(self) -> str:
        """The ``:tag`` or ``@digest`` suffix."""
        if self.digest:
            return f"@{self.digest}"
        return f":{self.tag}"

    @property
    def canonical(self) -> str:
        prefix = f"{self.registry}/" if self.registry else ""
        return f"{prefix}{self.repository}{self.version}"

    @property
    def source(self) -> str:
        """Where to pull the original image from."""
        registry = self.registry or DEFAULT_SOURCE_REGISTRY
        return f"{registry}/{self.repository}{self.version}"

    def target(self, registry: str) -> str:
        """The same repository and version inside another registry."""
        return f"{registry}/{self.repository}{self.version}"

    def at_digest(self, registry: str, digest: str) -> str:
        return f"{registry}/{self.repository}@{digest}"

    def with_tag(self, tag: str) -> ImageReference:
        return ImageReference(registry=self.registry, repository=self.repository, tag=tag)

    def __str__(self) -> str:
        return self.canonical

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageReference):
            return NotImplemented
        return self.canonical == other.canonical

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ImageReference):
            return NotImplemented
        return self.canonical < other.canonical

    def __hash__(self) -> int:
        return hash(self.canonical)
