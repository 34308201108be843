"""Rejects strings that match the image grammar but are something else.

Rendered charts are full of ``name:value`` shapes. Three heuristics weed out
the common look-alikes; anything they do not catch is kept.
"""

import logging
import re
from typing import Callable

from secure_import.domain.discovery.model.reference import (
    Candidate,
    RejectReason,
    Verdict,
    matches_image_grammar,
)

logger = logging.getLogger(__name__)

# Tags that look like words but are common, legitimate image tags.
WORD_TAG_ALLOWLIST = frozenset(
    {
        "latest",
        "stable",
        "dev",
        "prod",
        "test",
        "canary",
        "alpine",
        "scratch",
        "distroless",
        "slim",
    }
)

# Recording-rule names from kube-prometheus style charts.
METRIC_PREFIXES = ("apiserver_request", "count", "node_namespace_pod_container")
_METRIC_FAMILIES = tuple(f"{prefix}_" for prefix in METRIC_PREFIXES)

_WORDS_AND_HYPHENS = re.compile(r"[A-Za-z-]+")
_UP_COUNTER = re.compile(r"up\d+")
_TIME_WINDOW = re.compile(r"\d[smhd]$")


def _split(text: str) -> tuple[str, str]:
    repository, _, tag = text.rpartition(":")
    return repository, tag


def is_port_reference(text: str) -> bool:
    """``release-name-argocd-repo-server:8081`` is a service and a port."""
    repository, tag = _split(text)
    return (
        "/" not in repository
        and tag.isdigit()
        and len(tag) >= 4
        and "-" in repository
    )


def is_label(text: str) -> bool:
    """``crossplane:aggregate-to-admin`` is an RBAC label, not an image."""
    repository, tag = _split(text)
    if "/" in repository or "." in repository or ":" in repository:
        return False
    if any(c.isdigit() for c in tag):
        return False
    if tag in WORD_TAG_ALLOWLIST:
        return False
    return _WORDS_AND_HYPHENS.fullmatch(tag) is not None


def is_metric_name(text: str) -> bool:
    """``apiserver_request:burnrate5m`` is a Prometheus recording rule."""
    repository, tag = _split(text)
    if "/" in repository:
        return False
    if repository not in METRIC_PREFIXES and not repository.startswith(_METRIC_FAMILIES):
        return False
    return (
        tag.startswith("availability")
        or tag.startswith("burnrate")
        or tag.startswith("container_memory")
        or _UP_COUNTER.fullmatch(tag) is not None
        or _TIME_WINDOW.search(tag) is not None
    )


HEURISTICS: tuple[tuple[RejectReason, Callable[[str], bool]], ...] = (
    (RejectReason.PORT, is_port_reference),
    (RejectReason.LABEL, is_label),
    (RejectReason.METRIC, is_metric_name),
)


class FalsePositiveClassifier:
    """Ordered, short-circuiting chain of reject predicates.

    Classification depends only on the candidate text.
    """

    def __init__(
        self,
        heuristics: tuple[tuple[RejectReason, Callable[[str], bool]], ...] = HEURISTICS,
    ) -> None:
        self._heuristics = heuristics

    def classify(self, candidate: Candidate) -> Verdict:
        if not matches_image_grammar(candidate.text):
            return Verdict.reject(RejectReason.GRAMMAR)
        for reason, predicate in self._heuristics:
            if predicate(candidate.text):
                logger.debug("Rejected %s candidate %r (%s)", candidate.origin, candidate.text, reason)
                return Verdict.reject(reason)
        return Verdict.accept()

    def accepted(self, candidates: list[Candidate]) -> list[Candidate]:
        return [c for c in candidates if self.classify(c).accepted]
