"""Walks a document tree and emits raw image candidates."""

from typing import Iterable, Iterator

from secure_import.domain.discovery.model.document import (
    DocumentNode,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
)
from secure_import.domain.discovery.model.reference import (
    Candidate,
    CandidateOrigin,
    matches_image_grammar,
)

REPOSITORY_KEY = "repository"
TAG_KEY = "tag"


class ReferenceRecognizer:
    """Extracts image candidates from documents using two rules.

    Structural rule: a mapping with scalar ``repository`` and ``tag`` children
    yields ``"{repository}:{tag}"`` and is not descended into.

    Scalar rule: a scalar that is a whole image reference is emitted as is.
    A flag-style scalar (``--image=registry/repo:tag``) contributes the text
    after its last ``=`` when that text has a ``/`` and is a whole reference.
    """

    def recognize(self, nodes: Iterable[Node]) -> list[Candidate]:
        candidates: list[Candidate] = []
        for node in nodes:
            candidates.extend(self._walk(node))
        return candidates

    def _walk(self, node: Node) -> Iterator[Candidate]:
        match node:
            case ScalarNode(value=value):
                candidate = self._from_scalar(value)
                if candidate is not None:
                    yield candidate
            case MappingNode():
                structural = self._from_mapping(node)
                if structural is not None:
                    yield structural
                    return
                for child in node.children():
                    yield from self._walk(child)
            case SequenceNode() | DocumentNode():
                for child in node.children():
                    yield from self._walk(child)

    def _from_mapping(self, node: MappingNode) -> Candidate | None:
        fields = node.scalar_fields()
        if REPOSITORY_KEY in fields and TAG_KEY in fields:
            return Candidate(
                text=f"{fields[REPOSITORY_KEY]}:{fields[TAG_KEY]}",
                origin=CandidateOrigin.STRUCTURAL,
            )
        return None

    def _from_scalar(self, value: str) -> Candidate | None:
        text = value.strip()
        if matches_image_grammar(text):
            return Candidate(text=text, origin=CandidateOrigin.SCALAR)
        if "=" in text:
            embedded = text.rsplit("=", 1)[1]
            if "/" in embedded and matches_image_grammar(embedded):
                return Candidate(text=embedded, origin=CandidateOrigin.EMBEDDED)
        return None
