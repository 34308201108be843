"""In-memory tree of a rendered configuration document.

The renderer emits a stream of YAML documents. Each document is parsed into
an acyclic tree of four node variants. Mapping keys are nodes too, so key
text takes part in discovery just like value text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union


@dataclass(frozen=True)
class ScalarNode:
    value: str


@dataclass(frozen=True)
class SequenceNode:
    items: tuple[Node, ...] = ()

    def children(self) -> Iterator[Node]:
        yield from self.items


@dataclass(frozen=True)
class MappingNode:
    pairs: tuple[tuple[Node, Node], ...] = ()

    def children(self) -> Iterator[Node]:
        """Keys and values in document order."""
        for key, value in self.pairs:
            yield key
            yield value

    def scalar_fields(self) -> dict[str, str]:
        """Direct children whose key and value are both scalars.

        A repeated key keeps its last value.
        """
        fields: dict[str, str] = {}
        for key, value in self.pairs:
            if isinstance(key, ScalarNode) and isinstance(value, ScalarNode):
                fields[key.value] = value.value
        return fields


@dataclass(frozen=True)
class DocumentNode:
    content: Node | None = None

    def children(self) -> Iterator[Node]:
        if self.content is not None:
            yield self.content


Node = Union[ScalarNode, SequenceNode, MappingNode, DocumentNode]


@dataclass(frozen=True)
class DocumentStream:
    """All documents produced by one render."""

    documents: tuple[DocumentNode, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[DocumentNode]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)
