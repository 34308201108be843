"""Parse rendered chart output into a DocumentStream using PyYAML's composer.

Composing (rather than loading) keeps every scalar as its original text, so
``1.20`` stays ``"1.20"`` and is never turned into a float.
"""

import yaml

from secure_import.domain.discovery.model.document import (
    DocumentNode,
    DocumentStream,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
)
from secure_import.domain.shared.error import DiscoveryError

# Upper bound on converted nodes per document, counting every alias expansion.
MAX_NODES = 100_000


class _NodeBudget:
    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.used = 0

    def spend(self, node: yaml.Node) -> None:
        self.used += 1
        if self.used > self.limit:
            raise DiscoveryError(
                f"YAML document expands to more than {self.limit} nodes "
                f"(alias expansion near {node.start_mark})"
            )


def parse_documents(text: str, max_nodes: int = MAX_NODES) -> DocumentStream:
    """Parse a multi-document YAML stream.

    Raises:
        DiscoveryError: If the text is not valid YAML, contains a recursive
            alias, or a document expands to more than ``max_nodes`` nodes.
    """
    try:
        documents = tuple(
            DocumentNode(content=_convert(node, frozenset(), _NodeBudget(max_nodes)))
            for node in yaml.compose_all(text, Loader=yaml.SafeLoader)
            if node is not None
        )
    except yaml.YAMLError as e:
        raise DiscoveryError(f"Failed to decode YAML: {e}") from e
    return DocumentStream(documents=documents)


def _convert(node: yaml.Node, ancestors: frozenset[int], budget: _NodeBudget) -> Node:
    if id(node) in ancestors:
        raise DiscoveryError(f"Recursive YAML alias at {node.start_mark}")
    budget.spend(node)
    ancestors = ancestors | {id(node)}

    if isinstance(node, yaml.MappingNode):
        return MappingNode(
            pairs=tuple(
                (_convert(key, ancestors, budget), _convert(value, ancestors, budget))
                for key, value in node.value
            )
        )
    if isinstance(node, yaml.SequenceNode):
        return SequenceNode(items=tuple(_convert(item, ancestors, budget) for item in node.value))
    return ScalarNode(value=str(node.value))
