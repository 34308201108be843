from secure_import.domain.discovery.model.document import (
    DocumentNode,
    DocumentStream,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
)
from secure_import.domain.discovery.model.reference import (
    Candidate,
    CandidateOrigin,
    ImageReference,
    RejectReason,
    Verdict,
)

__all__ = [
    "Candidate",
    "CandidateOrigin",
    "DocumentNode",
    "DocumentStream",
    "ImageReference",
    "MappingNode",
    "Node",
    "RejectReason",
    "ScalarNode",
    "SequenceNode",
    "Verdict",
]
