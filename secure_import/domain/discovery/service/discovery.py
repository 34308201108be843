"""ImageDiscovery - turns a rendered chart into a set of image references."""

import logging
from dataclasses import field

from secure_import.domain.discovery.model.document import DocumentStream
from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.discovery.service.classifier import FalsePositiveClassifier
from secure_import.domain.discovery.service.recognizer import ReferenceRecognizer
from secure_import.domain.discovery.service.reference_set import ReferenceSet
from secure_import.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ImageDiscovery(Service):
    """Recognize, classify and collect image references from documents."""

    recognizer: ReferenceRecognizer = field(default_factory=ReferenceRecognizer)
    classifier: FalsePositiveClassifier = field(default_factory=FalsePositiveClassifier)

    def discover(self, stream: DocumentStream) -> list[ImageReference]:
        """Return the sorted, deduplicated image references in ``stream``."""
        candidates = self.recognizer.recognize(stream)
        accepted = self.classifier.accepted(candidates)
        references = ReferenceSet(accepted).references()
        logger.info(
            "Discovered %d image(s) from %d candidate(s) in %d document(s)",
            len(references),
            len(candidates),
            len(stream),
        )
        return references
