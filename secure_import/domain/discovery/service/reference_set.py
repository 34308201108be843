from typing import Iterable

from secure_import.domain.discovery.model.reference import Candidate, ImageReference


class ReferenceSet:
    """Deduplicated, sorted image references built from accepted candidates."""

    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        self._texts: set[str] = set()
        for candidate in candidates:
            self.add(candidate)

    def add(self, candidate: Candidate) -> None:
        self._texts.add(candidate.text)

    def texts(self) -> list[str]:
        return sorted(self._texts)

    def references(self) -> list[ImageReference]:
        return [ImageReference.parse(text) for text in self.texts()]

    def __len__(self) -> int:
        return len(self._texts)
