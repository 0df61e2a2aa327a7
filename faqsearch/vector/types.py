"""
Record types for the embedding store and ranker.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union


@dataclass(frozen=True)
class EmbeddingRecord:
    """A labeled vector as stored on disk."""

    label: str
    """Human-readable payload, e.g. a question and its answer"""

    vector: Sequence[float]
    """float32 values; dimensionality is whatever the embedding source produced"""


@dataclass(frozen=True)
class SearchHit:
    """A ranked match returned by the similarity ranker."""

    label: str
    """Label of the matching record"""

    distance: float
    """Cosine distance to the query, in [0, 2] (NaN only for corrupt vectors)"""

    @property
    def similarity(self) -> float:
        return 1.0 - self.distance

    def __iter__(self) -> Iterator[Union[str, float]]:
        # Allows `label, distance = hit`
        return iter((self.label, self.distance))

    def as_tuple(self) -> Tuple[str, float]:
        return (self.label, self.distance)
