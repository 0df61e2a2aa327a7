"""
Exhaustive nearest-neighbour ranking over the embedding store.
"""

import heapq
import math
import time
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .distance import cosine_distance
from .store import IVectorStore
from .types import SearchHit
from util.logging import logger


class SimilarityRanker:
    """
    Scores a query against every stored record and returns the closest ones.

    Ordering is ascending cosine distance. NaN distances (corrupt stored
    values) sort after every real distance. Equal distances keep the store's
    enumeration order.
    """

    def __init__(self, store: IVectorStore):
        self.store = store

    def search(self, query: Sequence[float], limit: int) -> List[SearchHit]:
        """
        Find the `limit` records nearest to `query`.

        Args:
            query: Query vector
            limit: Maximum number of hits to return

        Returns:
            Hits ordered by non-decreasing distance; empty when the store is empty

        Raises:
            ValueError: If limit is negative
            StorageError: If the store cannot be read
        """
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        start_time = time.time()
        query_vector = np.asarray(query, dtype=np.float32)

        # Bounded selection; same result as a stable sort followed by truncation
        top = heapq.nsmallest(limit, self._score(query_vector), key=lambda item: item[0])
        hits = [hit for _, hit in top]

        logger.log_search(len(query_vector), limit, len(hits), start_time, time.time())
        return hits

    def _score(self, query_vector: np.ndarray) -> Iterator[Tuple[tuple, SearchHit]]:
        for position, record in enumerate(self.store.enumerate()):
            distance = cosine_distance(query_vector, record.vector)
            yield _sort_key(distance, position), SearchHit(label=record.label, distance=distance)


def _sort_key(distance: float, position: int) -> tuple:
    # NaN last, ties broken by enumeration order
    if math.isnan(distance):
        return (1, 0.0, position)
    return (0, distance, position)
