"""
Adapter: In-process vector index.

Implements VectorIndexPort with cosine similarity over numpy arrays.
Used for local development, tests and single-node deployments where
no external vector database is configured. Contents are lost on restart.

Beyond the port, `count` reports how many entries a namespace holds.
"""

import logging
from typing import Any, Optional

import numpy as np

from pattern_intel.domain.patterns.entities import (
    IndexEntry,
    IndexHealth,
    IndexStatus,
    SearchHit,
)
from pattern_intel.domain.patterns.ports import VectorIndexPort

logger = logging.getLogger(__name__)


class InMemoryVectorIndexAdapter(VectorIndexPort):
    """Keeps vectors per namespace in a dict keyed by entry id."""

    def __init__(self, dimension: int) -> None:
        self._dimension = dimension
        self._namespaces: dict[str, dict[str, tuple[np.ndarray, dict[str, Any]]]] = {}

    def _check_dimension(self, vector: list[float], what: str) -> np.ndarray:
        array = np.asarray(vector, dtype=float)
        if array.shape != (self._dimension,):
            raise ValueError(
                f"{what} has dimension {array.size}, expected {self._dimension}"
            )
        return array

    async def upsert(self, entries: list[IndexEntry], namespace: str) -> None:
        """Insert or replace entries. The last write for an id wins.

        Raises:
            ValueError: If any vector has the wrong dimension. Nothing is
                written in that case.
        """
        arrays = [self._check_dimension(e.vector, f"Vector {e.id}") for e in entries]
        store = self._namespaces.setdefault(namespace, {})
        for entry, array in zip(entries, arrays):
            store[entry.id] = (array, dict(entry.metadata))
        logger.debug(
            "Stored %d vectors in namespace=%s (%d total)",
            len(entries),
            namespace,
            self.count(namespace),
        )

    async def search(
        self,
        namespace: str,
        vector: list[float],
        top_k: int,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[SearchHit]:
        """Return the top_k entries by cosine similarity, best first."""
        store = self._namespaces.get(namespace)
        if not store or top_k <= 0:
            return []

        query = self._check_dimension(vector, "Query vector")
        candidates = [
            (entry_id, array, metadata)
            for entry_id, (array, metadata) in store.items()
            if _matches(metadata, filter)
        ]
        if not candidates:
            return []

        matrix = np.vstack([array for _, array, _ in candidates])
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        dots = matrix @ query
        scores = np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)

        # stable so equal scores keep insertion order
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [
            SearchHit(
                id=candidates[i][0],
                score=float(scores[i]),
                metadata=dict(candidates[i][2]),
            )
            for i in order
        ]

    async def ping(self) -> IndexHealth:
        return IndexHealth(status=IndexStatus.OK, version="in-memory", latency_ms=0.0)

    def count(self, namespace: str) -> int:
        """Return the number of entries stored in a namespace."""
        return len(self._namespaces.get(namespace, {}))


def _matches(metadata: dict[str, Any], filter: Optional[dict[str, Any]]) -> bool:
    if not filter:
        return True
    return all(metadata.get(key) == value for key, value in filter.items())
