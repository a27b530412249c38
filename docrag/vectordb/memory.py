"""In-memory vector store (NumPy, zero extra services).

Storage:
  - Entries in a Python list, in insertion order
  - Embeddings stacked into a float64 matrix on demand (rebuilt after writes)

Retrieval:
  - Exact cosine similarity against every entry in NumPy
  - Top-k selection with a heap; ties keep insertion order

Thread safety:
  - One lock guards the entry list for every read and write, so a search
    never observes a half-written entry.
"""

from __future__ import annotations

from dataclasses import replace
import heapq
import threading
from typing import List, Mapping, Optional, Sequence

import numpy as np
import structlog

from ..errors import DimensionMismatchError
from .base import Entry, Metadata, MetadataValue, SearchResult, VectorStore

logger = structlog.get_logger()

_METADATA_TYPES = (str, int, float, bool, type(None))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Args:
        a: First vector.
        b: Second vector, same length as `a`.

    Returns:
        Similarity in [-1, 1], or 0.0 if either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the lengths differ.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(expected=len(va), actual=len(vb))
    na = float(np.linalg.norm(va))
    nb = float(np.linalg.norm(vb))
    if na == 0.0 or nb == 0.0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / (na * nb), -1.0, 1.0))


def _cosine_scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of `query` against every row of `matrix`."""
    denom = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(denom > 0.0, dots / denom, 0.0)
    return np.clip(scores, -1.0, 1.0)


def _copy_metadata(metadata: Optional[Mapping[str, MetadataValue]]) -> Optional[Metadata]:
    if metadata is None:
        return None
    out: Metadata = {}
    for key, value in metadata.items():
        if not isinstance(key, str):
            raise TypeError(f"Metadata keys must be str (got {type(key).__name__}).")
        if not isinstance(value, _METADATA_TYPES):
            raise TypeError(
                f"Metadata value for {key!r} must be str, int, float, bool or None (got {type(value).__name__})."
            )
        out[key] = value
    return out


class InMemoryVectorStore(VectorStore):
    """Vector store held entirely in process memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: List[Entry] = []
        self._dimension: Optional[int] = None
        self._matrix: Optional[np.ndarray] = None

    @property
    def dimension(self) -> Optional[int]:
        """Dimensionality of stored embeddings, or None while empty."""
        with self._lock:
            return self._dimension

    def add(
        self,
        id: int,
        text: str,
        embedding: Sequence[float],
        metadata: Optional[Mapping[str, MetadataValue]] = None,
    ) -> Entry:
        """Append an entry.

        The first entry fixes the store's dimensionality.

        Args:
            id: Entry id (not checked for uniqueness).
            text: Chunk text.
            embedding: Embedding vector.
            metadata: Optional flat metadata.

        Returns:
            The stored entry.

        Raises:
            ValueError: If the embedding is empty or not one-dimensional.
            TypeError: If metadata holds unsupported value types.
            DimensionMismatchError: If the embedding length differs from the store's.
        """
        vec = np.asarray(embedding, dtype=np.float64)
        if vec.ndim != 1 or vec.shape[0] == 0:
            raise ValueError("Embedding must be a non-empty one-dimensional vector.")

        entry = Entry(
            id=int(id),
            text=text,
            embedding=tuple(float(x) for x in vec),
            metadata=_copy_metadata(metadata),
        )

        with self._lock:
            if self._dimension is None:
                self._dimension = int(vec.shape[0])
            elif vec.shape[0] != self._dimension:
                raise DimensionMismatchError(expected=self._dimension, actual=int(vec.shape[0]))
            self._entries.append(entry)
            self._matrix = None
        return entry

    def _stacked(self) -> np.ndarray:
        # caller holds the lock
        if self._matrix is None:
            self._matrix = np.array([e.embedding for e in self._entries], dtype=np.float64)
        return self._matrix

    def search(self, query_embedding: Sequence[float], top_k: int) -> List[SearchResult]:
        """Exact cosine top-k search.

        Args:
            query_embedding: Query vector.
            top_k: Maximum number of results.

        Returns:
            Up to `top_k` results, by descending similarity then insertion order.
            Empty when the store is empty or `top_k` <= 0.

        Raises:
            DimensionMismatchError: If the query length differs from the stored embeddings.
        """
        q = np.asarray(query_embedding, dtype=np.float64).ravel()

        with self._lock:
            if not self._entries:
                return []
            if q.shape[0] != self._dimension:
                raise DimensionMismatchError(expected=self._dimension, actual=int(q.shape[0]))
            if top_k <= 0:
                return []

            scores = _cosine_scores(q, self._stacked())
            best = heapq.nsmallest(int(top_k), range(len(scores)), key=lambda i: (-scores[i], i))
            return [
                SearchResult(
                    id=self._entries[i].id,
                    text=self._entries[i].text,
                    similarity=float(scores[i]),
                    metadata=_copy_metadata(self._entries[i].metadata),
                )
                for i in best
            ]

    def get_by_id(self, id: int) -> Optional[Entry]:
        with self._lock:
            for entry in self._entries:
                if entry.id == id:
                    return replace(entry, metadata=_copy_metadata(entry.metadata))
        return None

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries = []
            self._dimension = None
            self._matrix = None
        logger.debug("vector_store_cleared", dropped=dropped)

    def stats(self) -> dict:
        with self._lock:
            return {"entries": len(self._entries), "dimension": self._dimension}
