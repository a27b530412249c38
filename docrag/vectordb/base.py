"""Vector store interfaces.

A vector store is responsible for:
  - Holding chunks (text + metadata) and their embeddings
  - Searching for the most similar chunks for a query embedding
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union


MetadataValue = Union[str, int, float, bool, None]
Metadata = Dict[str, MetadataValue]


@dataclass(frozen=True)
class Entry:
    """A stored chunk. Never mutated once inserted.

    Attributes:
        id: Chunk id (the chunk index for entries added by RagService).
        text: Chunk text.
        embedding: Embedding vector.
        metadata: Optional side-channel values.
    """

    id: int
    text: str
    embedding: Tuple[float, ...]
    metadata: Optional[Metadata] = None

    @property
    def dimension(self) -> int:
        return len(self.embedding)


@dataclass(frozen=True)
class SearchResult:
    """A retrieved chunk with its cosine similarity to the query."""

    id: int
    text: str
    similarity: float
    metadata: Optional[Metadata] = None


class VectorStore:
    """Vector store interface."""

    def add(
        self,
        id: int,
        text: str,
        embedding: Sequence[float],
        metadata: Optional[Mapping[str, MetadataValue]] = None,
    ) -> Entry:
        """Append one entry.

        Args:
            id: Entry id. Uniqueness is the caller's responsibility.
            text: Chunk text.
            embedding: Embedding vector.
            metadata: Optional metadata.

        Returns:
            The stored entry.
        """
        raise NotImplementedError

    def search(self, query_embedding: Sequence[float], top_k: int) -> List[SearchResult]:
        """Return up to `top_k` entries ordered by descending similarity."""
        raise NotImplementedError

    def search_text(self, query_embedding: Sequence[float], top_k: int) -> List[str]:
        """Return only the texts of :meth:`search`."""
        return [r.text for r in self.search(query_embedding, top_k)]

    def get_by_id(self, id: int) -> Optional[Entry]:
        """Return the first entry with this id, if any."""
        raise NotImplementedError

    def count(self) -> int:
        """Number of stored entries."""
        raise NotImplementedError

    def clear(self) -> None:
        """Drop every entry."""
        raise NotImplementedError

    def stats(self) -> dict:
        """Return basic stats about the store."""
        raise NotImplementedError
