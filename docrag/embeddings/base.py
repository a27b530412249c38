# docrag/embeddings/base.py
"""Embedding interfaces."""

from __future__ import annotations

from typing import List, Sequence

from ..errors import ServiceUnavailableError


class Embedder:
    """
    Embedder interface for turning text into vectors.

    All vectors produced by one configured embedder share one dimensionality.
    """

    def embed(self, texts: List[str]) -> List[Sequence[float]]:
        """
        Return embeddings for each input text.

        Args:
            texts: List of input strings.

        Returns:
            List of vectors aligned to `texts`.

        Raises:
            ServiceUnavailableError: If the backend cannot produce embeddings.
        """
        raise NotImplementedError

    def embed_one(self, text: str) -> Sequence[float]:
        """Embed a single text; an empty reply counts as an unavailable backend."""
        vectors = self.embed([text])
        if not vectors or len(vectors[0]) == 0:
            raise ServiceUnavailableError("Embedding backend returned no vector.")
        return vectors[0]
