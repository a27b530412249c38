"""Chunking interfaces."""

from __future__ import annotations

from typing import Iterable, List


class Chunker:
    """Chunker interface.

    Implementations only need `split_text`; `split_documents` keeps document
    order (chunks of document i precede chunks of document i+1).
    """

    def split_text(self, text: str) -> List[str]:
        """Split one text into chunks."""
        raise NotImplementedError

    def split_documents(self, documents: Iterable[str]) -> List[str]:
        """Split every document and concatenate the chunks in input order."""
        chunks: List[str] = []
        for doc in documents:
            chunks.extend(self.split_text(doc))
        return chunks
