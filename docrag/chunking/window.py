# docrag/chunking/window.py
"""Sliding-window chunker (language-agnostic)."""

from __future__ import annotations

from typing import List

from ..errors import ConfigurationError
from .base import Chunker


class WindowChunker(Chunker):
    """
    Chunker that slices text by fixed character windows.

    Every window starts `chunk_size - chunk_overlap` characters after the
    previous one, so consecutive windows share `chunk_overlap` characters.
    Windows containing only whitespace are dropped.

    Attributes:
        chunk_size: Window size in chars.
        chunk_overlap: Overlap size in chars.
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200) -> None:
        """
        Initialize the chunker.

        Args:
            chunk_size: Window size, must be positive.
            chunk_overlap: Overlap, must be >= 0 and < chunk_size.

        Raises:
            ConfigurationError: If the sizes are out of range.
        """
        if chunk_size <= 0:
            raise ConfigurationError(f"Chunk size must be positive (got {chunk_size}).")
        if chunk_overlap < 0:
            raise ConfigurationError(f"Chunk overlap cannot be negative (got {chunk_overlap}).")
        if chunk_overlap >= chunk_size:
            raise ConfigurationError(
                f"Chunk overlap ({chunk_overlap}) must be less than chunk size ({chunk_size})."
            )
        self.chunk_size = int(chunk_size)
        self.chunk_overlap = int(chunk_overlap)

    @property
    def step(self) -> int:
        """Distance between the starts of consecutive windows (always > 0)."""
        return self.chunk_size - self.chunk_overlap

    def split_text(self, text: str) -> List[str]:
        """
        Split text into overlapping windows.

        Args:
            text: Full document text.

        Returns:
            List of chunks, in text order.
        """
        chunks: List[str] = []
        n = len(text)
        start = 0
        while start < n:
            ctext = text[start:start + self.chunk_size]
            if ctext.strip():
                chunks.append(ctext)
            start += self.step
        return chunks
