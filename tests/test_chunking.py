"""Tests for the sliding-window chunker."""

import pytest

from docrag.chunking.window import WindowChunker
from docrag.errors import ConfigurationError


def test_split_text_example():
    chunker = WindowChunker(chunk_size=5, chunk_overlap=1)
    assert chunker.split_text("abcdefghij") == ["abcde", "efghi", "ij"]


def test_split_text_empty_string():
    assert WindowChunker(chunk_size=5, chunk_overlap=1).split_text("") == []


def test_text_shorter_than_window_is_one_chunk():
    assert WindowChunker(chunk_size=100, chunk_overlap=10).split_text("short") == ["short"]


def test_last_window_can_be_contained_in_previous_one():
    """Windows start every step; the tail window is still emitted."""
    chunker = WindowChunker(chunk_size=4, chunk_overlap=2)
    assert chunker.split_text("abcdefghij") == ["abcd", "cdef", "efgh", "ghij", "ij"]


def test_blank_windows_are_skipped():
    chunker = WindowChunker(chunk_size=5, chunk_overlap=0)
    assert chunker.split_text("abcde     fghij") == ["abcde", "fghij"]
    assert chunker.split_text(" \n\t  \n") == []


def test_chunks_keep_whitespace_inside():
    chunker = WindowChunker(chunk_size=6, chunk_overlap=0)
    assert chunker.split_text("ab\ncd  ef") == ["ab\ncd ", " ef"]


@pytest.mark.parametrize("size,overlap", [(5, 0), (5, 1), (7, 3), (10, 9), (1, 0)])
def test_window_lengths_and_overlap(size, overlap):
    text = "".join(chr(ord("a") + (i % 26)) for i in range(97))
    chunks = WindowChunker(chunk_size=size, chunk_overlap=overlap).split_text(text)

    step = size - overlap
    assert len(chunks) == -(-len(text) // step)
    for i, c in enumerate(chunks):
        assert c == text[i * step:i * step + size]
        assert len(c) == min(size, len(text) - i * step)

    for prev, cur in zip(chunks, chunks[1:]):
        if overlap and len(prev) == size:
            assert prev[-overlap:] == cur[:overlap]


def test_split_documents_preserves_document_order():
    chunker = WindowChunker(chunk_size=3, chunk_overlap=0)
    assert chunker.split_documents(["abcdef", "", "  ", "xyz1"]) == ["abc", "def", "xyz", "1"]


def test_split_documents_empty_input():
    assert WindowChunker(chunk_size=3, chunk_overlap=1).split_documents([]) == []


@pytest.mark.parametrize("size,overlap", [(0, 0), (-5, 0), (5, -1), (5, 5), (5, 8)])
def test_invalid_configuration_fails_fast(size, overlap):
    with pytest.raises(ConfigurationError):
        WindowChunker(chunk_size=size, chunk_overlap=overlap)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        WindowChunker(chunk_size=1, chunk_overlap=1)


def test_defaults():
    chunker = WindowChunker()
    assert (chunker.chunk_size, chunker.chunk_overlap, chunker.step) == (1000, 200, 800)
