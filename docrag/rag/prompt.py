# docrag/rag/prompt.py
"""Prompt building for RAG Q&A."""

from __future__ import annotations

from typing import Sequence

from ..vectordb.base import SearchResult


CONTEXT_SEPARATOR = "\n\n"


def format_context(results: Sequence[SearchResult]) -> str:
    """
    Join retrieved chunk texts, most similar first.

    Args:
        results: Search results in similarity order.

    Returns:
        Context string.
    """
    return CONTEXT_SEPARATOR.join(r.text for r in results)


def build_user_prompt(question: str, results: Sequence[SearchResult]) -> str:
    """
    Build the user message carrying the context and the question.

    Args:
        question: User question.
        results: Retrieved context.

    Returns:
        Prompt text.
    """
    return f"Context:\n{format_context(results)}\n\nQuestion: {question}\n\nAnswer:"


def source_preview(text: str, limit: int = 150) -> str:
    """Single-line preview of a chunk for citation display."""
    flat = text.replace("\r", " ").replace("\n", " ")
    if len(flat) > limit:
        return flat[:limit] + "..."
    return flat
