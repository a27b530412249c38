"""Shared fakes and fixtures.

The fakes stand in for the external collaborators (document loader,
embedding backend, chat LLM) so the retrieval engine can be tested offline.
"""

import logging
import string
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest
import structlog

from docrag.config import RagConfig
from docrag.logging_setup import LOGGER_NAME
from docrag.embeddings.base import Embedder
from docrag.errors import NotFoundError, ServiceUnavailableError
from docrag.ingest.loaders import DocumentLoader
from docrag.rag.answer import LLMClient
from docrag.rag.service import RagService


class FakeEmbedder(Embedder):
    """Letter-count embedding: 26 dimensions, one per ASCII letter.

    Args:
        fail_after: Raise ServiceUnavailableError once this many texts were embedded.
    """

    def __init__(self, fail_after: Optional[int] = None) -> None:
        self.fail_after = fail_after
        self.calls: List[str] = []

    def embed(self, texts: List[str]) -> List[Sequence[float]]:
        out = []
        for text in texts:
            if self.fail_after is not None and len(self.calls) >= self.fail_after:
                raise ServiceUnavailableError("embedding backend down")
            self.calls.append(text)
            lowered = text.lower()
            out.append([float(lowered.count(ch)) for ch in string.ascii_lowercase])
        return out


class FakeLLM(LLMClient):
    def __init__(self, answer: str = "fake answer") -> None:
        self.answer = answer
        self.requests: List[List[Dict[str, str]]] = []

    def chat(self, messages: List[Dict[str, str]]) -> str:
        self.requests.append(messages)
        return self.answer


class FakeLoader(DocumentLoader):
    def __init__(self, pages: List[str]) -> None:
        self.pages = pages

    def load(self, path) -> List[str]:
        if "missing" in str(path):
            raise NotFoundError(f"Document not found: {path}")
        return list(self.pages)


PAGES = ["aaaaaaaaaa", "bbbbbbbbbb", "cccc"]


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configured by a CLI run so later tests start from defaults."""
    yield
    structlog.reset_defaults()
    docrag_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(docrag_logger.handlers):
        docrag_logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep DOCRAG_* variables from the developer's shell out of the tests."""
    for name in (
        "DOCRAG_OLLAMA_HOST",
        "DOCRAG_EMBED_MODEL",
        "DOCRAG_CHAT_MODEL",
        "DOCRAG_TOP_K",
        "DOCRAG_EMBED_TIMEOUT",
        "DOCRAG_CHAT_TIMEOUT",
        "DOCRAG_EMBED_MAX_CHARS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def small_config() -> RagConfig:
    """Five-character windows without overlap, three results per question."""
    return RagConfig(chunk_size=5, chunk_overlap=0, top_k=3)


@pytest.fixture
def make_service(small_config):
    """Factory building a RagService wired to fakes."""

    def _make(
        pages: Optional[List[str]] = None,
        embedder: Optional[Embedder] = None,
        llm: Optional[LLMClient] = None,
        config: Optional[RagConfig] = None,
    ) -> RagService:
        return RagService(
            config=config or small_config,
            loader=FakeLoader(PAGES if pages is None else pages),
            embedder=embedder if embedder is not None else FakeEmbedder(),
            llm=llm if llm is not None else FakeLLM(),
        )

    return _make


@pytest.fixture
def text_file(tmp_path) -> Path:
    p = tmp_path / "notes.txt"
    p.write_text("The quick brown fox jumps over the lazy dog.\nSecond line.\n", encoding="utf-8")
    return p
