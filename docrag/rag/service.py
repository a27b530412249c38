# docrag/rag/service.py
"""
Retrieval orchestration.

RagService ties the pieces together:
  - initialize: load -> chunk -> embed (one chunk at a time) -> store
  - ask: embed question -> search -> build prompt -> generate answer

States:
  UNINITIALIZED -> INITIALIZING -> READY_WITH_GENERATION | READY_RETRIEVAL_ONLY

A ready service never goes back; there is no re-initialization. Embedding
is all-or-nothing: if the embedding backend fails partway, the store is
cleared and the service ends up retrieval-only.
"""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

import structlog

from ..chunking.base import Chunker
from ..chunking.window import WindowChunker
from ..config import RagConfig
from ..embeddings.base import Embedder
from ..embeddings.ollama import OllamaEmbedder
from ..errors import InvalidStateError, ServiceUnavailableError
from ..ingest.loaders import AutoLoader, DocumentLoader
from ..vectordb.base import SearchResult, VectorStore
from ..vectordb.memory import InMemoryVectorStore
from .answer import LLMClient, OllamaLLM
from .prompt import build_user_prompt
from .retrieve import retrieve

logger = structlog.get_logger()

NO_DOCUMENTS_ANSWER = "No relevant documents found."
NO_ANSWER = "No answer generated."


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY_WITH_GENERATION = "ready_with_generation"
    READY_RETRIEVAL_ONLY = "ready_retrieval_only"


class RagService:
    """
    Document Q&A over an in-memory vector store.

    Collaborators are injected; `build_service` wires the Ollama defaults.

    Attributes:
        config: Validated configuration.
        loader: Document loader (path -> page texts).
        embedder: Embedding backend, or None when unavailable.
        llm: Generation backend, or None when unavailable.
        chunker: Text splitter.
        store: Vector store.
        page_count: Pages loaded by the last initialize call.
        chunks_created: Chunks produced by the last initialize call.
    """

    def __init__(
        self,
        config: Optional[RagConfig] = None,
        loader: Optional[DocumentLoader] = None,
        embedder: Optional[Embedder] = None,
        llm: Optional[LLMClient] = None,
        chunker: Optional[Chunker] = None,
        store: Optional[VectorStore] = None,
    ) -> None:
        self.config = (config or RagConfig()).validate()
        self.loader = loader if loader is not None else AutoLoader()
        self.embedder = embedder
        self.llm = llm
        self.chunker = chunker or WindowChunker(self.config.chunk_size, self.config.chunk_overlap)
        self.store = store if store is not None else InMemoryVectorStore()
        self.page_count = 0
        self.chunks_created = 0
        self._state = ServiceState.UNINITIALIZED
        self._state_lock = threading.Lock()

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def has_generation(self) -> bool:
        return self._state is ServiceState.READY_WITH_GENERATION

    def chunk_count(self) -> int:
        """Number of chunks held in the vector store."""
        return self.store.count()

    def initialize(self, path: Union[str, Path]) -> bool:
        """
        Load, chunk and embed a document.

        Args:
            path: Document path.

        Returns:
            True if the service can answer questions, False if it ended up
            retrieval-only (embedding or generation backend unavailable).

        Raises:
            InvalidStateError: If the service was already initialized (or is initializing).
            NotFoundError: If the document does not exist (propagated from the loader).
        """
        with self._state_lock:
            if self._state is not ServiceState.UNINITIALIZED:
                raise InvalidStateError(f"RagService is already {self._state.value}; it cannot be re-initialized.")
            self._state = ServiceState.INITIALIZING

        try:
            pages = self.loader.load(path)
            self.page_count = len(pages)
            logger.info("document_loaded", path=str(path), pages=self.page_count)

            chunks = self.chunker.split_documents(pages)
            self.chunks_created = len(chunks)
            logger.info("chunks_created", chunks=self.chunks_created)

            has_generation = self._embed_and_store(chunks) and self.llm is not None
        except Exception:
            self.store.clear()
            self._state = ServiceState.UNINITIALIZED
            raise

        self._state = ServiceState.READY_WITH_GENERATION if has_generation else ServiceState.READY_RETRIEVAL_ONLY
        logger.info("rag_ready", state=self._state.value, entries=self.store.count())
        return has_generation

    def _embed_and_store(self, chunks: List[str]) -> bool:
        """Embed chunks in order as ids 0..n-1. False (and an empty store) on backend failure."""
        if self.embedder is None:
            logger.warning("embedding_backend_missing")
            return False

        try:
            for i, chunk in enumerate(chunks):
                vec = self.embedder.embed_one(chunk)
                self.store.add(i, chunk, vec, {"chunk_index": i})
        except ServiceUnavailableError as e:
            logger.warning(
                "embedding_backend_unavailable",
                error=str(e),
                stored=self.store.count(),
                chunks=len(chunks),
            )
            self.store.clear()
            return False
        return True

    def ask(self, question: str) -> Tuple[str, List[SearchResult]]:
        """
        Answer a question from the most similar chunks.

        Args:
            question: User question.

        Returns:
            (answer, sources) where sources are the search results used as
            context, most similar first.

        Raises:
            InvalidStateError: If the service is not ready with generation.
            ServiceUnavailableError: If a backend fails while answering.
        """
        if self._state is not ServiceState.READY_WITH_GENERATION:
            if self._state is ServiceState.READY_RETRIEVAL_ONLY:
                raise InvalidStateError("Answer generation is not available (retrieval-only mode).")
            raise InvalidStateError("RagService is not initialized. Call initialize() first.")
        if self.embedder is None or self.llm is None:
            raise InvalidStateError("Answer generation needs both an embedding backend and a chat model.")

        qvec = self.embedder.embed_one(question)
        results = retrieve(self.store, qvec, top_k=self.config.top_k)
        if not results:
            logger.info("no_relevant_documents", question_chars=len(question))
            return NO_DOCUMENTS_ANSWER, []

        answer = self.llm.complete(self.config.system_prompt, build_user_prompt(question, results))
        logger.info("question_answered", sources=len(results), top_similarity=results[0].similarity)
        return answer or NO_ANSWER, results


def build_service(config: RagConfig, loader: Optional[DocumentLoader] = None) -> RagService:
    """
    Create a RagService backed by Ollama for embeddings and chat.

    Args:
        config: Configuration (hosts, models, timeouts, chunking).
        loader: Optional loader; defaults to picking by file extension.

    Returns:
        RagService, not yet initialized.
    """
    embedder = OllamaEmbedder(
        host=config.ollama_host,
        model=config.embed_model,
        timeout=config.embed_timeout,
        max_chars=config.embed_max_chars,
    )
    llm = OllamaLLM(host=config.ollama_host, model=config.chat_model, timeout=config.chat_timeout)
    return RagService(config=config, loader=loader, embedder=embedder, llm=llm)
