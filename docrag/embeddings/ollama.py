# docrag/embeddings/ollama.py
"""
Ollama embedding backend.

This embedder calls the local Ollama HTTP API to produce embeddings.

It:
  - sanitizes control characters
  - truncates very long inputs (configurable)
  - retries with smaller inputs if Ollama returns 5xx
  - supports both new and legacy Ollama embedding endpoints

Every failure (connection error, timeout, non-2xx, malformed payload) is
reported as ServiceUnavailableError so callers can switch to retrieval-only
mode.
"""

from __future__ import annotations

import time
from typing import Any, List, Optional, Sequence

import requests
import structlog

from ..errors import ServiceUnavailableError
from .base import Embedder

logger = structlog.get_logger()


def _sanitize_text(s: str) -> str:
    """
    Sanitize text to reduce embedding backend crashes.

    Args:
        s: Any object convertible to str.

    Returns:
        Cleaned string.
    """
    if not isinstance(s, str):
        s = str(s)

    # NULs crash some tokenizers
    s = s.replace("\x00", "")

    s = s.replace("\r\n", "\n").replace("\r", "\n")

    return s


class OllamaEmbedder(Embedder):
    """
    Compute embeddings via Ollama's HTTP API.

    Newer Ollama endpoint:
      - POST /api/embed with {"model": "...", "input": ["...","..."]}
      - Response: {"embeddings": [[...], ...]}

    Legacy endpoint:
      - POST /api/embeddings with {"model": "...", "input": "..."} (or "prompt")
      - Response: {"embedding": [...]}

    Attributes:
        host: Ollama base URL.
        model: Embedding model name.
        max_chars: Max characters per input (truncate, 0 disables).
        min_chars: Minimum characters when shrinking on retries.
        timeout: HTTP timeout seconds.
    """

    def __init__(
        self,
        host: str,
        model: str,
        timeout: int = 180,
        max_chars: int = 4000,
        min_chars: int = 800,
    ) -> None:
        self.host = host.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_chars = max_chars
        self.min_chars = min_chars

    def _post_embed(self, inputs: List[str]) -> requests.Response:
        payload = {"model": self.model, "input": inputs}
        return requests.post(f"{self.host}/api/embed", json=payload, timeout=self.timeout)

    def _post_embeddings_legacy(self, text: str) -> requests.Response:
        payload = {"model": self.model, "input": text}
        r = requests.post(f"{self.host}/api/embeddings", json=payload, timeout=self.timeout)
        if r.status_code == 404:
            payload = {"model": self.model, "prompt": text}
            r = requests.post(f"{self.host}/api/embeddings", json=payload, timeout=self.timeout)
        return r

    @staticmethod
    def _extract_embeddings(data: Any) -> Optional[List[List[float]]]:
        """
        Extract embeddings from Ollama response JSON.

        Args:
            data: Parsed JSON.

        Returns:
            List of embeddings or None.
        """
        if not isinstance(data, dict):
            return None

        embs = data.get("embeddings")
        if isinstance(embs, list) and embs and all(isinstance(x, list) for x in embs):
            return embs

        one = data.get("embedding")
        if isinstance(one, list) and one:
            return [one]

        return None

    def _embed_batch(self, texts: List[str]) -> Optional[List[List[float]]]:
        """Try /api/embed. Returns None when the endpoint is missing or unusable."""
        try:
            r = self._post_embed(texts)
        except requests.ConnectionError as e:
            raise ServiceUnavailableError(f"Ollama is not reachable at {self.host}.") from e
        except requests.RequestException as e:
            logger.debug("ollama_embed_batch_failed", error=str(e))
            return None

        if r.status_code == 404:
            return None
        if not 200 <= r.status_code < 300:
            logger.debug("ollama_embed_batch_status", status=r.status_code)
            return None

        try:
            embs = self._extract_embeddings(r.json())
        except ValueError:
            return None
        if embs and len(embs) == len(texts) and all(len(v) > 0 for v in embs):
            return embs
        return None

    def _embed_legacy(self, text: str) -> List[float]:
        """Embed one text via /api/embeddings, shrinking it on 5xx."""
        attempt = 0
        cur = text
        while True:
            attempt += 1
            try:
                r = self._post_embeddings_legacy(cur)
            except requests.RequestException as e:
                raise ServiceUnavailableError(f"Ollama embeddings request failed: {e}") from e

            if 200 <= r.status_code < 300:
                try:
                    embs = self._extract_embeddings(r.json())
                except ValueError as e:
                    raise ServiceUnavailableError("Ollama returned invalid JSON for embeddings.") from e
                if not embs or not embs[0]:
                    raise ServiceUnavailableError("Ollama returned an empty embedding vector.")
                return embs[0]

            if r.status_code >= 500 and len(cur) > self.min_chars and attempt <= 4:
                logger.warning("ollama_embed_retry", status=r.status_code, attempt=attempt, chars=len(cur))
                time.sleep(0.5 * attempt)
                cur = cur[: max(self.min_chars, len(cur) // 2)]
                continue

            raise ServiceUnavailableError(
                f"Ollama embeddings failed (status={r.status_code}).\n"
                f"Model: {self.model}\n"
                f"Host: {self.host}\n"
                f"Tip: run `ollama pull {self.model}`.\n"
                f"Response: {(r.text or '<no body>')[:800]}"
            )

    def embed(self, texts: List[str]) -> List[Sequence[float]]:
        """
        Generate embeddings for each input string.

        Strategy:
          1) Try /api/embed as a batch.
          2) If unavailable or malformed, fall back to /api/embeddings per item.
          3) Shrink inputs on 5xx errors.

        Args:
            texts: Input strings.

        Returns:
            List of embeddings aligned to texts.

        Raises:
            ServiceUnavailableError: If Ollama is unreachable or keeps failing.
        """
        if not texts:
            return []

        sanitized: List[str] = []
        for raw in texts:
            t = _sanitize_text(raw)
            if self.max_chars > 0 and len(t) > self.max_chars:
                t = t[: self.max_chars]
            sanitized.append(t)

        embs = self._embed_batch(sanitized)
        if embs is not None:
            return embs

        return [self._embed_legacy(t) for t in sanitized]
