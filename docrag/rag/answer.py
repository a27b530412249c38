"""
LLM answering backends.

This module defines a small abstraction to talk to a "chat LLM" and return the
assistant text only.

Notes:
  - Backends raise ServiceUnavailableError on connection errors and non-2xx
    responses, and return clean text output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import requests
import structlog

from ..errors import ServiceUnavailableError

logger = structlog.get_logger()


class LLMClient:
    """
    Minimal LLM interface used by docrag.

    Implementations must accept an OpenAI/Ollama-style messages array:
      [{"role": "system"|"user"|"assistant", "content": "..."}]

    and return the assistant content as a string.
    """

    def chat(self, messages: List[Dict[str, str]]) -> str:
        """
        Execute a chat completion and return the assistant text.

        Args:
            messages: Chat messages in role/content format.

        Returns:
            Assistant response text (trimmed).

        Raises:
            NotImplementedError: If not implemented by backend.
        """
        raise NotImplementedError

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one system + one user message and return the answer."""
        return self.chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ]
        )


@dataclass
class OllamaLLM(LLMClient):
    """
    LLM backend using Ollama's chat API (POST /api/chat).

    Attributes:
        host: Base URL for Ollama (e.g. http://localhost:11434).
        model: Ollama model name/tag (e.g. llama3.2:1b).
        timeout: Request timeout in seconds.
    """

    host: str
    model: str
    timeout: int = 600

    def chat(self, messages: List[Dict[str, str]]) -> str:
        """
        Call Ollama and return assistant response content.

        Args:
            messages: Chat messages.

        Returns:
            Assistant text.

        Raises:
            ServiceUnavailableError: On connection/timeout errors, non-2xx
                responses, or a response without message content.
        """
        url = f"{self.host.rstrip('/')}/api/chat"
        payload = {"model": self.model, "messages": messages, "stream": False}

        try:
            r = requests.post(url, json=payload, timeout=self.timeout)
            r.raise_for_status()
            data = r.json() or {}
        except requests.RequestException as e:
            logger.warning("ollama_chat_failed", model=self.model, error=str(e))
            raise ServiceUnavailableError(f"Ollama chat request failed: {e}") from e
        except ValueError as e:
            raise ServiceUnavailableError("Ollama chat returned invalid JSON.") from e

        # {"message": {"role": "assistant", "content": "..."}, ...}
        content = (data.get("message") or {}).get("content")

        if not isinstance(content, str):
            raise ServiceUnavailableError("Ollama chat response missing 'message.content'.")

        return content.strip()
