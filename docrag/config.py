"""Configuration model and loaders.

This module centralizes:
  - Chunking options (window size / overlap)
  - Retrieval options (top-k)
  - Backend options (Ollama host, models, timeouts)
  - The system prompt sent with every question

Precedence (lowest to highest):
  1) Dataclass defaults
  2) `.docrag/settings.json` (or an explicit settings file)
  3) Environment variables (DOCRAG_*)
  4) CLI options (applied by the caller)

Terminology:
  - Chunk: a bounded window of document text used for retrieval.
  - Top-k: how many chunks are retrieved per question.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError


DEFAULT_SETTINGS_FILE = Path(".docrag") / "settings.json"

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the provided context. "
    "Only use information from the context to answer."
)


@dataclass
class RagConfig:
    """Options for chunking, retrieval and the Ollama backends.

    Attributes:
        chunk_size: Window size in characters.
        chunk_overlap: Characters shared by consecutive windows.
        top_k: Chunks retrieved per question.
        system_prompt: Instruction sent as the system message.
        embed_model: Ollama embedding model name.
        chat_model: Ollama chat model name.
        ollama_host: Ollama base URL.
        embed_timeout: Embedding request timeout (seconds).
        chat_timeout: Chat request timeout (seconds).
        embed_max_chars: Inputs longer than this are truncated before embedding (0 disables).
    """

    chunk_size: int = 1000
    chunk_overlap: int = 200
    top_k: int = 3
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    embed_model: str = "nomic-embed-text"
    chat_model: str = "llama3.2:1b"
    ollama_host: str = "http://localhost:11434"
    embed_timeout: int = 180
    chat_timeout: int = 600
    embed_max_chars: int = 4000

    def validate(self) -> "RagConfig":
        """Check value ranges.

        Returns:
            The same config, for chaining.

        Raises:
            ConfigurationError: If any value is out of range.
        """
        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be positive (got {self.chunk_size}).")
        if self.chunk_overlap < 0:
            raise ConfigurationError(f"chunk_overlap cannot be negative (got {self.chunk_overlap}).")
        if self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than chunk_size ({self.chunk_size})."
            )
        if self.top_k <= 0:
            raise ConfigurationError(f"top_k must be positive (got {self.top_k}).")
        if not self.ollama_host:
            raise ConfigurationError("ollama_host cannot be empty.")
        return self


_INT_KEYS = ("chunk_size", "chunk_overlap", "top_k", "embed_timeout", "chat_timeout", "embed_max_chars")
_STR_KEYS = ("system_prompt", "embed_model", "chat_model", "ollama_host")

_ENV_KEYS = {
    "DOCRAG_OLLAMA_HOST": "ollama_host",
    "DOCRAG_EMBED_MODEL": "embed_model",
    "DOCRAG_CHAT_MODEL": "chat_model",
    "DOCRAG_TOP_K": "top_k",
    "DOCRAG_EMBED_TIMEOUT": "embed_timeout",
    "DOCRAG_CHAT_TIMEOUT": "chat_timeout",
    "DOCRAG_EMBED_MAX_CHARS": "embed_max_chars",
}


def _apply_settings_file(cfg: RagConfig, settings_path: Path) -> None:
    """Override `cfg` with values from a JSON settings file, if readable."""
    if not settings_path.exists():
        return

    try:
        payload = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return

    if not isinstance(payload, dict):
        return

    for key in _INT_KEYS:
        value = payload.get(key)
        # bool is an int subclass; "top_k": true is not a number
        if isinstance(value, int) and not isinstance(value, bool):
            setattr(cfg, key, value)

    for key in _STR_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value:
            setattr(cfg, key, value)


def _apply_env(cfg: RagConfig) -> None:
    """Override `cfg` with DOCRAG_* environment variables."""
    for env_name, key in _ENV_KEYS.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        if key in _INT_KEYS:
            try:
                setattr(cfg, key, int(raw))
            except ValueError as e:
                raise ConfigurationError(f"{env_name} must be an integer (got {raw!r}).") from e
        else:
            setattr(cfg, key, raw)


def load_config(settings_path: Optional[Path] = None) -> RagConfig:
    """Build a config from defaults, the settings file and the environment.

    Args:
        settings_path: Explicit settings file. Defaults to `.docrag/settings.json`
            under the current directory.

    Returns:
        Validated RagConfig.

    Raises:
        ConfigurationError: If the resulting values are invalid.
    """
    cfg = RagConfig()
    _apply_settings_file(cfg, settings_path or (Path.cwd() / DEFAULT_SETTINGS_FILE))
    _apply_env(cfg)
    return cfg.validate()
