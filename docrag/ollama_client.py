# docrag/ollama_client.py
"""Ollama reachability and model checks used by the CLI."""

from __future__ import annotations

from typing import Iterable, List

import requests


def check_ollama(host: str = "http://localhost:11434", timeout: int = 3) -> bool:
    """
    Return True if Ollama answers on a known endpoint.

    Args:
        host: Base URL.
        timeout: Timeout seconds.
    """
    base = host.rstrip("/")
    for path in ("/api/tags", "/api/version"):
        try:
            r = requests.get(base + path, timeout=timeout)
        except requests.RequestException:
            continue
        if 200 <= r.status_code < 300:
            return True
    return False


def list_models(host: str = "http://localhost:11434", timeout: int = 5) -> List[str]:
    """
    List installed model names.

    Args:
        host: Base URL.
        timeout: Timeout seconds.

    Returns:
        Model names, e.g. ["llama3.2:1b", "nomic-embed-text:latest"].

    Raises:
        requests.RequestException: On connection errors or non-2xx responses.
    """
    r = requests.get(host.rstrip("/") + "/api/tags", timeout=timeout)
    r.raise_for_status()
    data = r.json() or {}
    return [m["name"] for m in data.get("models", []) if m.get("name")]


def missing_models(installed: Iterable[str], wanted: Iterable[str]) -> List[str]:
    """
    Return the wanted models that are not installed.

    A wanted name without a tag matches any installed tag of that model
    ("nomic-embed-text" matches "nomic-embed-text:latest").
    """
    have = set(installed)
    bases = {name.split(":", 1)[0] for name in have}
    out: List[str] = []
    for name in wanted:
        if name in have:
            continue
        if ":" not in name and name in bases:
            continue
        out.append(name)
    return out
