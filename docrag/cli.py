"""Docrag CLI.

Commands:
  - chat: load a document and ask questions in a loop
  - ask: load a document and answer one question
  - status: check Ollama and the configured models

Ollama:
  - API base is served by default at http://localhost:11434/api
  - Chat endpoint: /api/chat
  - Embeddings endpoint: /api/embed (legacy: /api/embeddings)
"""

from __future__ import annotations

from typing import Optional

import typer

from .cli_actions import do_ask, do_chat, do_status, make_config
from .logging_setup import configure_logging

app = typer.Typer(add_completion=False, help="Docrag: ask questions about a PDF or text document.")


@app.callback()
def common(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log progress to stderr (-vv for debug)."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines."),
):
    """Configure logging for every command."""
    configure_logging(verbose=verbose, json_logs=json_logs)


@app.command()
def chat(
    path: str = typer.Argument(..., help="PDF or text file to load."),
    settings: Optional[str] = typer.Option(None, "--settings", help="Settings JSON (default: .docrag/settings.json)."),
    top_k: Optional[int] = typer.Option(None, "--top-k", help="How many chunks to retrieve."),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Chunk size in characters."),
    chunk_overlap: Optional[int] = typer.Option(None, "--chunk-overlap", help="Chunk overlap in characters."),
    llm_model: Optional[str] = typer.Option(None, "--model", help="Ollama chat model."),
    embed_model: Optional[str] = typer.Option(None, "--embed-model", help="Ollama embedding model."),
    ollama_host: Optional[str] = typer.Option(None, "--ollama-host", help="Ollama host URL."),
):
    """Interactive question loop over a document."""
    cfg = make_config(settings, top_k, chunk_size, chunk_overlap, llm_model, embed_model, ollama_host)
    do_chat(path=path, cfg=cfg)


@app.command()
def ask(
    path: str = typer.Argument(..., help="PDF or text file to load."),
    question: str = typer.Argument(..., help="Question to ask."),
    settings: Optional[str] = typer.Option(None, "--settings", help="Settings JSON (default: .docrag/settings.json)."),
    top_k: Optional[int] = typer.Option(None, "--top-k", help="How many chunks to retrieve."),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Chunk size in characters."),
    chunk_overlap: Optional[int] = typer.Option(None, "--chunk-overlap", help="Chunk overlap in characters."),
    llm_model: Optional[str] = typer.Option(None, "--model", help="Ollama chat model."),
    embed_model: Optional[str] = typer.Option(None, "--embed-model", help="Ollama embedding model."),
    ollama_host: Optional[str] = typer.Option(None, "--ollama-host", help="Ollama host URL."),
):
    """Answer one question about a document, with cited chunks."""
    cfg = make_config(settings, top_k, chunk_size, chunk_overlap, llm_model, embed_model, ollama_host)
    do_ask(path=path, question=question, cfg=cfg)


@app.command()
def status(
    settings: Optional[str] = typer.Option(None, "--settings", help="Settings JSON (default: .docrag/settings.json)."),
    llm_model: Optional[str] = typer.Option(None, "--model", help="Ollama chat model."),
    embed_model: Optional[str] = typer.Option(None, "--embed-model", help="Ollama embedding model."),
    ollama_host: Optional[str] = typer.Option(None, "--ollama-host", help="Ollama host URL."),
):
    """Check that Ollama is reachable and the models are installed."""
    cfg = make_config(settings, llm_model=llm_model, embed_model=embed_model, ollama_host=ollama_host)
    do_status(cfg)


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
