# docrag/cli_actions.py
"""
Reusable CLI actions.

The CLI (`docrag.cli`) parses options and calls these functions. All console
output lives here; the library modules only log.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import requests
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Prompt
from rich.table import Table

from .config import RagConfig, load_config
from .errors import DocragError, NotFoundError
from .ollama_client import check_ollama, list_models, missing_models
from .rag.prompt import source_preview
from .rag.service import RagService, build_service
from .vectordb.base import SearchResult

console = Console()

EXIT_WORDS = {"quit", "exit", "q", "/quit", "/exit"}


def make_config(
    settings: Optional[str] = None,
    top_k: Optional[int] = None,
    chunk_size: Optional[int] = None,
    chunk_overlap: Optional[int] = None,
    llm_model: Optional[str] = None,
    embed_model: Optional[str] = None,
    ollama_host: Optional[str] = None,
) -> RagConfig:
    """
    Build the effective config: settings file + environment, then CLI options.

    Raises:
        typer.Exit: If the resulting values are invalid.
    """
    try:
        cfg = load_config(Path(settings) if settings else None)
        if top_k is not None:
            cfg.top_k = top_k
        if chunk_size is not None:
            cfg.chunk_size = chunk_size
        if chunk_overlap is not None:
            cfg.chunk_overlap = chunk_overlap
        if llm_model:
            cfg.chat_model = llm_model
        if embed_model:
            cfg.embed_model = embed_model
        if ollama_host:
            cfg.ollama_host = ollama_host
        return cfg.validate()
    except DocragError as e:
        _fail(f"Invalid configuration: {e}")


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


def _print_backend_help(cfg: RagConfig) -> None:
    console.print(f"[yellow]Ollama not available at[/yellow] {cfg.ollama_host}")
    console.print("For full RAG, you need to:")
    console.print("  1. Install Ollama: https://ollama.ai")
    console.print(f"  2. Run: ollama pull {cfg.chat_model}")
    console.print(f"  3. Run: ollama pull {cfg.embed_model}")


def _start_service(path: str, cfg: RagConfig) -> Tuple[RagService, bool]:
    """
    Build and initialize a service with a progress spinner.

    Raises:
        typer.Exit: If the document cannot be loaded.
    """
    service = build_service(cfg)
    try:
        with Progress(SpinnerColumn(), TextColumn("Loading and embedding document..."), TimeElapsedColumn(), console=console) as p:
            t = p.add_task("init", total=None)
            has_llm = service.initialize(path)
            p.update(t, completed=1)
    except NotFoundError as e:
        _fail(f"File not found. Please check the path. ({e})")
    except DocragError as e:
        _fail(f"Could not load document: {e}")

    console.print(f"Loaded {service.page_count} page(s), created {service.chunks_created} text chunk(s)")
    if has_llm:
        console.print(f"Using Ollama (embedding: {cfg.embed_model}, chat: {cfg.chat_model})")
    else:
        _print_backend_help(cfg)
    return service, has_llm


def _print_ready(service: RagService, has_llm: bool) -> None:
    console.rule()
    if has_llm:
        console.print("[bold green]Full RAG system ready![/bold green] Ask questions about your document.")
    else:
        console.print("[yellow]Document loaded in retrieval-only mode.[/yellow]")
        console.print("LLM not available - answers will not be generated.")
    console.print(f"Total chunks: {service.chunk_count()}")
    console.print("Type [cyan]quit[/cyan] to exit")
    console.rule()


def _print_answer(answer: str, sources: List[SearchResult]) -> None:
    console.print("\n[bold]Answer[/bold]\n")
    console.print(answer)
    console.print(f"\n[dim]Sources found: {len(sources)} relevant chunk(s)[/dim]")
    if not sources:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Similarity", justify="right")
    table.add_column("Preview")
    for i, s in enumerate(sources, start=1):
        table.add_row(str(i), f"{s.similarity:.3f}", source_preview(s.text))
    console.print(table)


def do_ask(path: str, question: str, cfg: RagConfig) -> None:
    """
    Load a document and answer one question.

    Args:
        path: Document path.
        question: User question.
        cfg: Effective configuration.

    Raises:
        typer.Exit: With code 1 if the document cannot be loaded or no answer
            can be generated.
    """
    service, has_llm = _start_service(path, cfg)
    if not has_llm:
        _fail("Answer generation is not available (retrieval-only mode).")

    try:
        with Progress(SpinnerColumn(), TextColumn("Thinking..."), TimeElapsedColumn(), console=console) as p:
            t = p.add_task("thinking", total=None)
            answer, sources = service.ask(question)
            p.update(t, completed=1)
    except DocragError as e:
        _fail(f"Error processing question: {e}")

    _print_answer(answer, sources)


def do_chat(path: str, cfg: RagConfig) -> None:
    """
    Load a document and run the interactive question loop.

    Commands:
      - quit / exit / q : leave chat
    """
    service, has_llm = _start_service(path, cfg)
    _print_ready(service, has_llm)

    while True:
        try:
            question = Prompt.ask("\n[bold cyan]Your question[/bold cyan]", default="", show_default=False).strip()
        except EOFError:
            question = "quit"
        if not question:
            continue
        if question.lower() in EXIT_WORDS:
            console.print("[green]Goodbye![/green]")
            return

        if not has_llm:
            console.print("\n(LLM not available - no answer can be generated)")
            console.print("For full RAG functionality, please set up Ollama.")
            continue

        try:
            answer, sources = service.ask(question)
        except DocragError as e:
            console.print(f"\n[red]Error processing question:[/red] {e}")
            console.print("Make sure Ollama is running and models are available.")
            continue
        _print_answer(answer, sources)


def do_status(cfg: RagConfig) -> None:
    """Show Ollama reachability and whether the configured models are installed."""
    console.print(f"Ollama host: {cfg.ollama_host}")
    if not check_ollama(cfg.ollama_host):
        console.print("[red]Ollama is not reachable.[/red]")
        _print_backend_help(cfg)
        raise typer.Exit(code=1)

    try:
        installed = list_models(cfg.ollama_host)
    except requests.RequestException as e:
        _fail(f"Cannot list models at {cfg.ollama_host}: {e}")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Role")
    table.add_column("Model")
    table.add_column("Installed")
    missing = missing_models(installed, [cfg.embed_model, cfg.chat_model])
    for role, model in (("embedding", cfg.embed_model), ("chat", cfg.chat_model)):
        table.add_row(role, model, "[red]no[/red]" if model in missing else "[green]yes[/green]")
    console.print(table)

    for model in missing:
        console.print(f"Run: [cyan]ollama pull {model}[/cyan]")
