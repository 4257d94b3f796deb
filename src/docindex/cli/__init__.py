"""
CLI for docindex.

Provides commands for indexing documentation folders, searching them and
managing the index.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from docindex.core.config import ConfigurationError, DocIndexConfig, load_config
from docindex.core.path_utils import validate_indexable_path
from docindex.infrastructure.index_state import STATE_FILE_NAME
from docindex.infrastructure.vector_store import SearchFilters
from docindex.services import (
    IndexingResult,
    IndexStats,
    ServicesContainer,
    create_services,
    remove_index,
    resolve_store_dir,
)
from docindex.services.container import VECTORS_DIR_NAME

from .ui import render_error, render_index_summary, render_search_results, render_stats

logger = logging.getLogger(__name__)

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="docindex",
    help="Incremental semantic indexing and search for documentation folders",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Incremental semantic indexing and search for documentation folders."""
    load_dotenv()


def _configure_logging(config: DocIndexConfig, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else config.logging.level.upper()
    logging.basicConfig(
        level=level,
        format=config.logging.format,
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _require_index(store_dir: Path) -> None:
    if not (store_dir / STATE_FILE_NAME).exists() and not (store_dir / VECTORS_DIR_NAME).exists():
        render_error(console, f"No index found at {store_dir}. Run 'docindex index' first.")
        raise typer.Exit(1)


async def _run_index(
    container: ServicesContainer, folder: Path, force: bool, progress_callback
) -> tuple[IndexingResult, IndexStats]:
    try:
        await container.embedding_client.initialize()
        service = container.indexing_service(progress_callback=progress_callback)
        result = await service.synchronize(folder, force=force)
        stats = await container.search_service().get_stats()
        return result, stats
    finally:
        await container.close()


@app.command()
def index(
    folder: Path = typer.Argument(..., help="Documentation folder to index"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Drop the existing index and rebuild it"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", help="Target chunk length in characters"
    ),
    chunk_overlap: Optional[int] = typer.Option(
        None, "--chunk-overlap", help="Characters of overlap between consecutive chunks"
    ),
    model: Optional[str] = typer.Option(None, "--model", help="Embedding model name"),
    db_path: Optional[Path] = typer.Option(
        None, "--db-path", help="Index directory (default: <folder>/.docindex)"
    ),
    include: Optional[list[str]] = typer.Option(
        None, "--include", "-i", help="Include pattern (repeatable, replaces defaults)"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e", help="Exclude pattern (repeatable)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
):
    """Index a documentation folder, re-embedding only what changed."""
    validation = validate_indexable_path(folder)
    if not validation.valid:
        render_error(console, validation.error_message or f"Cannot index {folder}")
        raise typer.Exit(1)

    try:
        cfg = load_config(config_path)
        if chunk_size is not None:
            cfg.indexing.chunk_size = chunk_size
        if chunk_overlap is not None:
            cfg.indexing.chunk_overlap = chunk_overlap
        if model:
            cfg.embedding.model = model
        if include:
            cfg.indexing.include_patterns = list(include)
        if exclude:
            cfg.indexing.exclude_patterns = list(exclude)
        cfg.validate()
    except (ConfigurationError, ValueError, FileNotFoundError) as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    _configure_logging(cfg, verbose)
    folder = folder.resolve()
    store_dir = resolve_store_dir(folder, db_path, cfg)

    console.print(f"[bold blue]Indexing[/bold blue] {folder}...")
    try:
        container = create_services(cfg, store_dir, root_path=folder)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Initializing...", total=None)

            def update_progress(current: int, total: int, message: str) -> None:
                progress.update(
                    task, completed=current, total=total or None, description=message
                )

            result, stats = asyncio.run(_run_index(container, folder, force, update_progress))

    except Exception as e:
        logger.debug("Indexing aborted", exc_info=True)
        render_error(console, str(e))
        raise typer.Exit(1)

    render_index_summary(console, result, stats, verbose=verbose)


async def _run_search(
    container: ServicesContainer, query: str, limit: int, filters: SearchFilters
):
    try:
        return await container.search_service().search(query, limit=limit, filters=filters)
    finally:
        await container.close()


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    folder: Path = typer.Argument(Path("."), help="Indexed documentation folder"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of results"),
    library: Optional[str] = typer.Option(None, "--library", "-l", help="Only this library"),
    difficulty: Optional[str] = typer.Option(
        None, "--difficulty", "-d", help="Only chunks with this difficulty"
    ),
    topic: Optional[str] = typer.Option(None, "--topic", "-t", help="Only this topic"),
    db_path: Optional[Path] = typer.Option(
        None, "--db-path", help="Index directory (default: <folder>/.docindex)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
):
    """Search an indexed documentation folder."""
    try:
        cfg = load_config(config_path).validate()
    except (ConfigurationError, ValueError, FileNotFoundError) as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    actual_limit = limit if limit is not None else cfg.search.default_limit
    if actual_limit <= 0:
        render_error(console, f"--limit must be positive, got {actual_limit}")
        raise typer.Exit(1)

    _configure_logging(cfg)
    store_dir = resolve_store_dir(folder, db_path, cfg)
    _require_index(store_dir)

    filters = SearchFilters(library_id=library, difficulty=difficulty, topic_name=topic)
    try:
        container = create_services(cfg, store_dir)
        with console.status(f"[bold blue]Searching for[/bold blue] '{query}'..."):
            results = asyncio.run(_run_search(container, query, actual_limit, filters))
    except Exception as e:
        logger.debug("Search failed", exc_info=True)
        render_error(console, str(e))
        raise typer.Exit(1)

    render_search_results(console, results)


async def _run_stats(container: ServicesContainer) -> IndexStats:
    try:
        return await container.search_service().get_stats()
    finally:
        await container.close()


@app.command()
def stats(
    folder: Path = typer.Argument(Path("."), help="Indexed documentation folder"),
    db_path: Optional[Path] = typer.Option(
        None, "--db-path", help="Index directory (default: <folder>/.docindex)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
):
    """Show statistics of an index."""
    try:
        cfg = load_config(config_path).validate()
    except (ConfigurationError, ValueError, FileNotFoundError) as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    _configure_logging(cfg)
    store_dir = resolve_store_dir(folder, db_path, cfg)
    _require_index(store_dir)

    try:
        container = create_services(cfg, store_dir)
        index_stats = asyncio.run(_run_stats(container))
    except Exception as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    render_stats(console, index_stats)


@app.command()
def clean(
    folder: Path = typer.Argument(Path("."), help="Indexed documentation folder"),
    db_path: Optional[Path] = typer.Option(
        None, "--db-path", help="Index directory (default: <folder>/.docindex)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
):
    """Delete the index of a documentation folder."""
    try:
        cfg = load_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    store_dir = resolve_store_dir(folder, db_path, cfg)

    if not yes and not typer.confirm(f"Delete the index at {store_dir}?"):
        raise typer.Abort()

    try:
        removed = remove_index(store_dir)
    except OSError as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    if removed:
        console.print(f"[bold green]Removed index[/bold green] {store_dir}")
    else:
        console.print(f"[yellow]No index found at[/yellow] {store_dir}")
