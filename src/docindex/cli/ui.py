"""
Rich rendering for the docindex CLI.

Provides the summary panels and result listings printed by the commands.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from docindex.infrastructure.vector_store import SearchResult
from docindex.services import IndexingResult, IndexStats

SNIPPET_LENGTH = 300
MAX_LISTED_FAILURES = 5


def snippet(text: str, length: int = SNIPPET_LENGTH) -> str:
    """First ``length`` characters of a chunk, with an ellipsis when cut."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def render_error(console: Console, message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def render_index_summary(
    console: Console,
    result: IndexingResult,
    stats: IndexStats,
    verbose: bool = False,
) -> None:
    """Print the end-of-run panel and, if any, the failed files."""
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Files Discovered:", str(result.total_files))
    summary.add_row("Processed:", str(result.processed))
    summary.add_row("Skipped (unchanged):", str(result.skipped))
    summary.add_row("Deleted:", str(result.deleted_files))
    summary.add_row("Chunks Written:", str(result.total_chunks))
    if result.failed_files:
        summary.add_row("Failed Files:", f"[red]{len(result.failed_files)}[/red]")
    summary.add_row("Duration:", f"{result.duration_seconds:.2f}s")
    summary.add_row("", "")
    summary.add_row("Total Chunks:", str(stats.total_chunks))
    summary.add_row("Unique Libraries:", str(stats.unique_libraries))
    summary.add_row("Unique Topics:", str(stats.unique_topics))

    console.print(
        Panel(
            summary,
            title="[bold green]Indexing Complete[/bold green]",
            border_style="green",
            expand=False,
        )
    )

    if result.failed_files:
        console.print("\n[bold red]Failed Files:[/bold red]")
        shown = result.failed_files if verbose else result.failed_files[:MAX_LISTED_FAILURES]
        for path in shown:
            console.print(Text(f"  - {path}"))
        if len(shown) < len(result.failed_files):
            console.print(f"  ... and {len(result.failed_files) - len(shown)} more")


def render_search_results(console: Console, results: list[SearchResult]) -> None:
    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    console.print(f"\nFound [bold]{len(results)}[/bold] results:\n")
    for i, result in enumerate(results, 1):
        location = result.library_id
        if result.topic_name:
            location += f" / {result.topic_name}"

        title = Text()
        title.append(f"{i}. {result.original_file_path}", style="bold blue")
        title.append(f"  [{location}]", style="cyan")

        difficulty = result.metadata.get("difficulty")
        subtitle = f"Relevance: [yellow]{result.relevance:.3f}[/yellow]"
        if difficulty:
            subtitle += f"  Difficulty: {difficulty}"

        console.print(
            Panel(
                Text(snippet(result.text)),
                title=title,
                subtitle=subtitle,
                border_style="blue",
                expand=True,
            )
        )


def render_stats(console: Console, stats: IndexStats) -> None:
    grid = Table.grid(padding=1)
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Total Chunks:", str(stats.total_chunks))
    grid.add_row("Indexed Files:", str(stats.indexed_files))
    grid.add_row("Unique Libraries:", str(stats.unique_libraries))
    grid.add_row("Unique Topics:", str(stats.unique_topics))
    grid.add_row("Last Updated:", stats.last_updated or "never")
    console.print(Panel(grid, title="Index Statistics", border_style="blue", expand=False))

    if stats.libraries:
        table = Table(title="Libraries", box=None, show_header=False)
        table.add_column("Library", style="cyan")
        for library in stats.libraries:
            table.add_row(library)
        console.print(Panel(table, border_style="blue", expand=False))
