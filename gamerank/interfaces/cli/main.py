"""
CLI Main - Typer-based command-line interface.

Usage:
    gamerank top --limit 50
    gamerank browse --batch-size 10 --batches 3
    gamerank search "portal"
    gamerank serve
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from gamerank.config import GameRankError, get_settings
from gamerank.domains.enrichment import EnrichedRecord
from gamerank.domains.ranking import BatchPolicy, BatchResult

app = typer.Typer(
    name="gamerank",
    help="GameRank - Games ranked by Metacritic + user score",
    add_completion=False,
)
console = Console()


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Configure logging for all commands."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def top(
    limit: int | None = typer.Option(None, "--limit", "-n", help="Listing size (default from settings)"),
) -> None:
    """Rank the all-time top games in one bulk load."""
    asyncio.run(_top_async(limit))


async def _top_async(limit: int | None) -> None:
    """Async bulk load implementation."""
    from gamerank.domains.session import RankingSession

    settings = get_settings()
    session = RankingSession.from_settings(settings, paged=False)
    if limit is not None:
        session.aggregator.bulk_limit = limit

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Loading data... please wait.", total=None)
            result = await session.aggregator.load_all()

        console.print(_ranking_table(session.aggregator.ranked, title="Top Games"))
        _print_summary(result)

    except GameRankError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await session.close()


@app.command()
def browse(
    batch_size: int | None = typer.Option(None, "--batch-size", "-b", help="Items per batch"),
    batches: int = typer.Option(1, "--batches", "-k", help="Number of batches to load"),
    policy: BatchPolicy | None = typer.Option(None, "--policy", "-p", help="attempts or successes"),
) -> None:
    """Load the paged catalog incrementally and show the ranked list."""
    asyncio.run(_browse_async(batch_size, batches, policy))


async def _browse_async(
    batch_size: int | None,
    batches: int,
    policy: BatchPolicy | None,
) -> None:
    """Async incremental load implementation."""
    from gamerank.domains.session import RankingSession

    settings = get_settings()
    session = RankingSession.from_settings(settings)
    if policy is not None:
        session.aggregator.policy = policy
    size = batch_size or settings.batch_size

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading...", total=batches)
            for i in range(1, batches + 1):
                if not session.aggregator.has_more():
                    break
                progress.update(task, description=f"Batch {i}/{batches}...")
                result = await session.aggregator.load_next_batch(size)
                progress.advance(task)
                _print_summary(result)

        console.print(_ranking_table(session.aggregator.ranked, title="Ranked Games"))
        if session.aggregator.has_more():
            console.print("[dim]More candidates available.[/dim]")

    except GameRankError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await session.close()


@app.command()
def search(
    query: str = typer.Argument(..., help="Game name fragment"),
    batch_size: int | None = typer.Option(None, "--batch-size", "-b", help="Initial batch size"),
) -> None:
    """Search by name, scanning further catalog pages if needed."""
    asyncio.run(_search_async(query, batch_size))


async def _search_async(query: str, batch_size: int | None) -> None:
    """Async search implementation."""
    from gamerank.domains.session import RankingSession

    settings = get_settings()
    session = RankingSession.from_settings(settings)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading...", total=None)
            await session.aggregator.load_next_batch(batch_size or settings.batch_size)
            progress.update(task, description="Searching...")
            results = await session.search_index.search(query)

        if not results.hits:
            console.print(f"[yellow]No results found for:[/yellow] {query}")
            return

        table = Table(title=f"Results for '{query}'")
        _add_columns(table)
        table.add_column("Source", style="dim")
        for hit in results.hits:
            table.add_row(*_row(hit.record, hit.rank), hit.source.value)
        console.print(table)

        if results.fallback_used:
            console.print(
                f"[dim]Fallback scan: {results.pages_scanned} pages, "
                f"ranks relative to {len(session.aggregator.ranked)} ranked games[/dim]"
            )

    except GameRankError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await session.close()


def _add_columns(table: Table) -> None:
    table.add_column("#", style="bold", justify="right")
    table.add_column("Game", style="cyan")
    table.add_column("Metacritic", justify="right")
    table.add_column("User", justify="right")
    table.add_column("Combined", style="green", justify="right")


def _row(record: EnrichedRecord, rank: int | None) -> list[str]:
    return [
        f"#{rank}",
        record.name,
        f"{record.metacritic_score:g}",
        f"{record.user_score:.1f}%",
        f"{record.composite:.1f}",
    ]


def _ranking_table(records: Sequence[EnrichedRecord], title: str) -> Table:
    table = Table(title=title)
    _add_columns(table)
    for record in records:
        table.add_row(*_row(record, record.rank))
    return table


def _print_summary(result: BatchResult) -> None:
    console.print(
        f"[dim]attempted={result.attempted} added={result.added} "
        f"ineligible={len(result.ineligible)} failed={len(result.failed)}[/dim]"
    )


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting GameRank API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "gamerank.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from gamerank import __version__

    console.print(f"GameRank v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
