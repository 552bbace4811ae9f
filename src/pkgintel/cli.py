"""CLI entry point for pkgintel."""

import asyncio
import json
import logging

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pkgintel.config import Settings, load_settings
from pkgintel.engine import RegistryEngine
from pkgintel.models.envelope import ErrorResponse
from pkgintel.models.schemas import MaintenanceSignals, PackageSummary, Rating, ReleaseTimeline

app = typer.Typer(help="Package summaries, release timelines and maintenance signals.")

console = Console()
err_console = Console(stderr=True)

RATING_COLORS = {
    Rating.GOOD: "green",
    Rating.FAIR: "yellow",
    Rating.POOR: "red",
}


def _setup(settings: Settings) -> RegistryEngine:
    logging.basicConfig(
        level=settings.logging_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    return RegistryEngine(settings.engine_config())


def _run_query(description: str, coro):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        return asyncio.run(coro)


def _emit(result, as_json: bool, render) -> None:
    """Print an envelope and exit non-zero on failure."""
    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    elif isinstance(result, ErrorResponse):
        console.print(f"[red]{result.error.code.value}: {result.error.message}[/red]")
    else:
        render(result.data)
        for warning in result.meta.warnings:
            console.print(f"[yellow]![/yellow] {warning}")
        if result.meta.source:
            console.print(f"[dim]Source: {result.meta.source}[/dim]")

    if isinstance(result, ErrorResponse):
        raise typer.Exit(1)


def _rating(rating: Rating) -> str:
    color = RATING_COLORS[rating]
    return f"[{color}]{rating.value}[/{color}]"


def _render_summary(summary: PackageSummary) -> None:
    console.print()
    console.print(f"[bold cyan]{summary.name}[/bold cyan] v{summary.version}")
    if summary.description:
        console.print(f"[dim]{summary.description}[/dim]")
    console.print()

    info_table = Table(show_header=False, box=None)
    info_table.add_column("Key", style="bold")
    info_table.add_column("Value")

    info_table.add_row("Homepage", summary.homepage or "-")
    info_table.add_row("Repository", summary.repository or "-")
    info_table.add_row("License", summary.license or "-")
    info_table.add_row("Keywords", ", ".join(summary.keywords) or "-")

    if summary.downloads:
        if summary.downloads.total is not None:
            info_table.add_row("Downloads", f"{summary.downloads.total:,}")
        if summary.downloads.weekly is not None:
            info_table.add_row("Recent Downloads", f"{summary.downloads.weekly:,}")

    console.print(info_table)


def _render_timeline(timeline: ReleaseTimeline) -> None:
    table = Table(
        title=f"{timeline.package_name} ({timeline.ecosystem.value}): "
        f"{len(timeline.releases)} of {timeline.total_versions} releases"
    )
    table.add_column("Version", style="cyan")
    table.add_column("Date")
    table.add_column("Pre", justify="center")

    for release in timeline.releases:
        table.add_row(
            release.version,
            release.date,
            "[yellow]yes[/yellow]" if release.is_prerelease else "",
        )

    console.print(table)


def _render_maintenance(signals: MaintenanceSignals) -> None:
    console.print()
    console.print(
        f"[bold cyan]{signals.package_name}[/bold cyan] "
        f"({signals.ecosystem.value})  Maintenance: [bold]{_rating(signals.maintenance_score)}[/bold]"
    )
    if signals.is_deprecated:
        message = signals.deprecation_message or "flagged as deprecated"
        console.print(f"[red]Deprecated:[/red] {message}")
    console.print()

    table = Table(title="Signals", show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    days = signals.days_since_last_release
    table.add_row("Last Release", signals.last_release_date or "-")
    table.add_row("Days Since Release", str(days) if days >= 0 else "-")
    table.add_row("Releases / Year", f"{signals.releases_per_year:.2f}")
    table.add_row("Total Versions", str(signals.total_versions))
    table.add_row("Recency", _rating(signals.score_factors.recency))
    table.add_row("Frequency", _rating(signals.score_factors.frequency))
    table.add_row("Maturity", _rating(signals.score_factors.maturity))

    console.print(table)


@app.command()
def summary(
    ecosystem: str = typer.Argument(..., help="Package ecosystem (npm, pypi, crates)"),
    package: str = typer.Argument(..., help="Package name"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response envelope"),
) -> None:
    """Show summary information for a package."""
    engine = _setup(load_settings())
    result = _run_query("Fetching package...", engine.package_summary(ecosystem, package))
    _emit(result, as_json, _render_summary)


@app.command()
def timeline(
    ecosystem: str = typer.Argument(..., help="Package ecosystem (npm, pypi, crates)"),
    package: str = typer.Argument(..., help="Package name"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Releases to show (default 20, max 100)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response envelope"),
) -> None:
    """Show release history, newest first."""
    engine = _setup(load_settings())
    result = _run_query(
        "Fetching releases...", engine.release_timeline(ecosystem, package, limit)
    )
    _emit(result, as_json, _render_timeline)


@app.command()
def maintenance(
    ecosystem: str = typer.Argument(..., help="Package ecosystem (npm, pypi, crates)"),
    package: str = typer.Argument(..., help="Package name"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response envelope"),
) -> None:
    """Score maintenance health from release metadata."""
    engine = _setup(load_settings())
    result = _run_query(
        "Analyzing releases...", engine.maintenance_signals(ecosystem, package)
    )
    _emit(result, as_json, _render_maintenance)


@app.command()
def config() -> None:
    """Show effective settings."""
    settings = load_settings()

    table = Table(title="Settings", show_header=False, box=None)
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Request Timeout", f"{settings.request_timeout_ms} ms")
    table.add_row("User Agent", settings.user_agent)
    table.add_row("Cache TTL", f"{settings.cache_ttl} s")
    table.add_row("Log Level", settings.log_level)
    for ecosystem, url in settings.registry_urls.items():
        table.add_row(f"{ecosystem.value} Registry", url)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from pkgintel import __version__

    console.print(f"pkgintel v{__version__}")


if __name__ == "__main__":
    app()
