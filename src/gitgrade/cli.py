"""CLI entry point for gitgrade."""

import asyncio
import json
import logging
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from gitgrade.analyzers.pipeline import AnalysisPipeline
from gitgrade.analyzers.scorer import Scorer
from gitgrade.config import load_settings
from gitgrade.errors import AnalysisError
from gitgrade.models.schemas import AnalysisResult

app = typer.Typer(help="Repository health scoring with AI-generated insights.")

console = Console()

DIMENSION_LABELS = {
    "readme": "README",
    "commit_volume": "Commit Volume",
    "recent_activity": "Recent Activity",
    "tests": "Tests",
    "cicd": "CI/CD",
    "branches": "Branch Usage",
    "pull_requests": "Pull Requests",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def analyze(
    repo_url: str = typer.Argument(..., help="GitHub repository URL"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    skip_ai: bool = typer.Option(False, "--skip-ai", help="Use templated insights instead of Gemini"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Analyze a repository and calculate its score."""
    _configure_logging(verbose)
    asyncio.run(_analyze(repo_url, output, skip_ai))


async def _analyze(repo_url: str, output: Path | None, skip_ai: bool) -> None:
    """Async implementation of analyze."""
    settings = load_settings()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Analyzing repository...", total=None)

        async with httpx.AsyncClient(timeout=30.0) as client:
            pipeline = AnalysisPipeline.from_settings(settings, client=client, skip_ai=skip_ai)
            try:
                result = await pipeline.analyze_repository(repo_url)
            except AnalysisError as e:
                console.print(f"[red]{e}[/red]")
                raise typer.Exit(1)

    _print_result(result)

    if output:
        output.write_text(json.dumps(result.model_dump(mode="json"), indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


def _print_result(result: AnalysisResult) -> None:
    """Display an analysis result."""
    metrics = result.metrics

    console.print()
    console.print(f"[bold cyan]{metrics.name}[/bold cyan]")
    console.print()

    score_color = _color(result.score)
    console.print(
        Panel(
            f"[bold][{score_color}]{result.score}[/{score_color}][/bold] / 100",
            title="Repository Score",
            expand=False,
        )
    )
    console.print()

    scores_table = Table(title="Score Breakdown", show_header=True)
    scores_table.add_column("Dimension", style="bold")
    scores_table.add_column("Points", justify="right")
    scores_table.add_column("Max", justify="right", style="dim")
    scores_table.add_column("Bar", width=20)

    for component in Scorer().breakdown(metrics):
        pct = component.points / component.cap * 100
        color = _color(pct)
        scores_table.add_row(
            DIMENSION_LABELS.get(component.dimension, component.dimension),
            f"[{color}]{component.points}[/{color}]",
            str(component.cap),
            _score_bar(pct),
        )

    console.print(scores_table)
    console.print()

    def status(val: bool) -> str:
        return "[green]Yes[/green]" if val else "[dim]No[/dim]"

    metrics_table = Table(title="Repository Metrics", show_header=False, box=None)
    metrics_table.add_column("Metric", style="bold")
    metrics_table.add_column("Value", justify="right")

    metrics_table.add_row("Stars", f"{metrics.stars:,}")
    metrics_table.add_row("Forks", f"{metrics.forks:,}")
    metrics_table.add_row("Watchers", f"{metrics.watchers:,}")
    metrics_table.add_row("Open Issues", str(metrics.open_issues))
    metrics_table.add_row("Language", metrics.primary_language)
    metrics_table.add_row("Languages", ", ".join(metrics.languages) or "-")
    metrics_table.add_row("Commits (max 100)", str(metrics.total_commits))
    metrics_table.add_row("Commits (3mo)", str(metrics.recent_commits))
    metrics_table.add_row("Branches", str(metrics.branch_count))
    metrics_table.add_row("Pull Requests", str(metrics.total_prs))
    metrics_table.add_row("README", status(metrics.has_readme))
    metrics_table.add_row("Tests", status(metrics.has_tests))
    metrics_table.add_row("CI/CD", status(metrics.has_cicd))

    console.print(metrics_table)
    console.print()

    console.print("[bold]Summary:[/bold]")
    console.print(result.summary)

    if result.roadmap:
        console.print()
        console.print("[bold green]Roadmap:[/bold green]")
        for i, item in enumerate(result.roadmap, 1):
            console.print(f"  [green]{i}.[/green] {item}")


def _color(score: float) -> str:
    return "green" if score >= 80 else "yellow" if score >= 60 else "red"


def _score_bar(score: float, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(score / 100 * width)
    empty = width - filled
    color = _color(score)
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: HOST or 0.0.0.0)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default: PORT or 5000)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Run the HTTP API server."""
    import uvicorn

    from gitgrade.api import create_app

    settings = load_settings()
    host = host or settings.host
    port = port or settings.port

    console.print("[bold]GitGrade API starting...[/bold]")
    console.print(f"Server running on http://{host}:{port}")
    console.print(f"[dim]Health check: http://{host}:{port}/api/health[/dim]")

    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        log_level="debug" if verbose else "info",
    )


@app.command()
def version() -> None:
    """Show version information."""
    from gitgrade import __version__

    console.print(f"gitgrade v{__version__}")


if __name__ == "__main__":
    app()
