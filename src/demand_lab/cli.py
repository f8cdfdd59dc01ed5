"""Command-line interface for Demand Lab."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analytics import normalize_snapshot
from .models import DemandLabReport, DimensionStatus
from .orchestrator import DemandLabOrchestrator
from .storage import StorageManager
from .utils import setup_logging

app = typer.Typer(
    name="demand-lab",
    help="Diagnose demand generation maturity from a website and its analytics.",
    no_args_is_help=True,
)
console = Console()

STATUS_COLORS = {
    DimensionStatus.WEAK: "red",
    DimensionStatus.MODERATE: "yellow",
    DimensionStatus.STRONG: "green",
}


@app.command()
def analyze(
    url: str = typer.Argument(..., help="The website URL to analyze"),
    company_type: str = typer.Option(
        None, "--company-type", "-t", help="Business model, e.g. saas, ecommerce, local service"
    ),
    workspace_id: str = typer.Option(None, "--workspace", "-w", help="Workspace ID for GA4 lookup"),
    analytics_file: Path = typer.Option(
        None, "--analytics", "-a", help="JSON file with an analytics snapshot (skips GA4)"
    ),
    output_dir: Path = typer.Option(None, "--output", "-o", help="Output directory"),
    no_save: bool = typer.Option(False, "--no-save", help="Do not write report.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Analyze a website's demand generation setup."""
    setup_logging(verbose)

    snapshot = None
    if analytics_file:
        try:
            snapshot = normalize_snapshot(json.loads(analytics_file.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            console.print(f"[red]Error: could not read analytics file: {e}[/red]")
            raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold blue]Demand Lab[/bold blue]\n"
        f"Analyzing: [green]{url}[/green]\n"
        f"Company type: {company_type or 'unknown'} | "
        f"Analytics: {'file' if snapshot else 'GA4' if workspace_id else 'GA4 (default)'}",
        title="Starting Analysis",
    ))

    storage = None if no_save else StorageManager(url, output_dir)

    try:
        orchestrator = DemandLabOrchestrator(
            url=url,
            company_type=company_type,
            workspace_id=workspace_id,
            analytics_snapshot=snapshot,
            storage=storage,
        )
        report = asyncio.run(orchestrator.run())
        _display_results(report, storage)

    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)


def _display_results(report: DemandLabReport, storage: StorageManager | None) -> None:
    """Display report results in formatted tables."""
    scoring = report.scoring
    confidence = report.data_confidence
    console.print()

    table = Table(title="Demand Lab Scores", show_header=True)
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Issues", justify="right")

    for dim in scoring.dimensions:
        color = STATUS_COLORS[dim.status]
        table.add_row(dim.label, str(dim.score), f"[{color}]{dim.status.value}[/{color}]", str(len(dim.issues)))

    table.add_row("[bold]Overall[/bold]", f"[bold]{scoring.overall_score}[/bold]", scoring.maturity_stage.value, str(len(scoring.issues)))
    console.print(table)

    console.print(
        f"\nData confidence: [bold]{confidence.level.value}[/bold] ({confidence.score}/100) | "
        f"Pages analyzed: {len(report.findings.pages_analyzed)}"
    )
    console.print(f"\n{report.narrative_summary}")

    if report.quick_wins:
        console.print("\n[yellow]Quick Wins:[/yellow]")
        for win in report.quick_wins:
            console.print(f"  • [{win.expected_impact.value} impact / {win.effort_level.value} effort] {win.action}")

    if report.projects:
        console.print("\n[magenta]Strategic Projects:[/magenta]")
        for project in report.projects:
            console.print(f"  • {project.title} ({project.time_horizon})")
            console.print(f"    {project.description}")

    if report.errors:
        console.print("\n[red]Errors:[/red]")
        for error in report.errors[:5]:
            console.print(f"  • {error}")

    if storage:
        console.print(Panel.fit(
            f"Report: [bold green]{storage.get_output_dir() / 'report.json'}[/bold green]",
            title="Output Location",
        ))


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    console.print(f"Demand Lab version {__version__}")


if __name__ == "__main__":
    app()
