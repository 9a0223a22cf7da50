"""Run log commands - inspect past CLI runs."""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..logging import get_run_logger

app = typer.Typer(help="Inspect the local log of extraction runs")
console = Console()


@app.command("list")
def list_runs(
    command: Optional[str] = typer.Option(None, "--command", "-c", help="Only runs of this command"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Only runs with this status (started, success, error)"),
    since_hours: int = typer.Option(24, "--since", help="Look back N hours"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum number of runs"),
):
    """Show recent runs."""
    run_logger = get_run_logger()
    if not run_logger.enabled:
        console.print("[yellow]Run logging is disabled[/yellow]")
        raise typer.Exit(1)

    runs = run_logger.query_runs(command=command, status=status, since_hours=since_hours, limit=limit)
    if not runs:
        console.print("[dim]No runs found[/dim]")
        return

    table = Table(title="Runs")
    table.add_column("Run", style="cyan")
    table.add_column("Time")
    table.add_column("Command")
    table.add_column("Database")
    table.add_column("Status")
    table.add_column("Objects", justify="right")
    table.add_column("Duration", justify="right")

    for run in runs:
        status_style = {"success": "green", "error": "red"}.get(run["status"], "yellow")
        duration = f"{run['duration_ms']}ms" if run["duration_ms"] is not None else "-"
        table.add_row(
            run["run_id"],
            run["timestamp"],
            run["command"],
            run["database_name"] or "-",
            f"[{status_style}]{run['status']}[/{status_style}]",
            str(run["objects_count"] or 0),
            duration,
        )
    console.print(table)


@app.command("stats")
def run_stats(
    since_hours: int = typer.Option(24, "--since", help="Look back N hours"),
):
    """Show run statistics."""
    run_logger = get_run_logger()
    if not run_logger.enabled:
        console.print("[yellow]Run logging is disabled[/yellow]")
        raise typer.Exit(1)

    stats = run_logger.get_stats(since_hours=since_hours)
    console.print(f"[bold]Runs in the last {stats['since_hours']}h[/bold]")
    console.print(f"  Total: {stats['total_runs']}")
    console.print(f"  Succeeded: [green]{stats['success_count']}[/green]")
    console.print(f"  Failed: [red]{stats['error_count']}[/red]")
    console.print(f"  Average duration: {stats['avg_duration_ms']}ms")
    console.print(f"  Objects extracted: {stats['total_objects_extracted']}")

    for error in stats["recent_errors"]:
        console.print(f"  [red]{error['run_id']}[/red] {error['command']}: {escape(error['error_message'] or '')}")
