"""Run history commands."""

import json
import typer
from typing import Optional
from rich.console import Console
from rich.table import Table
from ..logging import get_cli_logger

app = typer.Typer(help="Inspect logged CLI runs")
console = Console()


@app.command("list")
def list_runs(
    status: Optional[str] = typer.Option(None, "--status", help="Filter by status (started, success, error)"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Filter by database"),
    since_hours: int = typer.Option(24, "--since", help="Look back N hours"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of runs"),
):
    """List recent runs."""
    run_logger = get_cli_logger()
    if not run_logger.enabled:
        console.print("[yellow]Run logging is disabled (CLI_LOGGING_ENABLED=false).[/yellow]")
        return

    runs = run_logger.query_runs(status=status, database_name=database, since_hours=since_hours, limit=limit)
    if not runs:
        console.print("[yellow]No runs found.[/yellow]")
        return

    table = Table(title=f"Runs in the last {since_hours}h")
    table.add_column("Run ID", style="cyan")
    table.add_column("Timestamp")
    table.add_column("Database", style="green")
    table.add_column("Status")
    table.add_column("Tables", justify="right")
    table.add_column("Duration", justify="right")

    for run in runs:
        status_style = {"success": "green", "error": "red"}.get(run["status"], "yellow")
        duration = f"{run['duration_ms']}ms" if run.get("duration_ms") is not None else "-"
        table.add_row(
            run["run_id"],
            run["timestamp"][:19].replace("T", " "),
            run.get("database_name") or "N/A",
            f"[{status_style}]{run['status']}[/{status_style}]",
            str(run.get("tables_count") or 0),
            duration,
        )

    console.print(table)


@app.command("show")
def show_run(
    run_id: str = typer.Argument(..., help="Run ID"),
):
    """Show details of one run."""
    run = get_cli_logger().get_run(run_id)
    if run is None:
        console.print(f"[red]Run not found: {run_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Run: {run['run_id']}[/bold]")
    for key in ("timestamp", "command", "host", "database_name", "output_dir", "status",
                "duration_ms", "schemas_count", "tables_count", "columns_count", "files_written"):
        console.print(f"  {key}: {run.get(key)}")

    if run.get("outputs_generated"):
        console.print(f"  outputs: {', '.join(json.loads(run['outputs_generated']))}")
    if run.get("error_message"):
        console.print(f"  [red]{run.get('error_type')}: {run['error_message']}[/red]")


@app.command("stats")
def run_stats(
    since_hours: int = typer.Option(24, "--since", help="Look back N hours"),
):
    """Show aggregate run statistics."""
    stats = get_cli_logger().get_stats(since_hours=since_hours)
    if "error" in stats:
        console.print(f"[yellow]{stats['error']}[/yellow]")
        return

    console.print(f"[bold]Runs in the last {since_hours}h[/bold]")
    console.print(f"  Total: {stats['total_runs']}")
    console.print(f"  Succeeded: [green]{stats['success_count']}[/green]")
    console.print(f"  Failed: [red]{stats['error_count']}[/red]")
    console.print(f"  Average duration: {stats['avg_duration_ms']}ms")
    console.print(f"  Tables generated: {stats['total_tables_generated']}")

    for err in stats["recent_errors"]:
        console.print(f"  [red]{err['run_id']} {err['error_type']}: {err['error_message']}[/red]")
