"""mysql-dto CLI - Main entry point."""

import typer
from rich.console import Console
from .commands import generate, runs
from .config import settings
from .errors import DtoGenError

app = typer.Typer(
    name="mysql-dto",
    help="Generate TypeScript DTO interfaces from a MySQL catalog",
    add_completion=False,
)

# Add subcommands
app.command("generate")(generate.generate)
app.add_typer(runs.app, name="runs")

console = Console()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  MySQL host: {settings.mysql_host}:{settings.mysql_port}")
    console.print(f"  MySQL user: {settings.mysql_user or 'Not set'}")
    console.print(f"  MySQL password: {'Configured' if settings.mysql_password else 'Not set'}")
    console.print(f"  Database: {settings.mysql_database or 'Not set'}")
    console.print(f"  Output directory: {settings.dto_output_dir or 'Not set'}")
    console.print(f"  Run logging: {'Enabled' if settings.cli_logging_enabled else 'Disabled'}")


@app.command()
def check(
    host: str = typer.Option(None, "--host", help="MySQL host (or MYSQL_HOST env)"),
    port: int = typer.Option(None, "--port", "-P", help="MySQL port (or MYSQL_PORT env)"),
    user: str = typer.Option(None, "--user", "-u", help="MySQL user (or MYSQL_USER env)"),
    password: str = typer.Option(None, "--password", "-p", help="MySQL password (or MYSQL_PASSWORD env)"),
    database: str = typer.Option(None, "--database", "-d", help="Database (or MYSQL_DATABASE env)"),
):
    """Check the connection to MySQL."""
    try:
        with generate.build_reader(host, port, user, password, database) as reader:
            reader.ping()
            console.print(f"[green]Connected to MySQL at {reader.host}:{reader.port}/{reader.database}[/green]")
    except DtoGenError as e:
        console.print(f"[red]Cannot connect to MySQL: {e.message}[/red]")
        raise typer.Exit(1)


@app.callback()
def main():
    """
    mysql-dto - Generate TypeScript DTO interfaces from a MySQL catalog.

    Examples:

        mysql-dto generate --user root --database shop --outdir ./dto

        mysql-dto check --user root --database shop

        mysql-dto runs list --status error
    """
    pass


if __name__ == "__main__":
    app()
