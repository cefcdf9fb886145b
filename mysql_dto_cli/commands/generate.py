"""DTO generation command - writes TypeScript models for every MySQL schema."""

import logging
from typing import List, Optional

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import settings
from ..database import MySqlCatalogReader
from ..database.models import GeneratedOutput
from ..errors import DtoGenError, ValidationError
from ..files import validate_output_dir, write_outputs
from ..logging import get_cli_logger
from ..typescript import DtoGenerator

logger = logging.getLogger(__name__)
console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_reader(
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    database: Optional[str] = None,
) -> MySqlCatalogReader:
    """Create a catalog reader, falling back to settings for missing options.

    Raises:
        ValidationError: if the user or database name is missing
    """
    user = user or settings.mysql_user
    if not user or not user.strip():
        raise ValidationError("MySQL user is required (--user or MYSQL_USER)")

    return MySqlCatalogReader(
        database=database or settings.mysql_database or "",
        host=host or settings.mysql_host,
        port=port or settings.mysql_port,
        user=user,
        password=password if password is not None else settings.mysql_password,
    )


def display_outputs(outputs: List[GeneratedOutput], written: List[str]) -> None:
    """Print a summary table of generated modules."""
    table = Table(title="Generated Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Size", style="green", justify="right")
    table.add_column("File", style="magenta")

    for index, output in enumerate(outputs):
        path = written[index] if index < len(written) else "-"
        table.add_row(output.name, f"{len(output.content)} chars", path)

    console.print(table)


def generate(
    host: Optional[str] = typer.Option(None, "--host", help="MySQL host (or MYSQL_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-P", help="MySQL port (or MYSQL_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user (or MYSQL_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="MySQL password (or MYSQL_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database to connect to (or MYSQL_DATABASE env)"),
    outdir: Optional[str] = typer.Option(None, "--outdir", "-o", help="Directory for generated .ts files (or DTO_OUTPUT_DIR env)"),
    schema: Annotated[Optional[List[str]], typer.Option(
        "--schema", "-s",
        help="Only generate this schema. Can be specified multiple times."
    )] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Print generated code instead of writing files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Generate TypeScript DTO interfaces from a MySQL database.

    One <schema>.ts module is written per user schema, plus a shared
    _types.ts module. System schemas are never generated.

    Examples:
        mysql-dto generate -u root -d shop -o ./src/dto
        mysql-dto generate -u root -d shop -s shop -s billing --dry-run
    """
    configure_logging(verbose)

    try:
        output_dir = None if dry_run else validate_output_dir(outdir or settings.dto_output_dir)
        reader = build_reader(host, port, user, password, database)
    except ValidationError as e:
        logger.error("Invalid options: %s", e.message)
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold blue]Generating TypeScript DTOs from MySQL[/bold blue]\n"
        f"Server: {reader.host}:{reader.port}\n"
        f"Database: {reader.database}\n"
        f"Schemas: {', '.join(schema) if schema else 'All user schemas'}",
        title="MySQL DTO Generator"
    ))

    run_logger = get_cli_logger()
    try:
        with run_logger.log_run(
            command="generate",
            host=reader.host,
            database_name=reader.database,
            schema_filter=schema,
            output_dir=output_dir,
            dry_run=dry_run,
        ) as ctx:
            try:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    console=console,
                ) as progress:
                    task = progress.add_task("Checking connection to your database...", total=None)
                    reader.ping()

                    progress.update(task, description="Reading catalog and generating models...")
                    generator = DtoGenerator(reader, schema_filter=schema)
                    outputs = generator.generate()
            finally:
                reader.close()

            ctx.schemas_count = generator.stats.schemas_count
            ctx.tables_count = generator.stats.tables_count
            ctx.columns_count = generator.stats.columns_count
            ctx.outputs_generated = [o.name for o in outputs]

            written: List[str] = []
            if dry_run:
                for output in outputs:
                    console.print(f"\n[bold cyan]// {output.name}.ts[/bold cyan]")
                    console.print(output.content, markup=False, highlight=False)
            else:
                written = write_outputs(output_dir, outputs)
                ctx.files_written = len(written)

    except DtoGenError as e:
        logger.error("Generation failed: %s", e.to_dict())
        console.print(f"[red]Error: {e.message}[/red]")
        if e.details.get("error"):
            console.print(f"[red]  {e.details['error']}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error during generation")
        console.print(f"[red]Unexpected error: {e}[/red]")
        raise typer.Exit(1)

    display_outputs(outputs, written)
    console.print(
        f"\n[bold green]Done: {ctx.tables_count} tables across "
        f"{ctx.schemas_count} schema(s)[/bold green]"
    )
