"""Command Line Interface for Patient Directory.

This module provides a CLI using Typer for serving the API and for querying
the dataset straight from a terminal.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from patient_directory import __version__
from patient_directory.adapters.json_record_source import JSONRecordSource
from patient_directory.domain.patient_record import PatientRecord
from patient_directory.domain.pipeline import execute, list_categories
from patient_directory.domain.ports import RecordSourceError
from patient_directory.domain.query import QueryRequest, QueryResult
from patient_directory.infrastructure.settings import settings

app = typer.Typer(
    name="patient-directory",
    help="Patient Directory: read-only patient query service",
    add_completion=False
)
console = Console()


def create_record_source(data_file: Optional[Path]) -> JSONRecordSource:
    """Create a record source from an explicit path or the configured one."""
    config = settings.data_source_config
    if data_file is not None:
        config = config.model_copy(update={"data_file": str(data_file)})
    return JSONRecordSource.from_config(config)


def load_or_exit(source: JSONRecordSource) -> tuple[PatientRecord, ...]:
    """Load records, printing the failure and exiting with code 1 on error."""
    try:
        return source.load_records()
    except RecordSourceError as e:
        console.print(f"[red]✗[/red] {str(e)}: {e.source}")
        raise typer.Exit(code=1)


def format_patient_id(patient_id: int) -> str:
    """Format an id the way the directory displays it, e.g. ``ID-0007``."""
    return f"ID-{patient_id:04d}"


def build_patient_table(result: QueryResult) -> Table:
    """Render one page of results as a Rich table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Age", justify="right")
    table.add_column("Phone")
    table.add_column("Email")
    table.add_column("Medical Issue")

    for record in result.items:
        contact = record.primary_contact
        table.add_row(
            format_patient_id(record.patient_id),
            record.patient_name,
            str(record.age) if record.age is not None else "[dim]-[/dim]",
            (contact.number if contact else None) or "[dim]-[/dim]",
            (contact.email if contact else None) or "[dim]-[/dim]",
            record.medical_issue,
        )

    return table


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server.

    Examples:
        patient-directory serve
        patient-directory serve --port 9000 --reload
    """
    import uvicorn

    bind_host = host or settings.api_host
    bind_port = port or settings.api_port
    console.print(f"[bold blue]{settings.app_name}[/bold blue] listening on {bind_host}:{bind_port}")
    uvicorn.run(
        "patient_directory.api.main:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower()
    )


@app.command()
def query(
    page: str = typer.Option("1", "--page", help="Page number"),
    limit: str = typer.Option("10", "--limit", "-l", help="Items per page (1-100)"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Search text"),
    sort_by: str = typer.Option("patient_name", "--sort-by", help="patient_name, age, patient_id or medical_issue"),
    sort_order: str = typer.Option("asc", "--sort-order", help="asc or desc"),
    medical_issue: Optional[str] = typer.Option(None, "--medical-issue", "-m", help="Comma-separated medical issues"),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help="Dataset path (overrides PD_DATA_FILE)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Query the dataset and print one page of patients.

    Examples:
        patient-directory query --search 555
        patient-directory query --medical-issue fever,rash --sort-by age --sort-order desc
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    request = QueryRequest.from_params({
        "page": page,
        "limit": limit,
        "search": search,
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "medicalIssue": medical_issue,
    })
    records = load_or_exit(create_record_source(data_file))
    result = execute(records, request)

    if as_json:
        payload = {
            "data": [record.model_dump(mode="json") for record in result.items],
            "pagination": result.pagination.model_dump(by_alias=True),
        }
        console.print_json(json.dumps(payload))
        return

    pagination = result.pagination
    if not result.items:
        console.print("[yellow]⚠[/yellow] No patients found")
    else:
        console.print(build_patient_table(result))

    console.print(
        f"Page {pagination.current_page} of {pagination.total_pages} "
        f"[dim]({pagination.total_items:,} matching patients)[/dim]"
    )


@app.command()
def categories(
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help="Dataset path (overrides PD_DATA_FILE)"),
) -> None:
    """List medical issue categories with patient counts."""
    records = load_or_exit(create_record_source(data_file))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Medical Issue", style="cyan")
    table.add_column("Patients", justify="right")
    for label, count in list_categories(records):
        table.add_row(label, f"{count:,}")

    console.print(table)
    console.print(f"[dim]Total patients:[/dim] {len(records):,}")


@app.command()
def info() -> None:
    """Display configuration."""
    console.print("[bold blue]System Information[/bold blue]\n")

    config = settings.data_source_config
    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Version:", __version__)
    info_table.add_row("Data File:", config.data_file)
    info_table.add_row("Encoding:", config.encoding)
    info_table.add_row("Cache:", "Enabled" if config.cache_enabled else "Disabled")
    info_table.add_row("API Address:", f"{settings.api_host}:{settings.api_port}")
    info_table.add_row("Log Level:", settings.log_level)

    console.print(info_table)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"Patient Directory v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version information"
    )
) -> None:
    """Patient Directory: read-only patient query service."""


if __name__ == "__main__":
    app()
