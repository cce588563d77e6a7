"""Typer-based CLI for inspecting and extracting quarterly reports."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .catalog import resolve_period_table
from .core.config import get_settings
from .core.logging import setup_logging
from .models.reports import Quarter, Report
from .parsers.statement import parse_statement
from .services.reports import ReportService

app = typer.Typer(help="Quarterly financial report OCR extraction")
console = Console()


def get_service() -> ReportService:
    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.log_json)
    return ReportService.from_settings(settings)


def _unknown(quarter: Quarter, year: int) -> None:
    typer.secho(f"No financial report found for {year} {quarter.value}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _echo_report(report: Report) -> None:
    typer.echo(report.model_dump_json(indent=2))


@app.command("list")
def list_reports() -> None:
    """List available reports and whether extracted data is cached."""

    service = get_service()
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Period")
    table.add_column("Images")
    table.add_column("Cached")

    for ref in service.list_available_reports():
        report = service.get_report(ref.quarter, ref.year)
        if report is None:
            continue
        table.add_row(
            f"{report.year} {report.quarter.value}",
            str(len(report.image_refs)),
            "yes" if report.extracted_data is not None else "no",
        )

    console.print(table)


@app.command()
def show(
    quarter: Quarter = typer.Argument(..., case_sensitive=False, help="Quarter (Q1-Q4)."),
    year: int = typer.Argument(..., help="Reporting year."),
) -> None:
    """Print a report as stored, without running OCR."""

    report = get_service().get_report(quarter, year)
    if report is None:
        _unknown(quarter, year)
    _echo_report(report)


@app.command()
def extract(
    quarter: Quarter = typer.Argument(..., case_sensitive=False, help="Quarter (Q1-Q4)."),
    year: int = typer.Argument(..., help="Reporting year."),
    force: bool = typer.Option(False, "--force", "-f", help="Re-run OCR even when data is cached."),
) -> None:
    """Extract figures for a report, using the cache unless forced."""

    service = get_service()
    report = asyncio.run(service.process_and_cache_report(quarter, year, force_refresh=force))
    if report is None:
        _unknown(quarter, year)
    _echo_report(report)


@app.command()
def parse(
    text_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved OCR text blob."),
    quarter: Quarter = typer.Option(..., "--quarter", "-q", case_sensitive=False, help="Quarter (Q1-Q4)."),
    year: int = typer.Option(..., "--year", "-y", help="Reporting year."),
) -> None:
    """Run the statement parser on previously captured OCR text."""

    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.log_json)
    data = parse_statement(
        text_file.read_text(encoding="utf-8"),
        quarter,
        year,
        period_table=resolve_period_table(settings.period_table_path),
        magnitude_floor=settings.fallback_magnitude_floor,
    )
    typer.echo(data.model_dump_json(indent=2))


if __name__ == "__main__":  # pragma: no cover
    app()
