"""CLI `valet` (Typer + Rich).

Comandos:
- `average`: tasa promedio FROM->TO en las últimas N semanas.
- `observations`: lista observaciones de una o más series.
- `check-schema`: valida la respuesta de observations contra el JSON Schema.
- `doctor run`: diagnóstico de entorno.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from adapters.http_client import ApiClient
from adapters.valet_api import DEFAULT_SERIES, observations_request, parse_observations
from cli import doctor
from cli.ui_components import build_average_panel, build_observations_table
from core.config import AppSettings
from core.domain.results import AverageOk
from core.logging import init_logging
from core.services.metrics import MetricCalculator
from core.services.schema_validator import observations_validator

app = typer.Typer(no_args_is_help=True, help="Bank of Canada Valet API harness.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def build_api_client(settings: AppSettings) -> ApiClient:
    return ApiClient(settings)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
    text_logs: bool = typer.Option(False, "--text-logs", help="Plain-text logs instead of JSON."),
) -> None:
    settings = AppSettings()
    init_logging("DEBUG" if verbose else settings.log_level, as_json=settings.log_json and not text_logs)


@app.command()
def average(
    weeks: int = typer.Argument(..., help="Number of recent weeks."),
    currency_from: str = typer.Argument(..., metavar="FROM", help="3-letter code, e.g. USD."),
    currency_to: str = typer.Argument(..., metavar="TO", help="3-letter code, e.g. CAD."),
) -> None:
    """Average conversion rate FROM->TO over the last WEEKS weeks."""

    settings = AppSettings()
    calculator = MetricCalculator(build_api_client(settings), settings=settings)
    result = asyncio.run(calculator.compute(weeks, currency_from, currency_to))
    _console.print(build_average_panel(result, weeks=weeks))
    if not isinstance(result, AverageOk):
        raise typer.Exit(code=1)


@app.command()
def observations(
    series: str = typer.Argument(DEFAULT_SERIES, help="Comma-separated series names."),
    fmt: str = typer.Option("json", "--format", help="Response format requested from Valet."),
    recent: Optional[int] = typer.Option(None, help="Most recent N observations."),
    recent_weeks: Optional[int] = typer.Option(None, help="Most recent N weeks."),
    recent_months: Optional[int] = typer.Option(None, help="Most recent N months."),
    recent_years: Optional[int] = typer.Option(None, help="Most recent N years."),
    start_date: Optional[str] = typer.Option(None, help="YYYY-MM-DD (inclusive)."),
    end_date: Optional[str] = typer.Option(None, help="YYYY-MM-DD (inclusive)."),
    order_dir: Optional[str] = typer.Option(None, help="asc or desc."),
) -> None:
    """List observations for one or more series."""

    settings = AppSettings()
    request = observations_request(
        series,
        fmt,
        settings=settings,
        start_date=start_date,
        end_date=end_date,
        recent=recent,
        recent_weeks=recent_weeks,
        recent_months=recent_months,
        recent_years=recent_years,
        order_dir=order_dir,
    ).build()
    response = asyncio.run(build_api_client(settings).dispatch(request))

    if response is None:
        _console.print("[red]No response from Valet.[/red]")
        raise typer.Exit(code=1)
    if response.status != 200:
        _console.print(f"[red]HTTP {response.status}[/red] {response.message() or ''}".rstrip())
        raise typer.Exit(code=1)
    if not isinstance(response.data, dict):
        # xml/csv: se imprime tal cual.
        _console.print(response.data)
        return

    names = [s.strip().upper() for s in series.split(",") if s.strip()]
    _console.print(build_observations_table(names, parse_observations(response.data)))


@app.command(name="check-schema")
def check_schema(
    series: str = typer.Argument(DEFAULT_SERIES, help="Comma-separated series names."),
    recent: int = typer.Option(10, help="Most recent N observations to fetch."),
) -> None:
    """Fetch observations and validate them against the JSON Schema."""

    settings = AppSettings()
    validator = observations_validator(settings=settings)
    request = observations_request(series, settings=settings, recent=recent).build()
    response = asyncio.run(build_api_client(settings).dispatch(request))

    if response is None or response.status != 200:
        status = "no response" if response is None else f"HTTP {response.status}"
        _console.print(f"[red]Could not fetch observations ({status}).[/red]")
        raise typer.Exit(code=1)

    if validator.validate(response.data):
        _console.print("[green]Schema OK[/green]")
        return

    _console.print("[red]Schema validation failed:[/red]")
    for err in validator.errors(response.data):
        _console.print(f"- {err}")
    raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
