"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.valet_api import DEFAULT_SERIES, observations_request
from cli.ui_components import print_banner
from core.config import AppSettings
from core.services.schema_validator import observations_validator

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.status_code == 200, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_schema(settings: AppSettings) -> tuple[bool, str]:
    """Load and compile the observations schema."""

    try:
        observations_validator(settings=settings)
        return True, str(settings.schema_path or "bundled schema")
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    print_banner(_console)

    table = Table(title="Valet Harness Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Log level", "OK", f"{settings.log_level} ({'json' if settings.log_json else 'text'})")

    # Schema
    ok_schema, detail_schema = _check_schema(settings)
    table.add_row("Observations schema", "OK" if ok_schema else "FAIL", detail_schema)

    # Connectivity (best-effort)
    url = observations_request(DEFAULT_SERIES, settings=settings, recent=1).build_url()
    ok_http, detail_http = asyncio.run(_check_http(url, settings))
    table.add_row("Valet connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Live tests (VALET_LIVE_TESTS=1) need access to "
            f"{settings.base_url}."
        )
    if not (ok_schema and ok_http):
        raise typer.Exit(code=1)
