"""Componentes de UI para CLI (Rich).

Separa los detalles visuales (tablas/paneles) de la lógica de comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import SeriesObservation
from core.domain.results import AverageOk, AverageRateResult, InvalidInput


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("VALET HARNESS", style="bold cyan")
    subtitle = Text("Bank of Canada Valet API • Observations • FX", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_observations_table(series: list[str], observations: list[SeriesObservation]) -> Table:
    table = Table(title="Observations")
    table.add_column("Date", style="cyan", no_wrap=True)
    for name in series:
        table.add_column(name, style="white", justify="right")
    for obs in observations:
        table.add_row(obs.date, *[(obs.value(name) or "-") for name in series])
    return table


def build_average_panel(result: AverageRateResult, *, weeks: int) -> Panel:
    """Panel para el resultado de `average` (OK o motivo del fallo)."""

    body = Text()
    if isinstance(result, AverageOk):
        body.append(f"{result.value:.6f}", style="bold green")
        body.append(f"\n\nSeries: {result.series}", style="dim")
        body.append(f"\nObservations: {result.count}", style="dim")
        body.append(f"\nWindow: {weeks} week(s)", style="dim")
        return Panel(body, title=Text("Average rate", style="bold green"), border_style="green")

    if isinstance(result, InvalidInput):
        body.append(result.reason)
        return Panel(body, title=Text("Invalid input", style="bold yellow"), border_style="yellow")

    body.append(result.message)
    if result.status is not None:
        body.append(f"\nHTTP {result.status}", style="dim")
    return Panel(body, title=Text("Upstream error", style="bold red"), border_style="red")
