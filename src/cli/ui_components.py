"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar la orquestación con detalles visuales.
- Los callbacks de `ReproHooks` se construyen aquí a partir de una `Console`.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.shippo_client import ShippoAPIError
from core.domain.dates import ShipmentDates, to_iso
from core.domain.models import Manifest
from core.services.manifest_repro import ReproHooks


def print_banner(console: Console) -> None:
    title = Text("shipdate-probe", style="bold cyan")
    subtitle = Text("Shippo • transacciones • manifest entre zonas horarias", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def debug(console: Console, *data: Any) -> None:
    """Strings en verde; cualquier otra cosa como JSON indentado."""

    for item in data:
        if isinstance(item, str):
            console.print(item, style="green", markup=False, highlight=False)
        else:
            console.print_json(data=item, indent=2, default=str)


def build_dates_table(dates: ShipmentDates, zone: tzinfo) -> Table:
    """Cada fecha en UTC y en la zona civil de referencia."""

    table = Table(title="Shipment dates")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("UTC", style="cyan")
    table.add_column(str(zone), style="magenta")
    table.add_column("Date (UTC / local)", style="white")
    for index, (utc_value, local_value) in enumerate(zip(dates.as_list(), dates.in_zone(zone)), start=1):
        table.add_row(
            str(index),
            to_iso(utc_value),
            to_iso(local_value),
            f"{utc_value.date().isoformat()} / {local_value.date().isoformat()}",
        )
    return table


def build_manifest_panel(manifest: Manifest) -> Panel:
    """Resumen del manifest; el estado se muestra tal cual lo devolvió Shippo."""

    status = manifest.status or "UNKNOWN"
    style = "red" if status.upper() == "ERROR" else "green"
    body = Text()
    body.append(f"Status: {status}\n", style=f"bold {style}")
    if manifest.object_id:
        body.append(f"object_id: {manifest.object_id}\n")
    for error in manifest.errors or []:
        body.append(f"- {error}\n", style="red")
    return Panel(body, title=Text("Manifest", style="bold yellow"), border_style=style)


def print_error(console: Console, exc: BaseException) -> None:
    """Error en rojo; si viene de la API, también su payload tal cual."""

    if isinstance(exc, ShippoAPIError):
        console.print(str(exc), style="red", markup=False, highlight=False)
        debug(console, exc.payload)
    else:
        console.print(f"{type(exc).__name__}: {exc}", style="red", markup=False, highlight=False)


def build_console_hooks(console: Console, zone: tzinfo, err_console: Console | None = None) -> ReproHooks:
    def _dates(dates: ShipmentDates) -> None:
        debug(
            console,
            "Dates:",
            *(f"{to_iso(u)} ({to_iso(z)})" for u, z in zip(dates.as_list(), dates.in_zone(zone))),
        )
        console.print(build_dates_table(dates, zone))

    def _request(label: str, payload: dict[str, Any]) -> None:
        debug(console, label, payload)

    def _response(payload: Any) -> None:
        debug(console, payload)

    def _failure(exc: BaseException) -> None:
        print_error(err_console or console, exc)

    return ReproHooks(dates_computed=_dates, request=_request, response=_response, failure=_failure)
