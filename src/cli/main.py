"""CLI principal (Typer).

Comandos:
- `repro`: crea dos transacciones de mañana (02:00 y 11:00 UTC) y un manifest.
- `doctor`: diagnóstico de configuración/conectividad.

Este módulo es el único que captura errores: los imprime y sale con código 1.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from adapters.http_client import build_async_client
from adapters.shippo_client import ShippoClient
from cli.doctor import app as doctor_app
from cli.ui_components import build_console_hooks, build_manifest_panel, debug, print_banner, print_error
from core.config import AppSettings, ConfigurationError, load_settings
from core.services.manifest_repro import ManifestDateMode, ManifestRepro, ReproHooks, ReproResult

app = typer.Typer(
    no_args_is_help=True,
    help="Reproduce Shippo manifest creation across timezone boundaries.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


async def execute_repro(
    settings: AppSettings,
    *,
    hooks: ReproHooks | None = None,
    manifest_date_mode: ManifestDateMode = ManifestDateMode.END_OF_DAY,
) -> ReproResult:
    """Un cliente HTTP por ejecución, cerrado al terminar."""

    async with build_async_client(settings) as client:
        repro = ManifestRepro(ShippoClient(client), settings, hooks=hooks)
        return await repro.run(manifest_date_mode=manifest_date_mode)


@app.command()
def repro(
    reference_timezone: Optional[str] = typer.Option(
        None,
        "--reference-timezone",
        "-z",
        help="Zona civil para mostrar las fechas (default: REFERENCE_TIMEZONE o America/Los_Angeles).",
    ),
    manifest_date: ManifestDateMode = typer.Option(
        ManifestDateMode.END_OF_DAY,
        "--manifest-date",
        case_sensitive=False,
        help="Fecha del manifest: fin del día de la primera fecha, o la primera fecha tal cual.",
    ),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Mostrar el banner inicial."),
) -> None:
    """Create two transactions and try to manifest them together."""

    overrides: dict[str, object] = {}
    if reference_timezone:
        overrides["reference_timezone"] = reference_timezone

    try:
        settings = load_settings(**overrides)
    except ConfigurationError as exc:
        _err_console.print(str(exc), style="red", markup=False, highlight=False)
        raise typer.Exit(code=1) from exc

    if banner:
        print_banner(_console)

    hooks = build_console_hooks(_console, settings.reference_zone, _err_console)
    try:
        result = asyncio.run(
            execute_repro(settings, hooks=hooks, manifest_date_mode=manifest_date)
        )
    except Exception as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=1) from exc

    _console.print(build_manifest_panel(result.manifest))
    debug(_console, "Done!")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
