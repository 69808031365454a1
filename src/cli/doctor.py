"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from core.config import REQUIRED_ENV_VARS, AppSettings, ConfigurationError, load_settings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, *, timeout: float) -> tuple[bool, str]:
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}…{value[-4:]}"


@app.command()
def run(
    check_http: bool = typer.Option(True, "--http/--no-http", help="Probar conectividad con la API."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    table = Table(title="shipdate-probe Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    settings: AppSettings | None
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        settings = None
        table.add_row("Configuration", "FAIL", str(exc))

    if settings is not None:
        table.add_row("SHIPPO_API_KEY", "OK", _mask(settings.shippo_api_key))
        table.add_row("CARRIER_ACCOUNT_ID", "OK", settings.carrier_account_id)
        table.add_row("FROM_ADDRESS_ID", "OK", settings.from_address_id)
        table.add_row("Service level", "OK", settings.servicelevel_token)
        table.add_row("Reference timezone", "OK", settings.reference_timezone)
        table.add_row("Base URL", "OK", settings.shippo_base_url)

        if check_http:
            ok_http, detail_http = asyncio.run(
                _check_http(settings.shippo_base_url, timeout=settings.http_timeout_seconds)
            )
            table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if settings is None:
        _console.print(
            "\n[yellow]Note:[/yellow] run `shipdate-probe doctor setup` or export "
            + ", ".join(REQUIRED_ENV_VARS)
            + "."
        )
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive setup (stores credentials in the user config .env)."""

    api_key = typer.prompt("Shippo API key", hide_input=True, confirmation_prompt=False).strip()
    carrier_account = typer.prompt("Carrier account object_id").strip()
    from_address = typer.prompt("Origin address object_id").strip()

    if not api_key or not carrier_account or not from_address:
        raise typer.BadParameter("API key, carrier account and origin address are required")

    env_path = write_user_env_vars(
        {
            "SHIPPO_API_KEY": api_key,
            "CARRIER_ACCOUNT_ID": carrier_account,
            "FROM_ADDRESS_ID": from_address,
        }
    )

    _console.print(f"[green]Saved Shippo config to:[/green] {env_path}")
