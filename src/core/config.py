"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/Shippo) lean config de forma consistente.
- Se carga una sola vez al arrancar y se pasa explícitamente al orquestador.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_ENV_VARS: tuple[str, ...] = (
    "SHIPPO_API_KEY",
    "CARRIER_ACCOUNT_ID",
    "FROM_ADDRESS_ID",
)


class ConfigurationError(Exception):
    """Configuración ausente o inválida (fatal, antes de cualquier I/O)."""


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "shipdate-probe"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "shipdate-probe"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "shipdate-probe"
    return Path.home() / ".config" / "shipdate-probe"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# shipdate-probe user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Los tres valores requeridos no tienen default: si falta alguno,
    pydantic-settings falla en el borde y no se hace ninguna llamada de red.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    shippo_api_key: str = Field(
        ...,
        min_length=1,
        description="API token de Shippo (se envía como `ShippoToken <key>`).",
    )
    carrier_account_id: str = Field(
        ...,
        min_length=1,
        description="object_id de la cuenta de carrier usada en transacciones y manifest.",
    )
    from_address_id: str = Field(
        ...,
        min_length=1,
        description="object_id de la dirección de origen registrada en Shippo.",
    )

    shippo_base_url: str = Field(
        default="https://api.goshippo.com",
        min_length=8,
        description="Base URL de la API REST de Shippo.",
    )
    servicelevel_token: str = Field(
        default="dhl_ecommerce_parcel_plus_expedited",
        min_length=1,
        description="Service level del carrier para las transacciones.",
    )
    reference_timezone: str = Field(
        default="America/Los_Angeles",
        min_length=1,
        description="Zona civil de referencia para mostrar la divergencia de fechas.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="shipdate-probe/0.1",
        min_length=1,
        description="User-Agent para las peticiones a Shippo.",
    )

    @field_validator("reference_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value!r}") from exc
        return value

    @property
    def reference_zone(self) -> ZoneInfo:
        return ZoneInfo(self.reference_timezone)


def _describe_validation_error(exc: ValidationError) -> str:
    missing: list[str] = []
    problems: list[str] = []
    for error in exc.errors():
        field = str(error["loc"][0]).upper() if error.get("loc") else "?"
        if error.get("type") == "missing":
            missing.append(field)
        else:
            problems.append(f"{field}: {error.get('msg')}")

    parts: list[str] = []
    if missing:
        parts.append(f"Please set the {', '.join(missing)} environment variables")
    parts.extend(problems)
    return "; ".join(parts)


def load_settings(**overrides: object) -> AppSettings:
    """Carga `AppSettings` una vez y traduce errores de validación.

    Raises:
        ConfigurationError: si falta algún valor requerido o alguno es inválido.
    """

    try:
        return AppSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        raise ConfigurationError(_describe_validation_error(exc)) from exc
