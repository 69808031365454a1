"""Cálculo de fechas de envío.

Dos instantes de mañana, 02:00 y 11:00 UTC: mismo día en UTC, pero en una
zona civil al oeste de UTC-2 el primero cae todavía en el día anterior. Esa
divergencia es la condición que se quiere reproducir contra la API remota.

Se usa una fecha futura porque con fechas pasadas el servicio ignora
`shipment_date` y usa la fecha actual.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo

FIRST_HOUR_UTC = 2
SECOND_HOUR_UTC = 11


@dataclass(frozen=True)
class ShipmentDates:
    """Par de instantes tz-aware separados por 9 horas."""

    first: datetime
    second: datetime

    def as_list(self) -> list[datetime]:
        return [self.first, self.second]

    def in_zone(self, zone: tzinfo) -> list[datetime]:
        return [value.astimezone(zone) for value in self.as_list()]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_shipment_dates(now: datetime | None = None) -> ShipmentDates:
    """Mañana a las 02:00 y a las 11:00 UTC (segundos y micro a cero).

    Un `now` naive se interpreta como UTC.
    """

    now_utc = _as_utc(now or datetime.now(timezone.utc))
    tomorrow = now_utc.date() + timedelta(days=1)
    first = datetime.combine(tomorrow, time(hour=FIRST_HOUR_UTC), tzinfo=timezone.utc)
    second = datetime.combine(tomorrow, time(hour=SECOND_HOUR_UTC), tzinfo=timezone.utc)
    return ShipmentDates(first=first, second=second)


def end_of_day(value: datetime) -> datetime:
    """Último milisegundo del día de `value`, en su propia zona."""

    return value.replace(hour=23, minute=59, second=59, microsecond=999_000)


def to_iso(value: datetime) -> str:
    """ISO-8601 con milisegundos; UTC se escribe con sufijo `Z`.

    `2024-01-02T02:00:00.000Z`, `2024-01-01T18:00:00.000-08:00`.
    """

    text = value.isoformat(timespec="milliseconds")
    if value.tzname() == "UTC" and text.endswith("+00:00"):
        return text[: -len("+00:00")] + "Z"
    return text
