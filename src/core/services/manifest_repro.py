"""Orquestación del repro transacciones -> manifest.

Secuencia (una sola pasada, sin estado):
1. Calcular el par de fechas de mañana (02:00 y 11:00 UTC).
2. Crear una transacción por fecha, en paralelo, y esperar a ambas.
3. Crear un manifest con los dos object_id y la fecha del manifest.

Los errores no se capturan aquí: suben tal cual al punto de entrada (CLI).
Los efectos visibles (imprimir payloads) se delegan en `ReproHooks`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from core.config import AppSettings
from core.domain.dates import ShipmentDates, compute_shipment_dates, end_of_day
from core.domain.models import (
    DEFAULT_DESTINATION,
    DEFAULT_PARCEL,
    Address,
    Manifest,
    ManifestRequest,
    Parcel,
    ShipmentRequest,
    TransactionRequest,
)
from core.interfaces.gateway import ShippingGateway


class ManifestDateMode(str, Enum):
    """Qué fecha se envía en el manifest."""

    END_OF_DAY = "end-of-day"
    FIRST_DATE = "first-date"


@dataclass
class ReproHooks:
    """Callbacks opcionales para la capa de UI."""

    dates_computed: Callable[[ShipmentDates], None] | None = None
    request: Callable[[str, dict[str, Any]], None] | None = None
    response: Callable[[Any], None] | None = None
    # Fallos adicionales cuando más de una transacción falla; el primero se relanza.
    failure: Callable[[BaseException], None] | None = None


@dataclass
class ReproResult:
    """Salida de una ejecución completa."""

    dates: ShipmentDates
    transaction_ids: list[str]
    manifest_date: datetime
    manifest: Manifest


def _dump(model: Any) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def manifest_date_for(dates: ShipmentDates, mode: ManifestDateMode) -> datetime:
    if mode is ManifestDateMode.FIRST_DATE:
        return dates.first
    return end_of_day(dates.first)


class ManifestRepro:
    """Crea dos transacciones y luego intenta agruparlas en un manifest.

    El gateway y la configuración se inyectan; el orquestador no construye
    clientes ni lee variables de entorno.
    """

    def __init__(
        self,
        gateway: ShippingGateway,
        settings: AppSettings,
        *,
        hooks: ReproHooks | None = None,
        destination: Address = DEFAULT_DESTINATION,
        parcel: Parcel = DEFAULT_PARCEL,
    ) -> None:
        self._gateway = gateway
        self._settings = settings
        self._hooks = hooks or ReproHooks()
        self._destination = destination
        self._parcel = parcel

    def build_transaction_request(self, shipment_date: datetime) -> TransactionRequest:
        return TransactionRequest(
            shipment=ShipmentRequest(
                shipment_date=shipment_date,
                address_from=self._settings.from_address_id,
                address_to=self._destination,
                parcels=[self._parcel],
            ),
            carrier_account=self._settings.carrier_account_id,
            servicelevel_token=self._settings.servicelevel_token,
            is_async=False,
        )

    def build_manifest_request(self, shipment_date: datetime, transaction_ids: list[str]) -> ManifestRequest:
        return ManifestRequest(
            address_from=self._settings.from_address_id,
            carrier_account=self._settings.carrier_account_id,
            shipment_date=shipment_date,
            transactions=list(transaction_ids),
            is_async=False,
        )

    def _emit_request(self, label: str, payload: dict[str, Any]) -> None:
        if self._hooks.request:
            self._hooks.request(label, payload)

    def _emit_response(self, payload: Any) -> None:
        if self._hooks.response:
            self._hooks.response(payload)

    async def create_transaction(self, shipment_date: datetime) -> str:
        """Crea una transacción y devuelve su object_id."""

        request = self.build_transaction_request(shipment_date)
        self._emit_request("Creating transaction...", _dump(request))

        transaction = await self._gateway.create_transaction(request)

        self._emit_response(transaction.as_received())
        return transaction.object_id

    async def create_manifest(self, shipment_date: datetime, transaction_ids: list[str]) -> Manifest:
        request = self.build_manifest_request(shipment_date, transaction_ids)
        self._emit_request("Creating manifest...", _dump(request))

        manifest = await self._gateway.create_manifest(request)

        self._emit_response(manifest.as_received())
        return manifest

    async def run(
        self,
        *,
        now: datetime | None = None,
        manifest_date_mode: ManifestDateMode = ManifestDateMode.END_OF_DAY,
    ) -> ReproResult:
        dates = compute_shipment_dates(now)
        if self._hooks.dates_computed:
            self._hooks.dates_computed(dates)

        # Ambas llamadas terminan (éxito o error) antes de seguir.
        outcomes = await asyncio.gather(
            *(self.create_transaction(value) for value in dates.as_list()),
            return_exceptions=True,
        )
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures:
            if self._hooks.failure:
                for extra in failures[1:]:
                    self._hooks.failure(extra)
            raise failures[0]
        transaction_ids = [str(outcome) for outcome in outcomes]

        manifest_date = manifest_date_for(dates, manifest_date_mode)
        manifest = await self.create_manifest(manifest_date, transaction_ids)

        return ReproResult(
            dates=dates,
            transaction_ids=transaction_ids,
            manifest=manifest,
            manifest_date=manifest_date,
        )
