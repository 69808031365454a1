"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Cada capacidad remota (transacción, manifest) tiene su propio tipo de
  request/response, validado en el borde, en vez de pasar dicts sueltos.
- La serialización (`model_dump(mode="json", by_alias=True)`) produce
  exactamente el JSON que espera la API de Shippo.

Nota:
- Estos modelos describen *qué* se envía y recibe, no *cómo* se envía.
- Las respuestas conservan todos los campos extra: el objetivo es mostrar
  lo que devuelve el servicio remoto sin alterarlo.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, Field, PrivateAttr, field_serializer
from pydantic.config import ConfigDict

from core.domain.dates import to_iso

_R = TypeVar("_R", bound="RemoteObject")


class Address(BaseModel):
    """Dirección de destino (inline) de un envío."""

    name: str = Field(..., min_length=1)
    street1: str = Field(..., min_length=1)
    street2: str | None = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)
    country: str = Field(..., min_length=2, max_length=2)
    phone: str | None = None
    email: str | None = None


class Parcel(BaseModel):
    """Bulto físico. Shippo acepta las medidas como strings decimales."""

    weight: str = Field(..., min_length=1)
    length: str = Field(..., min_length=1)
    width: str = Field(..., min_length=1)
    height: str = Field(..., min_length=1)
    distance_unit: str = Field(default="in")
    mass_unit: str = Field(default="lb")


class ShipmentRequest(BaseModel):
    shipment_date: datetime = Field(
        ...,
        description="Fecha/hora de envío (tz-aware).",
    )
    address_from: str = Field(
        ...,
        min_length=1,
        description="object_id de la dirección de origen.",
    )
    address_to: Address
    parcels: list[Parcel] = Field(..., min_length=1)

    @field_serializer("shipment_date")
    def _serialize_date(self, value: datetime) -> str:
        return to_iso(value)


class TransactionRequest(BaseModel):
    """Body de `POST /transactions/` (instalabel: shipment + rate implícito)."""

    model_config = ConfigDict(populate_by_name=True)

    shipment: ShipmentRequest
    carrier_account: str = Field(..., min_length=1)
    servicelevel_token: str = Field(..., min_length=1)
    is_async: bool = Field(
        default=False,
        alias="async",
        description="False => Shippo responde cuando la transacción terminó.",
    )


class RemoteObject(BaseModel):
    """Respuesta de la API que recuerda el JSON exacto recibido.

    El modelo valida lo mínimo que necesita el orquestador; `as_received()`
    devuelve el payload original (con sus `null` y sin defaults añadidos).
    """

    model_config = ConfigDict(extra="allow")

    _payload: Any = PrivateAttr(default=None)

    @classmethod
    def from_payload(cls: type[_R], payload: Any) -> _R:
        obj = cls.model_validate(payload)
        obj._payload = payload
        return obj

    def as_received(self) -> Any:
        if self._payload is not None:
            return self._payload
        return self.model_dump(mode="json", exclude_unset=True)


class Transaction(RemoteObject):
    """Respuesta de `POST /transactions/`. Solo `object_id` es obligatorio."""

    object_id: str = Field(..., min_length=1)
    status: str | None = None
    messages: list[Any] | None = None


class ManifestRequest(BaseModel):
    """Body de `POST /manifests/`."""

    model_config = ConfigDict(populate_by_name=True)

    address_from: str = Field(..., min_length=1)
    carrier_account: str = Field(..., min_length=1)
    shipment_date: datetime
    transactions: list[str] = Field(
        ...,
        min_length=1,
        description="object_ids de transacciones, en el orden en que se crearon.",
    )
    is_async: bool = Field(default=False, alias="async")

    @field_serializer("shipment_date")
    def _serialize_date(self, value: datetime) -> str:
        return to_iso(value)


class Manifest(RemoteObject):
    """Respuesta de `POST /manifests/`.

    Puede representar un éxito o un error de servicio (`status == "ERROR"` con
    `errors`); no se interpreta, solo se transporta.
    """

    object_id: str | None = None
    status: str | None = None
    errors: list[Any] | None = None


# Datos sintéticos fijos: el destino y el bulto no influyen en el bug.
DEFAULT_DESTINATION = Address(
    name="Billy Bob",
    street1="206 1ST ST",
    street2="SUITE 202",
    city="Brooklyn",
    state="NY",
    country="US",
    zip="11232",
    phone="4151234567",
    email="mrhippo@goshippo.com",
)

DEFAULT_PARCEL = Parcel(
    weight="1",
    length="1",
    width="2",
    height="3",
    distance_unit="in",
    mass_unit="lb",
)
