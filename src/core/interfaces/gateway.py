"""Contrato del servicio de envíos remoto.

Por qué Protocol:
- El orquestador recibe el gateway por inyección; en producción es
  `adapters.shippo_client.ShippoClient`, en tests un doble en memoria.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Manifest, ManifestRequest, Transaction, TransactionRequest


@runtime_checkable
class ShippingGateway(Protocol):
    """Capacidades remotas mínimas.

    Reglas de diseño:
    - Ambos métodos son asíncronos (I/O HTTP).
    - Los errores de transporte o rechazo se propagan; no hay reintentos.
    """

    async def create_transaction(self, request: TransactionRequest) -> Transaction:
        ...

    async def create_manifest(self, request: ManifestRequest) -> Manifest:
        """Devuelve el manifest tal cual, aunque represente un error de servicio."""

        ...
