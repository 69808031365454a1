"""Adaptador REST para Shippo.

Responsabilidad:
- Serializar los requests del dominio al JSON que espera la API.
- Traducir respuestas no-2xx a `ShippoAPIError` (con el payload del servicio).
- Validar las respuestas como `Transaction` / `Manifest`.

No reintenta, no cachea y no interpreta el contenido del manifest.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.domain.models import Manifest, ManifestRequest, Transaction, TransactionRequest
from core.interfaces.gateway import ShippingGateway


class ShippoAPIError(Exception):
    """La API respondió con un status no-2xx."""

    def __init__(self, *, method: str, url: str, status_code: int, payload: Any) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{method} {url} -> HTTP {status_code}")


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ShippoClient(ShippingGateway):
    """Implementa `ShippingGateway` sobre un `httpx.AsyncClient` ya autenticado."""

    _transactions_path = "/transactions/"
    _manifests_path = "/manifests/"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        response = await self._client.post(path, json=body)
        payload = _decode_body(response)
        if response.is_error:
            raise ShippoAPIError(
                method="POST",
                url=str(response.request.url),
                status_code=response.status_code,
                payload=payload,
            )
        return payload

    async def create_transaction(self, request: TransactionRequest) -> Transaction:
        payload = await self._post(
            self._transactions_path,
            request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Transaction.from_payload(payload)

    async def create_manifest(self, request: ManifestRequest) -> Manifest:
        payload = await self._post(
            self._manifests_path,
            request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Manifest.from_payload(payload)
