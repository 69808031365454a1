"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y autenticación (`ShippoToken`).
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` autenticado contra la API de Shippo.

    Por qué un builder:
    - Un único cliente por ejecución, compartido por las tres llamadas.
    - Las credenciales salen de `AppSettings`, nunca de estado global.
    """

    headers: dict[str, str] = {
        "Authorization": f"ShippoToken {settings.shippo_api_key}",
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.shippo_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
