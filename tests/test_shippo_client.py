"""Tests for the Shippo REST adapter, using httpx.MockTransport."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from adapters.http_client import build_async_client
from adapters.shippo_client import ShippoAPIError, ShippoClient
from core.domain.models import DEFAULT_DESTINATION, DEFAULT_PARCEL, ManifestRequest, ShipmentRequest, TransactionRequest

SHIPMENT_DATE = datetime(2024, 1, 2, 2, 0, tzinfo=timezone.utc)


def _transaction_request() -> TransactionRequest:
    return TransactionRequest(
        shipment=ShipmentRequest(
            shipment_date=SHIPMENT_DATE,
            address_from="address_xyz",
            address_to=DEFAULT_DESTINATION,
            parcels=[DEFAULT_PARCEL],
        ),
        carrier_account="carrier_abc",
        servicelevel_token="dhl_ecommerce_parcel_plus_expedited",
    )


def _manifest_request() -> ManifestRequest:
    return ManifestRequest(
        address_from="address_xyz",
        carrier_account="carrier_abc",
        shipment_date=datetime(2024, 1, 2, 23, 59, 59, 999000, tzinfo=timezone.utc),
        transactions=["txn_1", "txn_2"],
    )


class Recorder:
    def __init__(self, status_code: int = 201, payload=None, text: str | None = None) -> None:
        self.status_code = status_code
        self.payload = payload
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.mark.asyncio
async def test_create_transaction_posts_authenticated_json(settings):
    recorder = Recorder(payload={"object_id": "txn_1", "status": "SUCCESS", "tracking_number": "123"})

    async with build_async_client(settings, transport=httpx.MockTransport(recorder)) as client:
        transaction = await ShippoClient(client).create_transaction(_transaction_request())

    assert transaction.object_id == "txn_1"
    assert transaction.status == "SUCCESS"

    (request,) = recorder.requests
    assert request.method == "POST"
    assert request.url == "https://api.goshippo.com/transactions/"
    assert request.headers["Authorization"] == "ShippoToken shippo_test_key"
    assert request.headers["Content-Type"] == "application/json"

    body = json.loads(request.content)
    assert body["async"] is False
    assert body["servicelevel_token"] == "dhl_ecommerce_parcel_plus_expedited"
    assert body["shipment"]["shipment_date"] == "2024-01-02T02:00:00.000Z"


@pytest.mark.asyncio
async def test_create_manifest_returns_service_level_error_unaltered(settings):
    payload = {
        "object_id": "man_1",
        "status": "ERROR",
        "errors": ["Some transactions have a different shipment date"],
        "shipment_date": "2024-01-02T23:59:59.999Z",
    }
    recorder = Recorder(payload=payload)

    async with build_async_client(settings, transport=httpx.MockTransport(recorder)) as client:
        manifest = await ShippoClient(client).create_manifest(_manifest_request())

    assert manifest.status == "ERROR"
    assert manifest.model_dump(mode="json") == payload

    (request,) = recorder.requests
    assert request.url.path == "/manifests/"
    body = json.loads(request.content)
    assert body == {
        "address_from": "address_xyz",
        "carrier_account": "carrier_abc",
        "shipment_date": "2024-01-02T23:59:59.999Z",
        "transactions": ["txn_1", "txn_2"],
        "async": False,
    }


@pytest.mark.asyncio
async def test_http_error_raises_with_decoded_payload(settings):
    recorder = Recorder(status_code=400, payload={"shipment_date": ["Invalid date"]})

    async with build_async_client(settings, transport=httpx.MockTransport(recorder)) as client:
        with pytest.raises(ShippoAPIError) as excinfo:
            await ShippoClient(client).create_transaction(_transaction_request())

    assert excinfo.value.status_code == 400
    assert excinfo.value.payload == {"shipment_date": ["Invalid date"]}
    assert "HTTP 400" in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_json_error_body_is_kept_as_text(settings):
    recorder = Recorder(status_code=502, text="Bad Gateway")

    async with build_async_client(settings, transport=httpx.MockTransport(recorder)) as client:
        with pytest.raises(ShippoAPIError) as excinfo:
            await ShippoClient(client).create_manifest(_manifest_request())

    assert excinfo.value.payload == "Bad Gateway"


@pytest.mark.asyncio
async def test_transport_errors_propagate(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with build_async_client(settings, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.ConnectError):
            await ShippoClient(client).create_transaction(_transaction_request())


@pytest.mark.asyncio
async def test_custom_base_url(settings):
    custom = settings.model_copy(update={"shippo_base_url": "https://sandbox.example.test/v1"})
    recorder = Recorder(payload={"object_id": "txn_1"})

    async with build_async_client(custom, transport=httpx.MockTransport(recorder)) as client:
        await ShippoClient(client).create_transaction(_transaction_request())

    assert recorder.requests[0].url == "https://sandbox.example.test/v1/transactions/"
