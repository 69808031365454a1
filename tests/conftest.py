"""
Root test configuration and fixtures for shipdate-probe.

Provides:
- sys.path setup so `core`, `adapters` and `cli` import from `src/`
- an isolated environment (no real .env files, no real credentials)
- `settings` and `fake_gateway` fixtures shared by the unit tests
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

# Add src/ to path to allow imports without an editable install
src_root = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_root))

from core.config import REQUIRED_ENV_VARS, AppSettings  # noqa: E402
from core.domain.dates import to_iso  # noqa: E402
from core.domain.models import Manifest, ManifestRequest, Transaction, TransactionRequest  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Never read the developer's .env files or exported credentials."""
    monkeypatch.setitem(AppSettings.model_config, "env_file", None)
    for name in (
        *REQUIRED_ENV_VARS,
        "SHIPPO_BASE_URL",
        "SERVICELEVEL_TOKEN",
        "REFERENCE_TIMEZONE",
        "HTTP_TIMEOUT_SECONDS",
        "USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        shippo_api_key="shippo_test_key",
        carrier_account_id="carrier_abc",
        from_address_id="address_xyz",
    )


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("SHIPPO_API_KEY", "shippo_test_key")
    monkeypatch.setenv("CARRIER_ACCOUNT_ID", "carrier_abc")
    monkeypatch.setenv("FROM_ADDRESS_ID", "address_xyz")


class FakeGateway:
    """In-memory ShippingGateway.

    Transaction ids are derived from the shipment date (`txn_<iso>`) so tests
    can check which id came from which date.
    """

    def __init__(
        self,
        *,
        fail_for_hours: tuple[int, ...] = (),
        manifest: Manifest | None = None,
        wait_for_both: bool = False,
    ) -> None:
        self.fail_for_hours = fail_for_hours
        self.manifest = manifest or Manifest(object_id="manifest_1", status="SUCCESS")
        self.transaction_requests: list[TransactionRequest] = []
        self.manifest_requests: list[ManifestRequest] = []
        self._wait_for_both = wait_for_both
        self._both_started = asyncio.Event()

    async def create_transaction(self, request: TransactionRequest) -> Transaction:
        self.transaction_requests.append(request)
        if len(self.transaction_requests) == 2:
            self._both_started.set()
        if self._wait_for_both:
            await asyncio.wait_for(self._both_started.wait(), timeout=1.0)
        else:
            await asyncio.sleep(0)

        shipment_date = request.shipment.shipment_date
        if shipment_date.hour in self.fail_for_hours:
            raise RuntimeError(f"transaction rejected for {to_iso(shipment_date)}")
        return Transaction(object_id=f"txn_{to_iso(shipment_date)}", status="SUCCESS")

    async def create_manifest(self, request: ManifestRequest) -> Manifest:
        self.manifest_requests.append(request)
        return self.manifest


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def gateway_factory():
    return FakeGateway
