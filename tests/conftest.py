# tests/conftest.py
import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Keep the module-level app (currency_converter.main) away from ./data
os.environ.setdefault(
    "DATA_DIR", str(Path(tempfile.gettempdir()) / "currency-converter-tests")
)

from currency_converter.core.config import Settings  # noqa: E402
from currency_converter.models import ConversionRequest, ConversionResult  # noqa: E402

RATES_BASE = "http://rates.test"

CATALOG = {
    "USD": {"name": "US Dollar"},
    "PKR": {"name": "Pakistani Rupee"},
    "EUR": {"name": "Euro"},
}


class MemorySlots:
    """Dict-backed stand-in for KeyValueStore."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key: str) -> Optional[str]:
        from currency_converter.core.errors import StorageError

        if self.fail_reads:
            raise StorageError("read failed")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        from currency_converter.core.errors import StorageError

        if self.fail_writes:
            raise StorageError("write failed")
        self.writes += 1
        self.data[key] = value


class FakeRateService:
    """Routes /api/currencies and /api/convert for an httpx.MockTransport."""

    def __init__(self):
        self.catalog_response: Callable[[], httpx.Response] = lambda: httpx.Response(
            200, json={"data": CATALOG}
        )
        self.convert_response: Callable[[httpx.Request], httpx.Response] = self._convert_ok
        self.requests: List[httpx.Request] = []

    @staticmethod
    def _convert_ok(request: httpx.Request) -> httpx.Response:
        amount = float(request.url.params["amount"])
        return httpx.Response(
            200,
            json={"result": amount * 279, "rate": 279, "fetchedAt": "2024-05-21T10:00:00Z"},
        )

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/currencies":
            return self.catalog_response()
        if request.url.path == "/api/convert":
            return self.convert_response(request)
        return httpx.Response(404, json={"error": "not found"})

    def http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class GatedConvertClient:
    """Convert client whose responses are released by the test, in any order."""

    def __init__(self):
        self.pending: List[Dict[str, Any]] = []

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        slot: Dict[str, Any] = {"request": request, "gate": asyncio.Event()}
        self.pending.append(slot)
        await slot["gate"].wait()
        if "error" in slot:
            raise slot["error"]
        return slot["result"]

    def resolve(self, index: int, result: float, rate: float, fetched_at: str) -> None:
        slot = self.pending[index]
        slot["result"] = ConversionResult(result=result, rate=rate, fetchedAt=fetched_at)
        slot["gate"].set()

    def reject(self, index: int, error: Exception) -> None:
        slot = self.pending[index]
        slot["error"] = error
        slot["gate"].set()


@pytest.fixture
def slots():
    return MemorySlots()


@pytest.fixture
def rate_service():
    return FakeRateService()


@pytest.fixture
def settings(tmp_path):
    s = Settings(data_dir=tmp_path, rates_api_base_url=RATES_BASE)
    s.init_post_load()
    return s


def history_payload(entries: List[Dict[str, Any]]) -> str:
    return json.dumps(entries)
