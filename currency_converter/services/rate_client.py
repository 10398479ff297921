from __future__ import annotations

"""Client for the remote rate service.

Two read-only operations are exposed:
    - GET {base}/api/currencies             -> {"data": {code: {"name": ...}}}
    - GET {base}/api/convert?from=&to=&amount= -> {"result", "rate", "fetchedAt"}

Payloads are validated into pydantic models here, so callers only ever see
well-formed domain objects or an `HttpError` (schema problems are raised as the
`RateServiceError` subclass).
"""
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from currency_converter.core.errors import RateServiceError
from currency_converter.models import (
    ConversionRequest,
    ConversionResult,
    CurrencyCatalog,
    CurrencyRecord,
)
from .http_client import get_json

logger = logging.getLogger("currency_converter.rates")


class RateServiceClient:
    def __init__(
        self,
        base_url: str,
        *,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        retries: int = 0,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retries = retries
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/{path}"

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await get_json(
            self._http,
            self._url(path),
            params=params,
            timeout=self._timeout,
            retries=self._retries,
        )

    async def list_currencies(self) -> CurrencyCatalog:
        payload = await self._get("currencies")
        if not isinstance(payload, dict):
            raise RateServiceError("currencies payload is not an object")
        # A missing "data" key means an empty catalog, not a failure
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise RateServiceError("currencies 'data' is not a mapping")
        try:
            return {code: CurrencyRecord.model_validate(meta) for code, meta in data.items()}
        except ValidationError as e:
            raise RateServiceError(f"invalid currency record: {e}") from e

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        payload = await self._get("convert", params=request.as_params())
        if not isinstance(payload, dict):
            raise RateServiceError("convert payload is not an object")
        try:
            return ConversionResult.model_validate(payload)
        except ValidationError as e:
            raise RateServiceError(f"invalid convert payload: {e}") from e

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
