from __future__ import annotations

"""Async HTTP helper: GET JSON with optional limited retries.

Every failure kind (transport error, timeout, non-2xx status, body that is
not JSON) is reported as a single `HttpError` so callers have one thing to
catch. Retries default to zero: the converter never re-issues a request on
its own.
"""
import asyncio
import logging
from typing import Any, Mapping, Optional

import httpx

from currency_converter.core.errors import HttpError

logger = logging.getLogger("currency_converter.http")


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = 5.0,
    retries: int = 0,
    backoff: float = 0.5,
) -> Any:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            resp = await client.get(url, params=params, timeout=timeout)
            if not 200 <= resp.status_code < 300:
                raise HttpError(f"HTTP {resp.status_code} for {url}")
            return resp.json()
        except (
            httpx.HTTPError,
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            last_err = e
            if attempt == retries:
                break
            logger.debug("GET %s failed (attempt %d): %s", url, attempt + 1, e)
            await asyncio.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}") from last_err
