from __future__ import annotations

"""Converter session: the components behind one mounted view.

Wires the rate-service client, catalog loader, conversion controller and
history store together and gives them a shared lifetime:

    open()  -> storage schema, history load, catalog fetch scheduled
    close() -> catalog torn down (late responses ignored), fetch cancelled,
               HTTP client closed
"""
import asyncio
import contextlib
import logging
from typing import Optional

from currency_converter.core.config import Settings
from currency_converter.core.errors import StorageError
from currency_converter.db.storage import KeyValueStore
from .catalog import CurrencyCatalogLoader
from .conversion import ConversionController
from .history import HistoryStore
from .rate_client import RateServiceClient

logger = logging.getLogger("currency_converter.session")


class ConverterSession:
    def __init__(self, settings: Settings, client: Optional[RateServiceClient] = None):
        self.settings = settings
        self.client = client or RateServiceClient(
            settings.rates_base,
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
        self.storage = KeyValueStore(settings.db_path)  # type: ignore[arg-type]
        self.history = HistoryStore(self.storage)
        self.catalog = CurrencyCatalogLoader(self.client)
        self.converter = ConversionController(self.client, self.history)
        self._catalog_task: Optional[asyncio.Task] = None

    async def open(self) -> None:
        try:
            self.storage.ensure_schema()
        except StorageError:
            # history falls back to empty and writes are dropped
            logger.warning("history storage unavailable", exc_info=True)
        self.history.load()
        self._catalog_task = asyncio.create_task(self.catalog.start())

    async def close(self) -> None:
        self.catalog.teardown()
        task, self._catalog_task = self._catalog_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.client.aclose()
