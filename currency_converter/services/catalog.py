from __future__ import annotations

"""Currency catalog loader.

Purpose:
    Fetch the supported currencies once when the owning view starts, and expose
    the result plus a loading flag so the form can stay disabled until then.

Design:
    - `catalog` starts empty and `is_loading` starts True.
    - `start()` issues exactly one fetch; repeated calls are no-ops.
    - A failed fetch is logged and leaves the catalog empty; `is_loading` still
      clears so the form is usable (degraded). No retry.
    - `teardown()` raises a cancellation flag; a fetch settling afterwards
      writes nothing.
    - `refresh()` supersedes any fetch still in flight; only the newest one writes.
    - `options` is the code-sorted option list, rebuilt only when the catalog
      object is replaced.
"""
import locale
import logging
from typing import Optional, Protocol, Tuple

from currency_converter.core.errors import HttpError
from currency_converter.models import CurrencyCatalog, CurrencyOption

logger = logging.getLogger("currency_converter.catalog")


class SupportsCurrencyListing(Protocol):
    async def list_currencies(self) -> CurrencyCatalog: ...


def sort_options(catalog: CurrencyCatalog) -> Tuple[CurrencyOption, ...]:
    options = (CurrencyOption(code=code, name=meta.name) for code, meta in catalog.items())
    return tuple(sorted(options, key=lambda o: (locale.strxfrm(o.code), o.code)))


class CurrencyCatalogLoader:
    def __init__(self, client: SupportsCurrencyListing):
        self._client = client
        self._catalog: CurrencyCatalog = {}
        self._is_loading = True
        self._started = False
        self._cancelled = False
        self._generation = 0
        self._options: Tuple[CurrencyOption, ...] = ()
        self._options_source: Optional[CurrencyCatalog] = None

    @property
    def catalog(self) -> CurrencyCatalog:
        return self._catalog

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def options(self) -> Tuple[CurrencyOption, ...]:
        if self._options_source is not self._catalog:
            self._options = sort_options(self._catalog)
            self._options_source = self._catalog
        return self._options

    async def start(self) -> None:
        if self._started:
            return
        self._started = True
        await self._fetch()

    async def refresh(self) -> None:
        """Re-fetch on explicit request; the catalog is replaced, never merged."""
        if self._cancelled:
            return
        self._started = True
        await self._fetch()

    def teardown(self) -> None:
        self._cancelled = True

    def _is_current(self, generation: int) -> bool:
        return not self._cancelled and generation == self._generation

    async def _fetch(self) -> None:
        self._generation += 1
        generation = self._generation
        self._is_loading = True
        try:
            catalog = await self._client.list_currencies()
            if self._is_current(generation):
                self._catalog = dict(catalog)
                logger.info("loaded %d currencies", len(self._catalog))
        except HttpError:
            logger.exception("failed to load currency catalog")
        except Exception:
            logger.exception("unexpected error while loading currency catalog")
        finally:
            if self._is_current(generation):
                self._is_loading = False
