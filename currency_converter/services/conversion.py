from __future__ import annotations

"""Conversion controller.

Owns the converter form state (selected pair, amount text) and the displayed
outcome (result, rate, loading flag, failure notice). One `convert` call goes:

    parse amount -> loading on, outcome cleared -> GET convert
        -> success: show result/rate, append a HistoryEntry
        -> failure: keep outcome cleared, raise the failure notice
        -> loading off

Each issued request takes the next value of a monotonically increasing token.
When a response arrives and its token is no longer the latest, it is dropped
without touching any state: the last *issued* request wins, not the last to
complete.
"""
import logging
import math
import re
from typing import Optional, Protocol

from currency_converter.core.errors import HttpError
from currency_converter.models import (
    CONVERSION_FAILED_NOTICE,
    DEFAULT_AMOUNT_TEXT,
    DEFAULT_FROM_CURRENCY,
    DEFAULT_TO_CURRENCY,
    ConversionOutcome,
    ConversionRequest,
    ConversionResult,
    HistoryEntry,
)

logger = logging.getLogger("currency_converter.conversion")

# plain decimal notation only: no digit separators, no nan/inf words, no hex
AMOUNT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class SupportsConvert(Protocol):
    async def convert(self, request: ConversionRequest) -> ConversionResult: ...


class SupportsAppend(Protocol):
    def append(self, entry: HistoryEntry) -> object: ...


def parse_amount(text: Optional[str]) -> Optional[float]:
    """Return the amount as a float, or None when it should not be submitted."""
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    if not AMOUNT_PATTERN.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value) or value < 0:
        return None
    return value


class ConversionController:
    def __init__(
        self,
        client: SupportsConvert,
        history: SupportsAppend,
        *,
        from_currency: str = DEFAULT_FROM_CURRENCY,
        to_currency: str = DEFAULT_TO_CURRENCY,
        amount_text: str = DEFAULT_AMOUNT_TEXT,
    ):
        self._client = client
        self._history = history
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.amount_text = amount_text
        self.result: Optional[float] = None
        self.rate: Optional[float] = None
        self.loading = False
        self.notice: Optional[str] = None
        self._latest_token = 0

    def select(
        self,
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        amount_text: Optional[str] = None,
    ) -> None:
        if from_currency is not None:
            self.from_currency = from_currency
        if to_currency is not None:
            self.to_currency = to_currency
        if amount_text is not None:
            self.amount_text = amount_text

    def swap(self) -> None:
        self.from_currency, self.to_currency = self.to_currency, self.from_currency
        # a result belongs to the pair it was fetched for
        self._clear_outcome()
        if self.loading:
            # the in-flight response is for the old pair; make it stale
            self._latest_token += 1
            self.loading = False

    def _clear_outcome(self) -> None:
        self.result = None
        self.rate = None

    def _is_latest(self, token: int) -> bool:
        return token == self._latest_token

    async def convert(
        self, from_currency: str, to_currency: str, amount_text: Optional[str]
    ) -> ConversionOutcome:
        amount = parse_amount(amount_text)
        if amount is None:
            logger.debug("ignoring submission with amount %r", amount_text)
            return ConversionOutcome(status="skipped")

        self.select(from_currency, to_currency, amount_text)
        request = ConversionRequest(
            from_currency=from_currency, to_currency=to_currency, amount=amount
        )
        self._latest_token += 1
        token = self._latest_token
        self.loading = True
        self.notice = None
        self._clear_outcome()

        try:
            outcome = await self._client.convert(request)
        except HttpError:
            return self._fail(token, request, "rate service request failed")
        except Exception:
            return self._fail(token, request, "unexpected error during conversion")
        else:
            return self._succeed(token, request, outcome)
        finally:
            if self._is_latest(token):
                self.loading = False

    def _succeed(
        self, token: int, request: ConversionRequest, outcome: ConversionResult
    ) -> ConversionOutcome:
        if not self._is_latest(token):
            logger.debug("dropping superseded response #%d (latest #%d)", token, self._latest_token)
            return ConversionOutcome(status="superseded", result=outcome)
        self.result = outcome.result
        self.rate = outcome.rate
        self._history.append(HistoryEntry.from_conversion(request, outcome))
        logger.info(
            "converted %s %s -> %s %s at %s",
            request.amount,
            request.from_currency,
            outcome.result,
            request.to_currency,
            outcome.rate,
        )
        return ConversionOutcome(status="ok", result=outcome)

    def _fail(self, token: int, request: ConversionRequest, message: str) -> ConversionOutcome:
        if not self._is_latest(token):
            logger.debug("dropping superseded failure #%d: %s", token, message)
            return ConversionOutcome(status="superseded")
        logger.error(
            "%s for %s -> %s (amount=%s)",
            message,
            request.from_currency,
            request.to_currency,
            request.amount,
            exc_info=True,
        )
        self._clear_outcome()
        self.notice = CONVERSION_FAILED_NOTICE
        return ConversionOutcome(status="failed")
