"""Pydantic domain models for the currency converter."""

from .constants import (
    DEFAULT_FROM_CURRENCY,
    DEFAULT_TO_CURRENCY,
    DEFAULT_AMOUNT_TEXT,
    CONVERSION_FAILED_NOTICE,
    OUTCOME_STATUSES,
)  # re-export
from .currency import CurrencyCatalog, CurrencyOption, CurrencyRecord
from .conversion import ConversionOutcome, ConversionRequest, ConversionResult
from .history import HistoryEntry

__all__ = [
    "DEFAULT_FROM_CURRENCY",
    "DEFAULT_TO_CURRENCY",
    "DEFAULT_AMOUNT_TEXT",
    "CONVERSION_FAILED_NOTICE",
    "OUTCOME_STATUSES",
    "CurrencyCatalog",
    "CurrencyOption",
    "CurrencyRecord",
    "ConversionOutcome",
    "ConversionRequest",
    "ConversionResult",
    "HistoryEntry",
]
