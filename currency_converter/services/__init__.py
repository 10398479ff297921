"""Converter services: rate-service client, catalog loader, conversion controller, history."""

from .catalog import CurrencyCatalogLoader
from .conversion import ConversionController, parse_amount
from .history import HistoryStore
from .rate_client import RateServiceClient

__all__ = [
    "CurrencyCatalogLoader",
    "ConversionController",
    "HistoryStore",
    "RateServiceClient",
    "parse_amount",
]
