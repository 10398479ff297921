"""Domain constants shared by the converter services.

Kept as plain values; the form defaults mirror what a first-time user sees.
"""

from typing import Set

DEFAULT_FROM_CURRENCY = "USD"
DEFAULT_TO_CURRENCY = "PKR"
DEFAULT_AMOUNT_TEXT = "1"

CONVERSION_FAILED_NOTICE = "Conversion failed. Please try again."

OUTCOME_STATUSES: Set[str] = {
    "skipped",  # amount did not parse; nothing was sent
    "ok",
    "failed",
    "superseded",  # a newer request was issued before this one resolved
}
