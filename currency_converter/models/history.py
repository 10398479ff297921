from __future__ import annotations
import uuid
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .conversion import ConversionRequest, ConversionResult, Timestamp, check_timestamp


def new_entry_id() -> str:
    return uuid.uuid4().hex


class HistoryEntry(BaseModel):
    """One past conversion. Persisted with the `from`/`to`/`at` field names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_entry_id, min_length=1)
    from_currency: str = Field(..., alias="from")
    to_currency: str = Field(..., alias="to")
    amount: float
    result: float
    rate: float
    at: Timestamp

    @field_validator("at")
    def known_timestamp(cls, v: Timestamp) -> Timestamp:
        return check_timestamp(v)

    @classmethod
    def from_conversion(
        cls, request: ConversionRequest, outcome: ConversionResult
    ) -> "HistoryEntry":
        return cls(
            from_currency=request.from_currency,
            to_currency=request.to_currency,
            amount=request.amount,
            result=outcome.result,
            rate=outcome.rate,
            at=outcome.fetched_at,
        )
