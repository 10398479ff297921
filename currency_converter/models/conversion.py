from __future__ import annotations
import math
from typing import Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

from .constants import OUTCOME_STATUSES

# fetchedAt is kept exactly as the service sent it (ISO text, epoch millis, ...)
Timestamp = Union[StrictStr, StrictInt, StrictFloat]


def check_timestamp(v: Timestamp) -> Timestamp:
    if isinstance(v, str):
        if not v.strip():
            raise ValueError("timestamp cannot be blank")
    elif not math.isfinite(v):
        raise ValueError("timestamp must be a finite number")
    return v


class ConversionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_currency: str
    to_currency: str
    amount: float = Field(..., ge=0)

    @field_validator("amount")
    def finite_amount(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("amount must be a finite number")
        return v

    def as_params(self) -> Dict[str, str | float]:
        return {"from": self.from_currency, "to": self.to_currency, "amount": self.amount}


class ConversionResult(BaseModel):
    """Successful convert response: `{result, rate, fetchedAt}` on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    result: float
    rate: float
    fetched_at: Timestamp = Field(..., alias="fetchedAt")

    @field_validator("result", "rate")
    def finite_number(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v

    @field_validator("fetched_at")
    def known_timestamp(cls, v: Timestamp) -> Timestamp:
        return check_timestamp(v)


class ConversionOutcome(BaseModel):
    status: str
    result: Optional[ConversionResult] = None

    @field_validator("status")
    def known_status(cls, v: str) -> str:
        if v not in OUTCOME_STATUSES:
            raise ValueError(f"unknown outcome status '{v}'")
        return v
