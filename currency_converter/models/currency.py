from __future__ import annotations
from typing import Dict
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CurrencyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)


class CurrencyOption(BaseModel):
    """A selectable `{code, name}` pair, as shown in the currency pickers."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str

    @field_validator("code")
    @classmethod
    def non_blank_code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("currency code cannot be blank")
        return v


CurrencyCatalog = Dict[str, CurrencyRecord]
