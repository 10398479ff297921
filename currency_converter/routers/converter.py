from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from currency_converter.core.errors import FormDisabledError
from currency_converter.models import CurrencyOption, HistoryEntry
from currency_converter.services.session import ConverterSession

"""Converter router: the form, its outcome and the history panel.

Endpoints:
    - GET /currencies            -> {loading, currencies: [{code, name}]} sorted by code
    - POST /currencies/refresh   -> re-fetch the catalog, then as above
    - GET /state                 -> selected pair, amount text, result/rate, loading, notice
    - POST /convert              -> submit {from, to, amount}; 409 while currencies load
    - POST /swap                 -> exchange the pair; 409 while currencies load or converting
    - GET /history               -> newest-first conversion log
    - DELETE /history            -> clear the log
"""

router = APIRouter(tags=["converter"])


def get_session(request: Request) -> ConverterSession:
    return request.app.state.session


def require_catalog_ready(session: ConverterSession = Depends(get_session)) -> ConverterSession:
    if session.catalog.is_loading:
        raise FormDisabledError("catalog_loading", "Currencies are still loading.")
    return session


class CurrencyListOut(BaseModel):
    loading: bool
    currencies: List[CurrencyOption]


class ConvertIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_currency: str = Field(..., alias="from", min_length=1)
    to_currency: str = Field(..., alias="to", min_length=1)
    # unparseable amounts are ignored by the converter, not rejected here;
    # JSON integers stay ints so 10 echoes back as "10"
    amount: Optional[Union[StrictStr, StrictInt, StrictFloat]] = Field(None, description="Amount as typed, e.g. '10'")

    def amount_text(self) -> Optional[str]:
        return None if self.amount is None else str(self.amount)


class StateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_currency: str = Field(..., serialization_alias="from")
    to_currency: str = Field(..., serialization_alias="to")
    amount: str
    result: Optional[float]
    rate: Optional[float]
    loading: bool
    notice: Optional[str]

    @classmethod
    def from_session(cls, session: ConverterSession) -> "StateOut":
        c = session.converter
        return cls(
            from_currency=c.from_currency,
            to_currency=c.to_currency,
            amount=c.amount_text,
            result=c.result,
            rate=c.rate,
            loading=c.loading,
            notice=c.notice,
        )


class ConvertOut(BaseModel):
    status: str
    state: StateOut


def _currency_list(session: ConverterSession) -> CurrencyListOut:
    return CurrencyListOut(
        loading=session.catalog.is_loading, currencies=list(session.catalog.options)
    )


@router.get("/currencies", summary="List supported currencies sorted by code")
async def list_currencies(session: ConverterSession = Depends(get_session)) -> CurrencyListOut:
    return _currency_list(session)


@router.post("/currencies/refresh", summary="Re-fetch the currency catalog")
async def refresh_currencies(session: ConverterSession = Depends(get_session)) -> CurrencyListOut:
    await session.catalog.refresh()
    return _currency_list(session)


@router.get("/state", summary="Current form and conversion outcome")
async def get_state(session: ConverterSession = Depends(get_session)) -> StateOut:
    return StateOut.from_session(session)


@router.post("/convert", summary="Convert an amount between two currencies")
async def convert(
    payload: ConvertIn, session: ConverterSession = Depends(require_catalog_ready)
) -> ConvertOut:
    outcome = await session.converter.convert(
        payload.from_currency, payload.to_currency, payload.amount_text()
    )
    return ConvertOut(status=outcome.status, state=StateOut.from_session(session))


@router.post("/swap", summary="Swap source and target currencies")
async def swap(session: ConverterSession = Depends(require_catalog_ready)) -> StateOut:
    if session.converter.loading:
        raise FormDisabledError("conversion_in_progress", "A conversion is in progress.")
    session.converter.swap()
    return StateOut.from_session(session)


@router.get("/history", summary="Past conversions, newest first")
async def list_history(session: ConverterSession = Depends(get_session)) -> List[HistoryEntry]:
    return list(session.history.entries)


@router.delete("/history", summary="Clear the conversion history")
async def clear_history(session: ConverterSession = Depends(get_session)):
    session.history.clear()
    return {"status": "cleared", "entries": []}
