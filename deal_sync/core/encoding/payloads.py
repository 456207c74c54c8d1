"""Outbound payload models.

Field declaration order is the wire key order. The encoder relies on it.
"""

# pylint: disable=missing-class-docstring
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from deal_sync.core.domain.types import FiniteFloat, Ticket, UnixSeconds


class PositionOpenPayload(BaseModel):
    account_id: str
    access_token: str
    id: Ticket
    symbol: str = Field(..., min_length=1)
    type: Literal[0, 1]
    volume: FiniteFloat
    price: FiniteFloat
    profit: FiniteFloat
    opened_at: UnixSeconds
    action: Literal["position_open"] = "position_open"
    deal_ticket: Ticket

    model_config = ConfigDict(extra="forbid", frozen=True)


class PositionClosePayload(BaseModel):
    account_id: str
    access_token: str
    id: Ticket
    symbol: str = Field(..., min_length=1)
    type: Literal[0, 1]
    volume: FiniteFloat
    price: FiniteFloat
    profit: FiniteFloat
    closed_at: UnixSeconds
    action: Literal["position_close"] = "position_close"
    deal_ticket: Ticket

    model_config = ConfigDict(extra="forbid", frozen=True)


class PositionUpdatePayload(BaseModel):
    account_id: str
    access_token: str
    id: Ticket
    symbol: str = Field(..., min_length=1)
    type: int = Field(..., ge=0)
    volume: FiniteFloat
    price: FiniteFloat
    current_price: FiniteFloat
    sl: FiniteFloat
    tp: FiniteFloat
    profit: FiniteFloat
    opened_at: UnixSeconds
    action: Literal["position_update"] = "position_update"
    updated_at: UnixSeconds

    model_config = ConfigDict(extra="forbid", frozen=True)


OutboundPayload = PositionOpenPayload | PositionClosePayload | PositionUpdatePayload
