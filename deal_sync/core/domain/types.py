"""Core shared data models.

This module defines the canonical Pydantic models used across the system for
terminal-observed records (deals, live positions), raw trade events and the
classified events that become outbound messages. These types are treated as
schema definitions and intentionally prioritize structural clarity over
minimal class size.
"""

# pylint: disable=line-too-long,missing-class-docstring,missing-function-docstring
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# Tickets are unsigned 64-bit identifiers assigned by the terminal.
TICKET_MAX = (1 << 64) - 1

Ticket = Annotated[int, Field(ge=0, le=TICKET_MAX)]
UnixSeconds = Annotated[int, Field(ge=0)]
FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]

# ---------------------------------------------------------------------------
# Terminal records (detail fetched by ticket)
# ---------------------------------------------------------------------------


EventKind = Literal["deal_added", "position_changed", "order_changed"]
DealEntry = Literal["in", "out", "inout", "out_by"]

# Deal types that represent actual trade fills. Everything else the terminal
# reports as a deal (balance, credit, charge, correction, bonus, commission,
# interest, ...) is a bookkeeping operation.
TRADE_DEAL_TYPES: frozenset[str] = frozenset({"buy", "sell"})

# Entry types that open or close a position.
POSITION_ENTRIES: frozenset[str] = frozenset({"in", "out"})

DIRECTION_CODES: dict[str, int] = {"buy": 0, "sell": 1}


class DealRecord(BaseModel):
    """Executed deal as read from the terminal history."""

    ticket: Ticket
    position_id: Ticket = Field(
        ...,
        description="Identifier shared by the opening and closing deals of one position.",
    )
    symbol: str = Field(..., min_length=1)
    deal_type: str = Field(..., min_length=1, description="Terminal deal type name, e.g. 'buy', 'sell', 'balance'.")
    entry: DealEntry
    volume: FiniteFloat = Field(..., ge=0)
    price: FiniteFloat = Field(..., ge=0)
    profit: FiniteFloat = 0.0
    time: UnixSeconds

    model_config = ConfigDict(extra="forbid", frozen=True)

    def is_trade(self) -> bool:
        return self.deal_type in TRADE_DEAL_TYPES

    def opens_or_closes(self) -> bool:
        return self.entry in POSITION_ENTRIES


class PositionSnapshot(BaseModel):
    """Live state of an open position at read time."""

    ticket: Ticket
    symbol: str = Field(..., min_length=1)
    position_type: int = Field(..., ge=0, description="0 for buy, 1 for sell.")
    volume: FiniteFloat = Field(..., ge=0)
    price_open: FiniteFloat = Field(..., ge=0)
    price_current: FiniteFloat = Field(..., ge=0)
    sl: FiniteFloat = Field(0.0, ge=0)
    tp: FiniteFloat = Field(0.0, ge=0)
    profit: FiniteFloat = 0.0
    time: UnixSeconds
    time_update: UnixSeconds

    model_config = ConfigDict(extra="forbid", frozen=True)


# ---------------------------------------------------------------------------
# Raw events
# ---------------------------------------------------------------------------


class RawEvent(BaseModel):
    """Terminal-observed occurrence.

    Only the kind and the subject ticket are carried: detail is fetched from
    the event source by ticket at classification time.
    """

    kind: EventKind
    ticket: Ticket

    model_config = ConfigDict(extra="forbid", frozen=True)

    def is_deal(self) -> bool:
        return self.kind == "deal_added"


# ---------------------------------------------------------------------------
# Classified events (discriminated union)
# ---------------------------------------------------------------------------


class ClassifiedEventBase(BaseModel):
    """
    Fields shared by all classified events.

    Notes:
    - position_id is the stable aggregate id and becomes the outbound "id".
    """

    position_id: Ticket
    symbol: str = Field(..., min_length=1)
    direction: int = Field(..., ge=0)
    volume: FiniteFloat = Field(..., ge=0)
    price: FiniteFloat = Field(..., ge=0)
    profit: FiniteFloat

    model_config = ConfigDict(extra="forbid", frozen=True)


class PositionOpenEvent(ClassifiedEventBase):
    action: Literal["position_open"] = "position_open"
    deal_ticket: Ticket
    opened_at: UnixSeconds


class PositionCloseEvent(ClassifiedEventBase):
    action: Literal["position_close"] = "position_close"
    deal_ticket: Ticket
    closed_at: UnixSeconds


class PositionUpdateEvent(ClassifiedEventBase):
    """Idempotent snapshot of a live position (not a delta)."""

    action: Literal["position_update"] = "position_update"
    current_price: FiniteFloat = Field(..., ge=0)
    sl: FiniteFloat = Field(..., ge=0)
    tp: FiniteFloat = Field(..., ge=0)
    opened_at: UnixSeconds
    updated_at: UnixSeconds


# Discriminated union: Pydantic will select the correct model based on action.
ClassifiedEvent = Annotated[
    PositionOpenEvent | PositionCloseEvent | PositionUpdateEvent,
    Field(discriminator="action"),
]


def deal_to_event(deal: DealRecord) -> PositionOpenEvent | PositionCloseEvent:
    """Build the open/close event for a trade deal.

    The caller is responsible for having checked ``is_trade()`` and
    ``opens_or_closes()``.
    """
    common = {
        "position_id": deal.position_id,
        "symbol": deal.symbol,
        "direction": DIRECTION_CODES[deal.deal_type],
        "volume": deal.volume,
        "price": deal.price,
        "profit": deal.profit,
        "deal_ticket": deal.ticket,
    }
    if deal.entry == "in":
        return PositionOpenEvent(opened_at=deal.time, **common)
    return PositionCloseEvent(closed_at=deal.time, **common)


def position_to_event(position: PositionSnapshot) -> PositionUpdateEvent:
    return PositionUpdateEvent(
        position_id=position.ticket,
        symbol=position.symbol,
        direction=position.position_type,
        volume=position.volume,
        price=position.price_open,
        current_price=position.price_current,
        sl=position.sl,
        tp=position.tp,
        profit=position.profit,
        opened_at=position.time,
        updated_at=position.time_update,
    )
