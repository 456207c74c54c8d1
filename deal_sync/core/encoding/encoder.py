"""Message encoder.

Converts a classified event into the canonical outbound JSON payload. The
output is byte-deterministic: fixed key order (payload model declaration
order), fixed decimal places per numeric field, no whitespace.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from deal_sync.core.domain.types import (
    PositionCloseEvent,
    PositionOpenEvent,
    PositionUpdateEvent,
)
from deal_sync.core.encoding.payloads import (
    OutboundPayload,
    PositionClosePayload,
    PositionOpenPayload,
    PositionUpdatePayload,
)

if TYPE_CHECKING:
    from deal_sync.core.domain.types import ClassifiedEvent


# Decimal places for fractional fields. Every other numeric field is an integer.
FIELD_DECIMALS: dict[str, int] = {
    "volume": 2,
    "profit": 2,
    "price": 5,
    "current_price": 5,
    "sl": 5,
    "tp": 5,
}


class MessageEncoder:
    """Pure ClassifiedEvent -> bytes encoder.

    ``account_id`` and ``access_token`` are opaque pass-through values
    attached to every payload.
    """

    def __init__(self, *, account_id: str, access_token: str) -> None:
        self._account_id = account_id
        self._access_token = access_token

    def build_payload(self, event: ClassifiedEvent) -> OutboundPayload:
        """Validate the event into its payload model. Raises pydantic ValidationError."""
        common: dict[str, Any] = {
            "account_id": self._account_id,
            "access_token": self._access_token,
            "id": event.position_id,
            "symbol": event.symbol,
            "type": event.direction,
            "volume": event.volume,
            "price": event.price,
            "profit": event.profit,
        }

        if isinstance(event, PositionOpenEvent):
            return PositionOpenPayload(
                opened_at=event.opened_at,
                deal_ticket=event.deal_ticket,
                **common,
            )

        if isinstance(event, PositionCloseEvent):
            return PositionClosePayload(
                closed_at=event.closed_at,
                deal_ticket=event.deal_ticket,
                **common,
            )

        if isinstance(event, PositionUpdateEvent):
            return PositionUpdatePayload(
                current_price=event.current_price,
                sl=event.sl,
                tp=event.tp,
                opened_at=event.opened_at,
                updated_at=event.updated_at,
                **common,
            )

        raise TypeError(f"Unsupported classified event: {type(event).__name__}")

    def encode(self, event: ClassifiedEvent) -> bytes:
        """Encode an event to UTF-8 JSON bytes."""
        return serialize_payload(self.build_payload(event))


def serialize_payload(payload: OutboundPayload) -> bytes:
    parts: list[str] = []
    for name in type(payload).model_fields:
        value = getattr(payload, name)
        parts.append(f"{json.dumps(name)}:{_format_value(name, value)}")
    return ("{" + ",".join(parts) + "}").encode("utf-8")


def _format_value(name: str, value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value)

    decimals = FIELD_DECIMALS.get(name)
    if decimals is None:
        return str(int(value))

    text = f"{float(value):.{decimals}f}"
    # Values that round to zero are written without a sign.
    if text.startswith("-") and float(text) == 0.0:
        text = text[1:]
    return text
