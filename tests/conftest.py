"""Shared factories for the semantic test suites."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from deal_sync.core.domain.types import DealRecord, PositionSnapshot
from deal_sync.core.ports.transport import Delivered, DeliveryOutcome


class RecordingTransport:
    """WebhookTransport double: records payloads, returns a scripted outcome."""

    def __init__(self, outcome: DeliveryOutcome | None = None) -> None:
        self.outcome: DeliveryOutcome = outcome if outcome is not None else Delivered(status=200, body="ok")
        self.payloads: list[bytes] = []

    def deliver(self, payload: bytes) -> DeliveryOutcome:
        self.payloads.append(payload)
        return self.outcome


def _deal(ticket: int, **overrides: Any) -> DealRecord:
    fields: dict[str, Any] = {
        "ticket": ticket,
        "position_id": ticket,
        "symbol": "EURUSD",
        "deal_type": "buy",
        "entry": "in",
        "volume": 0.1,
        "price": 1.08512,
        "profit": 0.0,
        "time": 1_700_000_000 + ticket,
    }
    fields.update(overrides)
    return DealRecord(**fields)


def _position(ticket: int, **overrides: Any) -> PositionSnapshot:
    fields: dict[str, Any] = {
        "ticket": ticket,
        "symbol": "EURUSD",
        "position_type": 0,
        "volume": 0.1,
        "price_open": 1.08512,
        "price_current": 1.08601,
        "sl": 1.08,
        "tp": 1.09,
        "profit": 8.9,
        "time": 1_700_000_000,
        "time_update": 1_700_000_600,
    }
    fields.update(overrides)
    return PositionSnapshot(**fields)


@pytest.fixture
def make_deal() -> Callable[..., DealRecord]:
    return _deal


@pytest.fixture
def make_position() -> Callable[..., PositionSnapshot]:
    return _position


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
