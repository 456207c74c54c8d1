"""
Semantic test: terminal transactions normalize to raw events.

Invariant:
Deal additions, position changes and order changes map to their event kind
and subject ticket; every other transaction type is not observed.
"""

from __future__ import annotations

import pytest

from deal_sync.core.domain.types import RawEvent
from deal_sync.sync.adapters.transactions import normalize_transaction


@pytest.mark.parametrize(
    ("txn", "expected"),
    [
        ({"type": "deal_add", "deal": 501}, RawEvent(kind="deal_added", ticket=501)),
        ({"type": "TRADE_TRANSACTION_DEAL_ADD", "deal": 501}, RawEvent(kind="deal_added", ticket=501)),
        ({"type": "TRADE_TRANSACTION_POSITION", "position": 77}, RawEvent(kind="position_changed", ticket=77)),
        ({"type": "order_add", "order": 9}, RawEvent(kind="order_changed", ticket=9)),
        ({"type": "order_delete", "order": 9}, RawEvent(kind="order_changed", ticket=9)),
    ],
)
def test_observed_transactions(txn, expected) -> None:
    assert normalize_transaction(txn) == expected


@pytest.mark.parametrize(
    "txn",
    [
        {"type": "history_add", "deal": 501},
        {"type": "deal_update", "deal": 501},
        {"type": "request"},
        {"type": "deal_add"},
        {"type": "deal_add", "deal": 0},
        {"type": "deal_add", "deal": "501"},
        {},
    ],
)
def test_unobserved_transactions(txn) -> None:
    assert normalize_transaction(txn) is None
