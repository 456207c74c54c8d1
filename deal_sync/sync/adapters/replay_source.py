"""In-memory event source backed by a replay document.

A replay document is a JSON object:

    {
      "deals": [{"ticket": 501, "position_id": 77, "symbol": "EURUSD", ...}],
      "positions": [{"ticket": 77, "symbol": "EURUSD", ...}],
      "transactions": [{"type": "deal_add", "deal": 501}, ...]
    }

``deals`` is the terminal history, ``positions`` the currently open
positions, ``transactions`` the live trade-transaction stream replayed after
startup.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from deal_sync.core.domain.errors import SourceUnavailableError
from deal_sync.core.domain.types import DealRecord, PositionSnapshot


class ReplayEventSource:
    """EventSource implementation over in-memory records.

    History is kept in insertion order, oldest first, the way the terminal
    indexes it. Records can be added or removed while running to simulate
    terminal races.
    """

    def __init__(
        self,
        *,
        deals: Iterable[DealRecord] = (),
        positions: Iterable[PositionSnapshot] = (),
        transactions: Iterable[dict[str, Any]] = (),
        available: bool = True,
    ) -> None:
        self._history: list[DealRecord] = list(deals)
        self._deals: dict[int, DealRecord] = {d.ticket: d for d in self._history}
        self._positions: dict[int, PositionSnapshot] = {p.ticket: p for p in positions}
        self.transactions: list[dict[str, Any]] = list(transactions)
        self.available = available
        self._selected = False

        # Indices read through history_deal_ticket, in read order.
        self.inspected_indices: list[int] = []

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> ReplayEventSource:
        return cls(
            deals=[DealRecord.model_validate(d) for d in obj.get("deals", [])],
            positions=[PositionSnapshot.model_validate(p) for p in obj.get("positions", [])],
            transactions=list(obj.get("transactions", [])),
            available=bool(obj.get("available", True)),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> ReplayEventSource:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return cls.from_json_obj(json.loads(path.read_text(encoding="utf-8")))

    # ------------------------------------------------------------------
    # Mutation (simulated terminal activity)
    # ------------------------------------------------------------------

    def add_deal(self, deal: DealRecord) -> None:
        self._history.append(deal)
        self._deals[deal.ticket] = deal

    def put_position(self, position: PositionSnapshot) -> None:
        self._positions[position.ticket] = position

    def remove_position(self, ticket: int) -> None:
        self._positions.pop(ticket, None)

    # ------------------------------------------------------------------
    # EventSource protocol
    # ------------------------------------------------------------------

    def select_history(self) -> None:
        if not self.available:
            raise SourceUnavailableError("deal history cannot be selected")
        self._selected = True

    def history_deals_total(self) -> int:
        if not self._selected:
            return 0
        return len(self._history)

    def history_deal_ticket(self, index: int) -> int:
        self.inspected_indices.append(index)
        if not self._selected or not 0 <= index < len(self._history):
            return 0
        return self._history[index].ticket

    def get_deal(self, ticket: int) -> DealRecord | None:
        return self._deals.get(ticket)

    def get_position(self, ticket: int) -> PositionSnapshot | None:
        return self._positions.get(ticket)
