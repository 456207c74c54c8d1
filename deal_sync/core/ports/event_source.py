"""Event source protocol for the trading terminal.

This module defines the query boundary the sync core uses to read deal
history and live positions. Concrete implementations adapt a specific
terminal (or a replay file) to this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from deal_sync.core.domain.types import DealRecord, PositionSnapshot


class EventSource(Protocol):
    """Terminal-facing query boundary.

    Detail lookups return None instead of raising: a record that vanished
    between notification and read is an expected race, not a failure.
    """

    def select_history(self) -> None:
        """Make the deal history available. Raises SourceUnavailableError on failure."""

    def history_deals_total(self) -> int:
        """Return the number of deals in the selected history."""

    def history_deal_ticket(self, index: int) -> int:
        """Return the deal ticket at ``index`` (oldest first), or 0 if unreadable."""

    def get_deal(self, ticket: int) -> DealRecord | None:
        """Return the deal detail for ``ticket``, or None if it cannot be read."""

    def get_position(self, ticket: int) -> PositionSnapshot | None:
        """Return the live position snapshot, or None if the position no longer exists."""
