"""Terminal trade-transaction normalization.

Maps the terminal's trade-transaction records to canonical RawEvents. Both
short names and the terminal's ``TRADE_TRANSACTION_*`` constant names are
accepted.
"""

from __future__ import annotations

from typing import Any, Mapping

from deal_sync.core.domain.types import EventKind, RawEvent

# transaction type -> (event kind, field holding the subject ticket)
TRANSACTION_KINDS: dict[str, tuple[EventKind, str]] = {
    "deal_add": ("deal_added", "deal"),
    "position": ("position_changed", "position"),
    "order_add": ("order_changed", "order"),
    "order_update": ("order_changed", "order"),
    "order_delete": ("order_changed", "order"),
}

_TERMINAL_PREFIX = "trade_transaction_"


def _transaction_type(raw_type: Any) -> str:
    name = str(raw_type).strip().lower()
    if name.startswith(_TERMINAL_PREFIX):
        name = name[len(_TERMINAL_PREFIX):]
    return name


def normalize_transaction(txn: Mapping[str, Any]) -> RawEvent | None:
    """Return the RawEvent for a transaction, or None if it is not observed.

    Transaction types outside TRANSACTION_KINDS (history updates, requests,
    deal updates) and records without a usable ticket yield None.
    """
    mapping = TRANSACTION_KINDS.get(_transaction_type(txn.get("type", "")))
    if mapping is None:
        return None

    kind, ticket_field = mapping
    ticket = txn.get(ticket_field)
    if not isinstance(ticket, int) or isinstance(ticket, bool) or ticket <= 0:
        return None

    return RawEvent(kind=kind, ticket=ticket)
