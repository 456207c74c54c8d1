"""Canonical suppression reasons.

A suppressed event produces no outbound message. The reason tells observers
and tests why.
"""

from __future__ import annotations


class SuppressReason:
    """String constants used as ``Suppressed.reason``."""

    # Deal ticket is not above the processing cursor (already handled).
    DUPLICATE_TICKET = "duplicate_ticket"

    # Deal detail could not be read from the terminal.
    DEAL_NOT_FOUND = "deal_not_found"

    # Balance, credit, correction and other non-fill deals.
    NON_TRADE_DEAL = "non_trade_deal"

    # Reversals and close-by entries are neither a plain open nor a plain close.
    UNSUPPORTED_ENTRY = "unsupported_entry"

    # Position closed between the change notification and the snapshot read.
    POSITION_NOT_FOUND = "position_not_found"

    # Order changes are observed but not forwarded.
    ORDER_EVENT_IGNORED = "order_event_ignored"

    # Classified event could not be turned into a valid payload.
    ENCODING_FAILED = "encoding_failed"

    # Unexpected failure while handling a single event.
    INTERNAL_ERROR = "internal_error"
