"""Deduplication and classification engine.

Decides, per raw terminal event, whether it represents a new actionable
state transition, which outbound action it maps to, and whether the
processing cursor advances.

Deal dedupe relies solely on the terminal assigning deal tickets in
increasing order. The engine does not verify that property: a terminal that
reuses or reorders tickets would make it drop or re-admit deals. Timestamp
based ordering is deliberately not used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from deal_sync.core.domain.suppress_reasons import SuppressReason
from deal_sync.core.domain.types import (
    ClassifiedEvent,
    RawEvent,
    deal_to_event,
    position_to_event,
)
from deal_sync.core.events.events import (
    CursorAdvancedEvent,
    EventClassifiedEvent,
    EventSuppressedEvent,
)

if TYPE_CHECKING:
    from deal_sync.core.domain.cursor import ProcessingCursor
    from deal_sync.core.events.event_bus import EventBus
    from deal_sync.core.ports.event_source import EventSource

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Classification result (internal, not part of the outbound schema)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Classified:
    """The event maps to an outbound message."""

    raw: RawEvent
    event: ClassifiedEvent


@dataclass(frozen=True, slots=True)
class Suppressed:
    """The event produces no outbound message, for ``reason``."""

    raw: RawEvent
    reason: str


Classification = Classified | Suppressed


class DeduplicationEngine:
    """Turns raw terminal events into classified events.

    The engine must be driven from a single serialized event path, with the
    startup backlog pass completed before live events are fed in. It never
    raises for an individual event: every failure to read detail becomes a
    ``Suppressed`` result.
    """

    def __init__(
        self,
        *,
        source: EventSource,
        cursor: ProcessingCursor,
        event_bus: EventBus,
    ) -> None:
        self._source = source
        self._cursor = cursor
        self._event_bus = event_bus

    @property
    def cursor(self) -> ProcessingCursor:
        return self._cursor

    def classify(self, raw: RawEvent) -> Classification:
        """Classify one raw event."""
        if raw.kind == "deal_added":
            result = self._classify_deal(raw)
        elif raw.kind == "position_changed":
            result = self._classify_position(raw)
        else:
            # Order changes are observed but not forwarded.
            result = Suppressed(raw=raw, reason=SuppressReason.ORDER_EVENT_IGNORED)

        self._publish(result)
        return result

    def _classify_deal(self, raw: RawEvent) -> Classification:
        ticket = raw.ticket

        if self._cursor.is_handled(ticket):
            return Suppressed(raw=raw, reason=SuppressReason.DUPLICATE_TICKET)

        deal = self._source.get_deal(ticket)
        if deal is None:
            return Suppressed(raw=raw, reason=SuppressReason.DEAL_NOT_FOUND)

        if not deal.is_trade():
            return Suppressed(raw=raw, reason=SuppressReason.NON_TRADE_DEAL)

        if not deal.opens_or_closes():
            return Suppressed(raw=raw, reason=SuppressReason.UNSUPPORTED_ENTRY)

        event = deal_to_event(deal)

        prev_cursor = self._cursor.value
        advanced, persisted = self._cursor.try_advance(ticket)
        if not advanced:
            # Another caller committed this ticket between the check and now.
            return Suppressed(raw=raw, reason=SuppressReason.DUPLICATE_TICKET)

        self._event_bus.emit(
            CursorAdvancedEvent(
                prev_cursor=prev_cursor,
                next_cursor=ticket,
                persisted=persisted,
            )
        )
        return Classified(raw=raw, event=event)

    def _classify_position(self, raw: RawEvent) -> Classification:
        # Live snapshot at emission time, not the transaction payload.
        position = self._source.get_position(raw.ticket)
        if position is None:
            return Suppressed(raw=raw, reason=SuppressReason.POSITION_NOT_FOUND)
        return Classified(raw=raw, event=position_to_event(position))

    def _publish(self, result: Classification) -> None:
        if isinstance(result, Suppressed):
            LOGGER.debug(
                "Event suppressed",
                extra={
                    "kind": result.raw.kind,
                    "ticket": result.raw.ticket,
                    "reason": result.reason,
                },
            )
            self._event_bus.emit(
                EventSuppressedEvent(
                    kind=result.raw.kind,
                    ticket=result.raw.ticket,
                    reason=result.reason,
                )
            )
            return

        self._event_bus.emit(
            EventClassifiedEvent(
                kind=result.raw.kind,
                ticket=result.raw.ticket,
                action=result.event.action,
                position_id=result.event.position_id,
            )
        )
