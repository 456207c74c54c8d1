"""
Domain event models.

These events represent immutable facts observed while syncing.
They are consumed by loggers, the journal recorder, and monitoring.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class EventSuppressedEvent:
    kind: str
    ticket: int
    reason: str


@dataclass(slots=True)
class EventClassifiedEvent:
    kind: str
    ticket: int

    action: str
    position_id: int


@dataclass(slots=True)
class CursorAdvancedEvent:
    prev_cursor: int
    next_cursor: int

    persisted: bool


@dataclass(slots=True)
class DeliveryAttemptedEvent:
    action: str
    position_id: int

    status: int
    error_code: str | None


@dataclass(slots=True)
class BacklogCompletedEvent:
    total: int
    start_index: int

    inspected: int
    emitted: int
