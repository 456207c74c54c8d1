"""
Event sink interface.

A sink observes sync-domain facts (suppressions, classifications, cursor
advances, delivery attempts). Sinks may optionally expose ``close()``.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a domain event."""
