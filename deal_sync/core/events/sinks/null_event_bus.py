from __future__ import annotations

from typing import Any

from deal_sync.core.events.event_bus import EventBus


class NullEventBus(EventBus):
    """EventBus without sinks whose emit is a no-op (used for tests)."""

    def __init__(self) -> None:
        super().__init__(sinks=())

    def emit(self, event: Any) -> None:
        return
