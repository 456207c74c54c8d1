"""
Synchronous event bus for sync-domain facts.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from deal_sync.core.events.event_sink import EventSink

LOGGER = logging.getLogger(__name__)


class EventBus:
    """Fans domain events out to registered sinks, in registration order.

    Sinks are observers: a sink that raises is logged and skipped, and the
    event still reaches the remaining sinks. Publishing never interrupts the
    event path that produced the fact.
    """

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        if self._closed:
            return
        for sink in self._sinks:
            try:
                sink.on_event(event)
            except Exception:  # pylint: disable=broad-exception-caught
                LOGGER.exception(
                    "Event sink failed",
                    extra={"sink": type(sink).__name__, "event_type": type(event).__name__},
                )

    def close(self) -> None:
        """Close sinks that expose close(); later emits are dropped."""
        if self._closed:
            return
        self._closed = True

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()
