"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any

from deal_sync.core.events.events import EventSuppressedEvent


class LoggingEventSink:
    """Logs domain events using the standard logging module.

    Suppressions are routine (re-delivered deals, balance operations) and are
    logged at DEBUG so they only appear with verbose diagnostics enabled.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def on_event(self, event: Any) -> None:
        level = logging.DEBUG if isinstance(event, EventSuppressedEvent) else logging.INFO
        self._logger.log(level, "domain_event %s", type(event).__name__, extra={"event": event})
