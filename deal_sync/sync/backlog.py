"""Bounded startup backlog pass.

Catches up on deals that happened while the process was not running by
scanning only the most recent ``window`` entries of the deal history. The
history can be arbitrarily large; the scan never touches entries before
``max(0, total - window)``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from deal_sync.core.domain.types import RawEvent
from deal_sync.sync.config import BACKLOG_PAUSE_EVERY

if TYPE_CHECKING:
    from deal_sync.core.ports.event_source import EventSource

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BacklogSummary:
    total: int
    start_index: int
    inspected: int
    emitted: int


def backlog_start_index(total: int, window: int) -> int:
    """Return the first history index scanned for a window of ``window`` deals."""
    return max(0, total - window)


class BacklogProcessor:
    """Feeds the last ``window`` history deals through the event pipeline.

    Deals are scanned oldest first so the cursor advances monotonically and
    a deal that fails to classify does not cause later valid deals to be
    skipped. ``handle`` is the same per-event entry point live events use; it
    returns True when the event produced an outbound message.
    """

    def __init__(
        self,
        *,
        source: EventSource,
        handle: Callable[[RawEvent], bool],
        window: int,
        pause_every: int = BACKLOG_PAUSE_EVERY,
        pause_s: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if window < 0:
            raise ValueError("window must be >= 0")
        self._source = source
        self._handle = handle
        self._window = window
        self._pause_every = pause_every
        self._pause_s = pause_s
        self._sleep = sleep

    def run(self) -> BacklogSummary:
        total = self._source.history_deals_total()
        start = backlog_start_index(total, self._window)

        LOGGER.info(
            "Backlog pass started",
            extra={"total": total, "start_index": start, "window": self._window},
        )

        inspected = 0
        emitted = 0
        for index in range(start, total):
            inspected += 1

            ticket = self._source.history_deal_ticket(index)
            if ticket <= 0:
                LOGGER.debug("Unreadable history entry", extra={"index": index})
            elif self._handle(RawEvent(kind="deal_added", ticket=ticket)):
                emitted += 1

            if self._pause_s > 0 and self._pause_every > 0 and inspected % self._pause_every == 0:
                self._sleep(self._pause_s)

        summary = BacklogSummary(
            total=total,
            start_index=start,
            inspected=inspected,
            emitted=emitted,
        )
        LOGGER.info(
            "Backlog pass finished",
            extra={"inspected": inspected, "emitted": emitted},
        )
        return summary
