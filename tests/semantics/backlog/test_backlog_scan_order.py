"""
Semantic test: the backlog pass is oldest-first and keeps going.

Invariants:
- A deal that is suppressed or unreadable does not stop later deals.
- A micro-pause happens every 10 inspected items, in the calling thread.
"""

from __future__ import annotations

from deal_sync.core.domain.cursor import ProcessingCursor
from deal_sync.core.domain.types import RawEvent
from deal_sync.core.engine.dedup_engine import Classified, DeduplicationEngine
from deal_sync.core.events.sinks.null_event_bus import NullEventBus
from deal_sync.sync.adapters.cursor_stores import InMemoryCursorStore
from deal_sync.sync.adapters.replay_source import ReplayEventSource
from deal_sync.sync.backlog import BacklogProcessor


class _GappedSource(ReplayEventSource):
    """History where some indices cannot be read."""

    def __init__(self, unreadable: set[int], **kwargs) -> None:
        super().__init__(**kwargs)
        self._unreadable = unreadable

    def history_deal_ticket(self, index: int) -> int:
        ticket = super().history_deal_ticket(index)
        return 0 if index in self._unreadable else ticket


def test_suppressed_and_unreadable_deals_do_not_skip_later_ones(make_deal) -> None:
    deals = [
        make_deal(10),
        make_deal(11, deal_type="balance"),
        make_deal(12),
        make_deal(13, entry="out", deal_type="sell"),
    ]
    source = _GappedSource(unreadable={2}, deals=deals)
    source.select_history()
    cursor = ProcessingCursor(store=InMemoryCursorStore(), slot="slot")
    engine = DeduplicationEngine(source=source, cursor=cursor, event_bus=NullEventBus())

    classified: list[int] = []

    def handle(raw: RawEvent) -> bool:
        result = engine.classify(raw)
        if isinstance(result, Classified):
            classified.append(raw.ticket)
            return True
        return False

    summary = BacklogProcessor(source=source, handle=handle, window=10).run()

    assert classified == [10, 13]
    assert summary.inspected == 4
    assert summary.emitted == 2
    assert cursor.value == 13


def test_micro_pause_every_ten_items(make_deal) -> None:
    source = ReplayEventSource(deals=[make_deal(i) for i in range(1, 26)])
    source.select_history()
    pauses: list[float] = []

    BacklogProcessor(
        source=source,
        handle=lambda raw: True,
        window=100,
        pause_s=0.001,
        sleep=pauses.append,
    ).run()

    assert pauses == [0.001, 0.001]


def test_no_pause_when_disabled(make_deal) -> None:
    source = ReplayEventSource(deals=[make_deal(i) for i in range(1, 26)])
    source.select_history()
    pauses: list[float] = []

    BacklogProcessor(source=source, handle=lambda raw: True, window=100, pause_s=0.0, sleep=pauses.append).run()

    assert pauses == []
