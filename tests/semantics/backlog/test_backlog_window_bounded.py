"""
Semantic test: the backlog pass scans only the most recent window.

Invariant:
Given M history deals and a window N, the pass inspects exactly indices
[max(0, M - N), M), oldest first.
"""

from __future__ import annotations

import pytest

from deal_sync.core.domain.types import RawEvent
from deal_sync.sync.adapters.replay_source import ReplayEventSource
from deal_sync.sync.backlog import BacklogProcessor, backlog_start_index


def _history(make_deal, count: int) -> ReplayEventSource:
    source = ReplayEventSource(deals=[make_deal(1000 + i) for i in range(count)])
    source.select_history()
    return source


@pytest.mark.parametrize(
    ("total", "window", "expected"),
    [(250, 100, 150), (100, 100, 0), (50, 100, 0), (0, 100, 0), (10, 0, 10)],
)
def test_start_index(total, window, expected) -> None:
    assert backlog_start_index(total, window) == expected


def test_window_of_100_over_250_deals_starts_at_150(make_deal) -> None:
    source = _history(make_deal, 250)
    handled: list[int] = []

    def handle(raw: RawEvent) -> bool:
        handled.append(raw.ticket)
        return True

    summary = BacklogProcessor(source=source, handle=handle, window=100).run()

    assert summary.total == 250
    assert summary.start_index == 150
    assert summary.inspected == 100
    assert summary.emitted == 100
    assert source.inspected_indices == list(range(150, 250))
    assert handled == [1000 + i for i in range(150, 250)]


def test_window_larger_than_history_scans_everything(make_deal) -> None:
    source = _history(make_deal, 7)

    summary = BacklogProcessor(source=source, handle=lambda raw: False, window=100).run()

    assert summary.start_index == 0
    assert summary.inspected == 7
    assert summary.emitted == 0
    assert source.inspected_indices == list(range(7))


def test_zero_window_inspects_nothing(make_deal) -> None:
    source = _history(make_deal, 20)

    summary = BacklogProcessor(source=source, handle=lambda raw: True, window=0).run()

    assert summary.inspected == 0
    assert source.inspected_indices == []
