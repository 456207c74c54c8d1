"""
Semantic test: the backlog pass completes before live delivery starts.

Invariants:
- Live events are refused until start() has finished.
- Deals delivered by the backlog pass are not re-sent when the terminal
  re-delivers them live.
- The pass is skipped entirely when disabled.
- A source that cannot select history aborts startup.
"""

from __future__ import annotations

import pytest

from deal_sync.core.domain.errors import SourceUnavailableError
from deal_sync.core.domain.suppress_reasons import SuppressReason
from deal_sync.core.domain.types import RawEvent
from deal_sync.core.events.sinks.null_event_bus import NullEventBus
from deal_sync.sync.adapters.cursor_stores import InMemoryCursorStore
from deal_sync.sync.adapters.replay_source import ReplayEventSource
from deal_sync.sync.config import SyncConfig
from deal_sync.sync.service import SyncService


def _service(source, transport, **cfg) -> SyncService:
    config = SyncConfig(access_token="tok", account_id="acct", backlog_pause_ms=0, **cfg)
    return SyncService(
        config=config,
        source=source,
        store=InMemoryCursorStore(),
        transport=transport,
        event_bus=NullEventBus(),
    )


def test_live_event_before_start_is_refused(make_deal, transport) -> None:
    service = _service(ReplayEventSource(deals=[make_deal(1)]), transport)

    with pytest.raises(RuntimeError):
        service.on_event(RawEvent(kind="deal_added", ticket=1))

    assert transport.payloads == []


def test_pipeline_refuses_events_without_engine(make_deal, transport) -> None:
    service = _service(ReplayEventSource(deals=[make_deal(1)]), transport)

    with pytest.raises(RuntimeError, match="not started"):
        service._process(RawEvent(kind="deal_added", ticket=1))  # pylint: disable=protected-access

    assert service.stats.received == 0
    assert transport.payloads == []


def test_backlog_deals_are_not_resent_live(make_deal, transport) -> None:
    source = ReplayEventSource(deals=[make_deal(1), make_deal(2), make_deal(3)])
    service = _service(source, transport)

    service.start()

    assert service.is_live
    assert len(transport.payloads) == 3
    assert service.backlog_summary is not None
    assert service.backlog_summary.emitted == 3

    assert service.on_event(RawEvent(kind="deal_added", ticket=3)) is None
    assert len(transport.payloads) == 3
    assert service.stats.suppressed[SuppressReason.DUPLICATE_TICKET] == 1


def test_disabled_backlog_skips_history(make_deal, transport) -> None:
    source = ReplayEventSource(deals=[make_deal(1), make_deal(2)])
    service = _service(source, transport, process_backlog=False)

    service.start()

    assert service.backlog_summary is None
    assert source.inspected_indices == []
    assert transport.payloads == []
    assert service.is_live


def test_unavailable_source_aborts_startup(transport) -> None:
    source = ReplayEventSource(available=False)
    service = _service(source, transport)

    with pytest.raises(SourceUnavailableError):
        service.start()

    assert not service.is_live
