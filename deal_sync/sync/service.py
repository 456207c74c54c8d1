"""Sync service: wires the event pipeline and drives it.

Data flow per event:
    RawEvent -> DeduplicationEngine -> MessageEncoder -> WebhookTransport

The cursor is loaded once at startup and advanced by the engine. Delivery is
best-effort: a failed delivery is logged and dropped, and the cursor (already
advanced for deal events) is not rolled back.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Mapping

from pydantic import ValidationError

from deal_sync.core.domain.cursor import ProcessingCursor
from deal_sync.core.domain.suppress_reasons import SuppressReason
from deal_sync.core.encoding.encoder import MessageEncoder
from deal_sync.core.engine.dedup_engine import DeduplicationEngine, Suppressed
from deal_sync.core.events.event_bus import EventBus
from deal_sync.core.events.events import BacklogCompletedEvent, DeliveryAttemptedEvent
from deal_sync.core.events.sinks.file_recorder import FileRecorderSink
from deal_sync.core.events.sinks.sink_logging import LoggingEventSink
from deal_sync.core.ports.transport import TransportError
from deal_sync.sync.adapters.transactions import normalize_transaction
from deal_sync.sync.backlog import BacklogProcessor, BacklogSummary
from deal_sync.sync.runtime.prometheus_metrics import PrometheusMetricsClient
from deal_sync.sync.stats import SyncStats

if TYPE_CHECKING:
    from deal_sync.core.domain.types import ClassifiedEvent, RawEvent
    from deal_sync.core.ports.cursor_store import CursorStore
    from deal_sync.core.ports.event_source import EventSource
    from deal_sync.core.ports.transport import DeliveryOutcome, WebhookTransport
    from deal_sync.sync.config import SyncConfig

LOGGER = logging.getLogger(__name__)


class SyncService:
    """Owns the engine, encoder and transport for one account session.

    Invariants:
    - The backlog pass runs to completion inside ``start()`` before live
      events are accepted.
    - Events are handled one at a time; no exception raised while handling a
      single event escapes ``on_event``.
    """
    # pylint: disable=too-many-instance-attributes

    def __init__(
        self,
        *,
        config: SyncConfig,
        source: EventSource,
        store: CursorStore,
        transport: WebhookTransport,
        event_bus: EventBus | None = None,
        metrics: PrometheusMetricsClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        if config.debug:
            logging.getLogger("deal_sync").setLevel(logging.DEBUG)

        self._source = source
        self._store = store
        self._transport = transport
        self._event_bus = event_bus if event_bus is not None else self._build_event_bus(config)
        self._metrics = metrics
        self._sleep = sleep

        self._encoder = MessageEncoder(
            account_id=config.account_id,
            access_token=config.access_token,
        )

        self._engine: DeduplicationEngine | None = None
        self._live = False
        self._stopped = False

        self.stats = SyncStats()
        self.backlog_summary: BacklogSummary | None = None

    def _build_event_bus(self, config: SyncConfig) -> EventBus:
        logger = logging.getLogger("deal_sync.bus")

        bus = EventBus(sinks=[LoggingEventSink(logger)])
        if config.journal_path:
            bus.register(FileRecorderSink(Path(config.journal_path)))
        return bus

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def cursor(self) -> ProcessingCursor | None:
        return None if self._engine is None else self._engine.cursor

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Select history, load the cursor, run the backlog pass, go live.

        SourceUnavailableError from the event source and CursorPersistenceError
        from an unreadable cursor slot propagate: the session cannot start
        without history or without a trustworthy cursor.
        """
        if self._engine is not None:
            raise RuntimeError("SyncService already started")

        self._source.select_history()

        cursor = ProcessingCursor.load(store=self._store, slot=self.config.cursor_slot)
        self._engine = DeduplicationEngine(
            source=self._source,
            cursor=cursor,
            event_bus=self._event_bus,
        )

        if self.config.process_backlog:
            processor = BacklogProcessor(
                source=self._source,
                handle=lambda raw: self._process(raw) is not None,
                window=self.config.backlog_window,
                pause_s=self.config.backlog_pause_s,
                sleep=self._sleep,
            )
            summary = processor.run()
            self.backlog_summary = summary
            self._event_bus.emit(
                BacklogCompletedEvent(
                    total=summary.total,
                    start_index=summary.start_index,
                    inspected=summary.inspected,
                    emitted=summary.emitted,
                )
            )
        else:
            LOGGER.info("Backlog pass disabled")

        self._live = True
        LOGGER.info(
            "Sync started",
            extra={
                "account_id": self.config.account_id,
                "cursor": cursor.value,
                "webhook_url": self.config.webhook_url,
            },
        )

    def stop(self) -> None:
        """Stop accepting events, close sinks and the transport, push metrics."""
        if self._stopped:
            return
        self._stopped = True
        self._live = False

        self._event_bus.close()

        close_fn = getattr(self._transport, "close", None)
        if callable(close_fn):
            close_fn()

        self._push_metrics()

        LOGGER.info(
            "Sync stopped",
            extra={
                "received": self.stats.received,
                "emitted": self.stats.emitted,
                "suppressed": self.stats.suppressed_total,
                "transport_errors": self.stats.transport_errors,
            },
        )

    # ------------------------------------------------------------------
    # Live events
    # ------------------------------------------------------------------

    def on_event(self, raw: RawEvent) -> DeliveryOutcome | None:
        """Handle one live event.

        Returns the delivery outcome, or None if nothing was sent.
        """
        if not self._live:
            raise RuntimeError("live events are not accepted before start() completes")
        return self._process(raw)

    def on_transaction(self, txn: Mapping[str, Any]) -> DeliveryOutcome | None:
        """Normalize a terminal trade transaction and handle it."""
        raw = normalize_transaction(txn)
        if raw is None:
            LOGGER.debug("Transaction not observed", extra={"transaction_type": txn.get("type")})
            return None
        return self.on_event(raw)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _process(self, raw: RawEvent) -> DeliveryOutcome | None:
        if self._engine is None:
            raise RuntimeError("SyncService not started")
        self.stats.received += 1

        try:
            result = self._engine.classify(raw)
            self.stats.cursor_persist_failures = self._engine.cursor.persist_failures

            if isinstance(result, Suppressed):
                self.stats.record_suppressed(result.reason)
                return None

            try:
                payload = self._encoder.encode(result.event)
            except ValidationError:
                LOGGER.exception(
                    "Payload validation failed; event dropped",
                    extra={"kind": raw.kind, "ticket": raw.ticket},
                )
                self.stats.record_suppressed(SuppressReason.ENCODING_FAILED)
                return None

            self.stats.emitted += 1
            LOGGER.debug(
                "Sending %s",
                result.event.action,
                extra={"position_id": result.event.position_id, "bytes": len(payload)},
            )

            outcome = self._transport.deliver(payload)
            self._record_outcome(result.event, outcome)
            return outcome

        except Exception:  # pylint: disable=broad-exception-caught
            LOGGER.exception(
                "Unexpected failure while handling event; event dropped",
                extra={"kind": raw.kind, "ticket": raw.ticket},
            )
            self.stats.record_suppressed(SuppressReason.INTERNAL_ERROR)
            return None

    def _record_outcome(self, event: ClassifiedEvent, outcome: DeliveryOutcome) -> None:
        if isinstance(outcome, TransportError):
            self.stats.transport_errors += 1
            LOGGER.error(
                "Delivery failed (status %s, error %s); event dropped",
                outcome.status,
                outcome.code,
                extra={
                    "action": event.action,
                    "position_id": event.position_id,
                    "detail": outcome.detail,
                },
            )
            error_code: str | None = outcome.code
        else:
            self.stats.delivered += 1
            if outcome.ok:
                LOGGER.info(
                    "Delivered %s",
                    event.action,
                    extra={"position_id": event.position_id, "status": outcome.status},
                )
            else:
                self.stats.rejected_by_collector += 1
                LOGGER.warning(
                    "Collector answered %s for %s",
                    outcome.status,
                    event.action,
                    extra={"position_id": event.position_id, "body": outcome.body[:200]},
                )
            error_code = None

        self._event_bus.emit(
            DeliveryAttemptedEvent(
                action=event.action,
                position_id=event.position_id,
                status=outcome.status,
                error_code=error_code,
            )
        )

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def _push_metrics(self) -> None:
        metrics = self._metrics if self._metrics is not None else PrometheusMetricsClient()
        if not metrics.is_enabled():
            return

        try:
            labels = {"account_id": self.config.account_id or "unknown"}
            for name, value in self.stats.as_gauges().items():
                metrics.push_gauge(name=name, value=value, labels=labels)
            metrics.push_all(job="deal_sync")
        except Exception:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Prometheus push failed")
