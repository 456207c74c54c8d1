"""Per-session sync counters."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SyncStats:
    received: int = 0
    emitted: int = 0

    # Completed delivery attempts (any HTTP status).
    delivered: int = 0
    # Completed attempts answered with a non-2xx status.
    rejected_by_collector: int = 0
    transport_errors: int = 0

    cursor_persist_failures: int = 0

    suppressed: dict[str, int] = field(default_factory=dict)

    def record_suppressed(self, reason: str) -> None:
        self.suppressed[reason] = self.suppressed.get(reason, 0) + 1

    @property
    def suppressed_total(self) -> int:
        return sum(self.suppressed.values())

    def as_gauges(self) -> dict[str, float]:
        """Flat metric name -> value mapping for metrics export."""
        return {
            "deal_sync_events_received": float(self.received),
            "deal_sync_events_emitted": float(self.emitted),
            "deal_sync_events_suppressed": float(self.suppressed_total),
            "deal_sync_deliveries_completed": float(self.delivered),
            "deal_sync_deliveries_rejected": float(self.rejected_by_collector),
            "deal_sync_transport_errors": float(self.transport_errors),
            "deal_sync_cursor_persist_failures": float(self.cursor_persist_failures),
        }
