"""Public API for the deal_sync package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from deal_sync.core.domain.cursor import ProcessingCursor
from deal_sync.core.domain.errors import (
    CursorPersistenceError,
    DealSyncError,
    SourceUnavailableError,
)
from deal_sync.core.domain.suppress_reasons import SuppressReason
from deal_sync.core.domain.types import (
    ClassifiedEvent,
    DealRecord,
    PositionCloseEvent,
    PositionOpenEvent,
    PositionSnapshot,
    PositionUpdateEvent,
    RawEvent,
)

# ----------------------------------------------------------------------
# Core pipeline
# ----------------------------------------------------------------------
from deal_sync.core.encoding.encoder import MessageEncoder
from deal_sync.core.engine.dedup_engine import (
    Classification,
    Classified,
    DeduplicationEngine,
    Suppressed,
)

# ----------------------------------------------------------------------
# Ports (implemented by integrations)
# ----------------------------------------------------------------------
from deal_sync.core.ports.cursor_store import CursorStore
from deal_sync.core.ports.event_source import EventSource
from deal_sync.core.ports.transport import (
    Delivered,
    DeliveryOutcome,
    TransportError,
    WebhookTransport,
)

# ----------------------------------------------------------------------
# Service API
# ----------------------------------------------------------------------
from deal_sync.sync.backlog import BacklogProcessor, BacklogSummary
from deal_sync.sync.config import SyncConfig
from deal_sync.sync.service import SyncService

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Service
    "SyncService",
    "SyncConfig",
    "BacklogProcessor",
    "BacklogSummary",

    # Pipeline
    "DeduplicationEngine",
    "MessageEncoder",
    "Classification",
    "Classified",
    "Suppressed",
    "SuppressReason",
    "ProcessingCursor",

    # Domain
    "RawEvent",
    "DealRecord",
    "PositionSnapshot",
    "ClassifiedEvent",
    "PositionOpenEvent",
    "PositionCloseEvent",
    "PositionUpdateEvent",

    # Ports
    "EventSource",
    "CursorStore",
    "WebhookTransport",
    "Delivered",
    "TransportError",
    "DeliveryOutcome",

    # Errors
    "DealSyncError",
    "SourceUnavailableError",
    "CursorPersistenceError",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("deal-sync")
except PackageNotFoundError:
    __version__ = "0.0.0"
