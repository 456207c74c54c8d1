"""Error taxonomy.

Only startup-level failures are raised to the caller. Per-event failures are
turned into suppressions or outcome values by the components that observe
them.
"""

from __future__ import annotations


class DealSyncError(Exception):
    """Base class for deal-sync errors."""


class SourceUnavailableError(DealSyncError):
    """Raised when the event source cannot supply history at startup."""


class CursorPersistenceError(DealSyncError):
    """Raised by a cursor store when a slot cannot be written."""
