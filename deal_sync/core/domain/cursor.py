"""Processing cursor: the durable high-water-mark of handled deal tickets.

The cursor is an explicit owned value. It is loaded once from a CursorStore
at startup, advanced only by the deduplication engine, and written back to
the store synchronously on every advance.
"""

from __future__ import annotations

import logging
import struct
import threading
from typing import TYPE_CHECKING

from deal_sync.core.domain.errors import CursorPersistenceError
from deal_sync.core.domain.types import TICKET_MAX

if TYPE_CHECKING:
    from deal_sync.core.ports.cursor_store import CursorStore

LOGGER = logging.getLogger(__name__)

# One unsigned 64-bit integer, little-endian.
_CURSOR_FORMAT = struct.Struct("<Q")
CURSOR_SIZE = _CURSOR_FORMAT.size


def encode_cursor(value: int) -> bytes:
    """Return the 8-byte slot representation of a cursor value."""
    if not 0 <= value <= TICKET_MAX:
        raise ValueError(f"cursor value out of range: {value}")
    return _CURSOR_FORMAT.pack(value)


def decode_cursor(data: bytes) -> int:
    """Decode an 8-byte slot payload. Raises ValueError on a malformed payload."""
    if len(data) != CURSOR_SIZE:
        raise ValueError(f"cursor slot must hold {CURSOR_SIZE} bytes, got {len(data)}")
    return _CURSOR_FORMAT.unpack(data)[0]


class ProcessingCursor:
    """Highest deal ticket that has been classified for delivery.

    Invariant:
    - value is monotonically non-decreasing, in process and across restarts.

    ``try_advance`` is a compare-and-advance under a lock, so the
    "suppress if <= cursor" check and the advance cannot interleave even if
    the host delivers events from several threads.
    """

    def __init__(self, *, store: CursorStore, slot: str, value: int = 0) -> None:
        if not 0 <= value <= TICKET_MAX:
            raise ValueError(f"cursor value out of range: {value}")
        self._store = store
        self._slot = slot
        self._value = value
        self._lock = threading.Lock()
        self.persist_failures = 0

    @classmethod
    def load(cls, *, store: CursorStore, slot: str) -> ProcessingCursor:
        """Create a cursor from the persisted slot, starting at 0 if there is none.

        An unreadable slot (CursorPersistenceError from the store) propagates.
        """
        data = store.read(slot)
        if data is None:
            LOGGER.info("No persisted cursor; starting from 0", extra={"slot": slot})
            return cls(store=store, slot=slot, value=0)

        try:
            value = decode_cursor(data)
        except ValueError:
            LOGGER.warning(
                "Malformed cursor slot; starting from 0",
                extra={"slot": slot, "size": len(data)},
            )
            return cls(store=store, slot=slot, value=0)

        LOGGER.info("Loaded cursor", extra={"slot": slot, "cursor": value})
        return cls(store=store, slot=slot, value=value)

    @property
    def value(self) -> int:
        return self._value

    @property
    def slot(self) -> str:
        return self._slot

    def is_handled(self, ticket: int) -> bool:
        """Return True if ``ticket`` is at or below the cursor."""
        return ticket <= self._value

    def try_advance(self, ticket: int) -> tuple[bool, bool]:
        """Advance to ``ticket`` if it is above the current value.

        Returns:
            (advanced, persisted). ``advanced`` is False when ``ticket`` is not
            above the cursor. ``persisted`` is False when the store write
            failed; the in-memory value still advances in that case.
        """
        with self._lock:
            if ticket <= self._value:
                return False, False
            self._value = ticket
            return True, self._persist(ticket)

    def _persist(self, value: int) -> bool:
        try:
            self._store.write(self._slot, encode_cursor(value))
        except (CursorPersistenceError, OSError):
            self.persist_failures += 1
            LOGGER.exception(
                "Cursor persistence failed; continuing with in-memory value",
                extra={"slot": self._slot, "cursor": value},
            )
            return False
        return True
