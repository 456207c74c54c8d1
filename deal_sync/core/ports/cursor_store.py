"""Durable slot storage protocol used to persist the processing cursor."""

from __future__ import annotations

from typing import Protocol


class CursorStore(Protocol):
    """Named-slot byte storage.

    Implementations must make ``write`` durable before returning and raise
    (``CursorPersistenceError`` or ``OSError``) when they cannot. A slot that
    exists but cannot be read raises ``CursorPersistenceError``; the session
    does not start on a cursor it cannot trust.
    """

    def read(self, slot: str) -> bytes | None:
        """Return the bytes stored in ``slot``, or None if the slot does not exist."""

    def write(self, slot: str, data: bytes) -> None:
        """Replace the contents of ``slot`` with ``data``."""
