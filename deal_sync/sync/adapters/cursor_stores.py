"""Cursor store implementations."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from deal_sync.core.domain.errors import CursorPersistenceError


class FileCursorStore:
    """Stores each slot as ``<directory>/<slot>.bin``.

    Writes go to a temporary file in the same directory which is fsynced and
    then atomically renamed over the slot file, so a crash leaves either the
    old or the new value, never a torn one.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _slot_path(self, slot: str) -> Path:
        return self._directory / f"{slot}.bin"

    def read(self, slot: str) -> bytes | None:
        path = self._slot_path(slot)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CursorPersistenceError(f"cannot read cursor slot {slot!r} at {path}") from exc

    def write(self, slot: str, data: bytes) -> None:
        path = self._slot_path(slot)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{slot}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CursorPersistenceError(f"cannot write cursor slot {slot!r} at {path}") from exc


class InMemoryCursorStore:
    """Process-local store (used for tests and dry runs).

    ``fail_writes`` makes every write raise CursorPersistenceError.
    """

    def __init__(self, slots: dict[str, bytes] | None = None, *, fail_writes: bool = False) -> None:
        self.slots: dict[str, bytes] = dict(slots) if slots is not None else {}
        self.fail_writes = fail_writes
        self.writes = 0

    def read(self, slot: str) -> bytes | None:
        return self.slots.get(slot)

    def write(self, slot: str, data: bytes) -> None:
        if self.fail_writes:
            raise CursorPersistenceError(f"write to slot {slot!r} rejected")
        self.slots[slot] = bytes(data)
        self.writes += 1
