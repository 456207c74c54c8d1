"""
Append-only JSONL journal sink.
"""
from __future__ import annotations

import dataclasses
import json
import time
from pathlib import Path
from typing import Any


class FileRecorderSink:
    """Writes each event as a JSON line to a file.

    Each line carries the event type name and the wall-clock time it was
    recorded, so a journal can be read back without the event classes.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    def on_event(self, event: Any) -> None:
        if dataclasses.is_dataclass(event) and not isinstance(event, type):
            fields = dataclasses.asdict(event)
        else:
            fields = {"event": str(event)}

        record = {
            "type": type(event).__name__,
            "recorded_at": time.time(),
            **fields,
        }
        self._fh.write(json.dumps(record) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
