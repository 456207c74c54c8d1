from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from deal_sync.core.domain.errors import CursorPersistenceError, SourceUnavailableError
from deal_sync.sync.adapters.cursor_stores import FileCursorStore
from deal_sync.sync.adapters.http_transport import RequestsWebhookTransport
from deal_sync.sync.adapters.replay_source import ReplayEventSource
from deal_sync.sync.config import SyncConfig
from deal_sync.sync.service import SyncService

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deal-sync",
        description="Replay terminal trade activity through the deal sync pipeline",
    )

    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the sync JSON config.",
    )

    parser.add_argument(
        "--replay",
        type=Path,
        required=True,
        help="Path to a replay document (deals, positions, transactions).",
    )

    parser.add_argument(
        "--state-dir",
        type=Path,
        default=Path(".deal_sync"),
        help="Directory holding the persisted cursor slot.",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose diagnostics (overrides the config value).",
    )

    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        raw_cfg = _load_json(args.config)
        if args.debug:
            raw_cfg["debug"] = True
        config = SyncConfig.from_json_obj(raw_cfg)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Error: invalid config {args.config}: {exc}", file=sys.stderr)
        return 2

    _configure_logging(config.debug)

    try:
        source = ReplayEventSource.from_file(args.replay)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Error: invalid replay {args.replay}: {exc}", file=sys.stderr)
        return 2

    service = SyncService(
        config=config,
        source=source,
        store=FileCursorStore(args.state_dir),
        transport=RequestsWebhookTransport(
            url=config.webhook_url,
            timeout_s=config.timeout_s,
        ),
    )

    try:
        service.start()
    except SourceUnavailableError:
        LOGGER.exception("Event source unavailable; initialization aborted")
        service.stop()
        return 1
    except CursorPersistenceError:
        LOGGER.exception("Cursor slot unreadable; initialization aborted")
        service.stop()
        return 1

    try:
        for txn in source.transactions:
            service.on_transaction(txn)
    finally:
        service.stop()

    stats = service.stats
    print(
        f"received={stats.received} emitted={stats.emitted} "
        f"suppressed={stats.suppressed_total} transport_errors={stats.transport_errors} "
        f"cursor={service.cursor.value if service.cursor is not None else 0}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
