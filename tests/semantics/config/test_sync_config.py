"""
Semantic test: configuration validation.

Invariant:
Invalid configuration is rejected at startup with a pydantic ValidationError;
defaults match the documented values.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from deal_sync.sync.config import DEFAULT_CURSOR_SLOT, DEFAULT_WEBHOOK_URL, SyncConfig


def test_defaults() -> None:
    cfg = SyncConfig.from_json_obj({"access_token": "tok"})

    assert cfg.webhook_url == DEFAULT_WEBHOOK_URL
    assert cfg.account_id == ""
    assert cfg.cursor_slot == DEFAULT_CURSOR_SLOT
    assert cfg.debug is False
    assert cfg.process_backlog is True
    assert cfg.backlog_window == 100
    assert cfg.timeout_s == 5.0
    assert cfg.journal_path is None


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"access_token": ""},
        {"access_token": "tok", "webhook_url": "ftp://collector"},
        {"access_token": "tok", "cursor_slot": "../escape"},
        {"access_token": "tok", "backlog_window": -1},
        {"access_token": "tok", "timeout_ms": 0},
        {"access_token": "tok", "unknown_option": True},
    ],
)
def test_invalid_config_is_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        SyncConfig.from_json_obj(overrides)
