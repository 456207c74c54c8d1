"""Sync configuration model."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_WEBHOOK_URL = "http://localhost:8000/api/trades/webhook"
DEFAULT_CURSOR_SLOT = "deal_sync_last_deal"

# Number of backlog items between micro-pauses.
BACKLOG_PAUSE_EVERY = 10

_SLOT_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class SyncConfig(BaseModel):
    """Structured sync configuration.

    JSON example:
        {
          "webhook_url": "https://collector.example.com/webhook",
          "access_token": "secret",
          "account_id": "demo-123",
          "backlog_window": 100
        }
    """

    webhook_url: str = Field(DEFAULT_WEBHOOK_URL, min_length=1)
    access_token: str = Field(..., min_length=1)
    account_id: str = ""

    cursor_slot: str = Field(DEFAULT_CURSOR_SLOT, min_length=1)

    # Gates verbose diagnostic output only.
    debug: bool = False

    process_backlog: bool = True
    backlog_window: int = Field(100, ge=0)
    backlog_pause_ms: int = Field(1, ge=0)

    timeout_ms: int = Field(5000, gt=0)

    journal_path: str | None = None

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, sync_obj: dict[str, Any]) -> SyncConfig:
        """Create a SyncConfig instance from a JSON-compatible object."""
        return cls.model_validate(sync_obj)

    @model_validator(mode="after")
    def validate_consistency(self) -> SyncConfig:
        """Validate URL scheme and slot name."""
        if not self.webhook_url.startswith(("http://", "https://")):
            raise ValueError("webhook_url must be an http(s) URL")
        if not _SLOT_PATTERN.match(self.cursor_slot):
            raise ValueError("cursor_slot may only contain letters, digits, '_', '.' and '-'")
        return self

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def backlog_pause_s(self) -> float:
        return self.backlog_pause_ms / 1000.0
