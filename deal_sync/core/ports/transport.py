"""Delivery transport protocol and outcome values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

TRANSPORT_FAILURE_STATUS = -1


@dataclass(frozen=True, slots=True)
class Delivered:
    """The collector answered. Any HTTP status is a completed attempt."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True, slots=True)
class TransportError:
    """The request never completed (timeout, network, configuration)."""

    code: str
    detail: str = ""

    @property
    def status(self) -> int:
        return TRANSPORT_FAILURE_STATUS

    @property
    def ok(self) -> bool:
        return False


DeliveryOutcome = Delivered | TransportError


class WebhookTransport(Protocol):
    """Fire-and-forget delivery boundary.

    ``deliver`` must return within a bounded time and must not raise: every
    failure is reported as a TransportError outcome. There is no retry.
    """

    def deliver(self, payload: bytes) -> DeliveryOutcome:
        """Send one encoded payload to the collector."""
