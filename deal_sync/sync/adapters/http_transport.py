"""requests-based webhook transport."""

from __future__ import annotations

import logging
import time

import requests

from deal_sync.core.ports.transport import Delivered, DeliveryOutcome, TransportError

LOGGER = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

# The reply body is only kept for diagnostics.
MAX_BODY_BYTES = 4096


class RequestsWebhookTransport:
    """POSTs encoded payloads to the collector.

    One attempt per payload. The host event path is serialized, so a stalled
    request stalls every other event. ``timeout_s`` is applied twice:

    - per socket operation, through requests (connect, each read);
    - as a total deadline on the whole call, checked while the reply body is
      streamed, so a collector trickling its body cannot hold the call open.

    Failures are returned as TransportError and never retried.
    """

    def __init__(
        self,
        *,
        url: str,
        timeout_s: float,
        session: requests.Session | None = None,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        self._url = url
        self._timeout_s = float(timeout_s)
        self._session = session if session is not None else requests.Session()

    @property
    def url(self) -> str:
        return self._url

    def deliver(self, payload: bytes) -> DeliveryOutcome:
        deadline = time.monotonic() + self._timeout_s
        try:
            response = self._session.post(
                self._url,
                data=payload,
                headers=JSON_HEADERS,
                timeout=self._timeout_s,
                stream=True,
            )
            try:
                body = self._read_body(response, deadline)
            finally:
                response.close()
        except requests.exceptions.Timeout as exc:
            return TransportError(code="timeout", detail=str(exc))
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ) as exc:
            return TransportError(code="invalid_url", detail=str(exc))
        except requests.exceptions.ConnectionError as exc:
            return TransportError(code="connection_error", detail=str(exc))
        except requests.exceptions.RequestException as exc:
            return TransportError(code="request_failed", detail=str(exc))

        if body is None:
            LOGGER.debug("Reply exceeded delivery deadline", extra={"url": self._url})
            return TransportError(
                code="timeout",
                detail=f"reply not completed within {self._timeout_s}s",
            )

        return Delivered(status=response.status_code, body=body)

    @staticmethod
    def _read_body(response: requests.Response, deadline: float) -> str | None:
        """Read up to MAX_BODY_BYTES of the reply; None once ``deadline`` passes.

        Reads one byte at a time: a larger chunk size blocks in the buffered
        socket reader until the chunk is full, which would skip the deadline
        check for a slow sender.
        """
        if time.monotonic() > deadline:
            return None

        body = bytearray()
        for chunk in response.iter_content(chunk_size=1):
            if time.monotonic() > deadline:
                return None
            body += chunk
            if len(body) >= MAX_BODY_BYTES:
                break

        try:
            return bytes(body).decode(response.encoding or "utf-8", errors="replace")
        except LookupError:
            return bytes(body).decode("utf-8", errors="replace")

    def close(self) -> None:
        self._session.close()
