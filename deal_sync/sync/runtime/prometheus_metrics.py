from __future__ import annotations

import json
import logging
import os
from typing import Mapping

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

LOGGER = logging.getLogger(__name__)

PUSHGATEWAY_URL_ENV = "PROMETHEUS_PUSHGATEWAY_URL"
GROUPING_KEY_ENV = "PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON"


def grouping_key_from_env() -> dict[str, str]:
    """Parse the optional grouping key JSON object, ignoring malformed input.

    Example:
        PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON='{"instance": "terminal-01"}'
    """
    raw = os.environ.get(GROUPING_KEY_ENV)
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Invalid %s; ignoring", GROUPING_KEY_ENV)
        return {}

    if not isinstance(data, dict):
        return {}

    return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}


class PrometheusMetricsClient:
    """Pushgateway client for end-of-session sync counters.

    Enabled when a gateway URL is given or PROMETHEUS_PUSHGATEWAY_URL is set,
    e.g. http://pushgateway.monitoring.svc.cluster.local:9091. Without a
    grouping key, sessions of different terminals overwrite each other under
    the same job.

    Best-effort: callers treat pushing as a side-effect and never fail the
    session because of it.
    """

    def __init__(
        self,
        *,
        pushgateway_url: str | None = None,
        grouping_key: Mapping[str, str] | None = None,
    ) -> None:
        self._pushgateway_url = pushgateway_url or os.environ.get(PUSHGATEWAY_URL_ENV)
        self._grouping_key = dict(grouping_key) if grouping_key is not None else grouping_key_from_env()
        self._registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}

    def is_enabled(self) -> bool:
        return bool(self._pushgateway_url)

    def push_gauge(
        self,
        *,
        name: str,
        value: float,
        labels: dict[str, str],
    ) -> None:
        """Set one labelled gauge in the local registry (sent by push_all)."""
        if not self._pushgateway_url:
            return

        gauge = self._gauges.get(name)
        if gauge is None:
            gauge = Gauge(
                name,
                documentation=name,
                labelnames=list(labels.keys()),
                registry=self._registry,
            )
            self._gauges[name] = gauge

        gauge.labels(**labels).set(value)

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "gauges": len(self._gauges)},
        )
