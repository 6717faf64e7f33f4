"""Pipeline counters and latency timings, logged and optionally forwarded to StatsD."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Literal

from prospector.config import Settings, settings

try:  # pragma: no cover - optional dependency
    from statsd import StatsClient
except ImportError:  # pragma: no cover - optional dependency guard
    StatsClient = None  # type: ignore[assignment]

logger = logging.getLogger("prospector.metrics")

MetricKind = Literal["counter", "timing"]


class MetricsReporter:
    """Emits ``<namespace>.<metric>`` counters and timings tagged with the deployment's dimensions.

    Every event is logged at debug level as ``prospector.metric``. With
    ``metrics_backend=statsd`` the same event is also sent to StatsD, which
    has no tag support, so tags only reach the log.
    """

    def __init__(self, config: Settings | None = None, *, statsd_client: Any | None = None) -> None:
        config = config or settings
        self._disabled = config.metrics_disable
        self._namespace = config.metrics_namespace or "prospector"
        self._sample_rate = max(0.0, min(config.metrics_sample_rate, 1.0))
        self._base_tags = {
            "environment": config.environment,
            "lead_database": "apollo" if config.apollo_enabled else "sample",
        }
        self._statsd = statsd_client
        if self._statsd is None and not self._disabled and config.metrics_backend.lower() == "statsd":
            self._statsd = self._connect_statsd(config)

    def increment(self, metric: str, value: float = 1.0, *, tags: dict[str, Any] | None = None) -> None:
        self._emit("counter", metric, value, tags)

    def timing(self, metric: str, value_ms: float, *, tags: dict[str, Any] | None = None) -> None:
        self._emit("timing", metric, value_ms, tags)

    def _emit(self, kind: MetricKind, metric: str, value: float, tags: dict[str, Any] | None) -> None:
        if self._disabled:
            return
        if self._sample_rate < 1.0 and secrets.randbelow(1_000_000) / 1_000_000 > self._sample_rate:
            return

        name = self._qualify(metric)
        payload: dict[str, Any] = {
            "metric": name,
            "type": kind,
            "value": round(float(value), 4),
            "tags": {**self._base_tags, **(tags or {})},
        }
        if self._sample_rate < 1.0:
            payload["sample_rate"] = self._sample_rate
        logger.debug("prospector.metric", extra={"metrics": payload})

        if self._statsd is None:
            return
        try:
            if kind == "timing":
                self._statsd.timing(name, value, rate=self._sample_rate)
            else:
                self._statsd.incr(name, value, rate=self._sample_rate)
        except OSError as exc:
            logger.warning("metrics.statsd_error", extra={"metric": name, "error": str(exc)})

    def _qualify(self, metric: str) -> str:
        trimmed = (metric or "").strip()
        if not trimmed:
            return self._namespace
        if trimmed.startswith(f"{self._namespace}."):
            return trimmed
        return f"{self._namespace}.{trimmed}"

    @staticmethod
    def _connect_statsd(config: Settings) -> Any | None:
        if StatsClient is None:
            logger.warning("statsd backend requested but the statsd package is not installed.")
            return None
        try:
            return StatsClient(host=config.metrics_statsd_host, port=config.metrics_statsd_port, prefix="")
        except OSError as exc:
            logger.warning("metrics.statsd_unavailable", extra={"error": str(exc)})
            return None


metrics = MetricsReporter()
