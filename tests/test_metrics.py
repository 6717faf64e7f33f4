from __future__ import annotations

import logging

from prospector.config import Settings
from prospector.observability.metrics import MetricsReporter


class RecordingStatsd:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, float]] = []

    def incr(self, name: str, value: float, rate: float = 1.0) -> None:
        self.sent.append(("incr", name, value))

    def timing(self, name: str, value: float, rate: float = 1.0) -> None:
        self.sent.append(("timing", name, value))


def _settings(**overrides) -> Settings:
    values = {"environment": "test", "apollo_api_key": None, "metrics_sample_rate": 1.0}
    values.update(overrides)
    return Settings(**values)


def _logged_payloads(caplog) -> list[dict]:
    return [record.metrics for record in caplog.records if record.getMessage() == "prospector.metric"]


def test_metric_names_are_namespaced_once_and_tagged(caplog):
    reporter = MetricsReporter(_settings())

    with caplog.at_level(logging.DEBUG, logger="prospector.metrics"):
        reporter.increment("pipeline.source_fallback", tags={"reason": "empty_result"})
        reporter.timing("prospector.pipeline.latency_ms", 12.34567)

    payloads = _logged_payloads(caplog)
    assert payloads[0]["metric"] == "prospector.pipeline.source_fallback"
    assert payloads[0]["type"] == "counter"
    assert payloads[0]["tags"] == {"environment": "test", "lead_database": "sample", "reason": "empty_result"}
    assert payloads[1]["metric"] == "prospector.pipeline.latency_ms"
    assert payloads[1]["value"] == 12.3457


def test_lead_database_dimension_follows_apollo_key(caplog):
    reporter = MetricsReporter(_settings(apollo_api_key="key"))

    with caplog.at_level(logging.DEBUG, logger="prospector.metrics"):
        reporter.increment("apollo.search_fallback")

    assert _logged_payloads(caplog)[0]["tags"]["lead_database"] == "apollo"


def test_events_are_forwarded_to_statsd():
    statsd = RecordingStatsd()
    reporter = MetricsReporter(_settings(), statsd_client=statsd)

    reporter.increment("content.retry")
    reporter.timing("pipeline.latency_ms", 250.0)

    assert statsd.sent == [
        ("incr", "prospector.content.retry", 1.0),
        ("timing", "prospector.pipeline.latency_ms", 250.0),
    ]


def test_disabled_reporter_emits_nothing(caplog):
    statsd = RecordingStatsd()
    reporter = MetricsReporter(_settings(metrics_disable=True), statsd_client=statsd)

    with caplog.at_level(logging.DEBUG, logger="prospector.metrics"):
        reporter.increment("content.retry")

    assert statsd.sent == []
    assert _logged_payloads(caplog) == []
