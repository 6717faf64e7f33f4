from __future__ import annotations

from typing import Any


class StubMetrics:
    """Test double that captures emitted metrics for assertions."""

    def __init__(self) -> None:
        self.timing_calls: list[dict[str, Any]] = []
        self.increment_calls: list[dict[str, Any]] = []

    def timing(self, metric: str, value: float, *, tags: dict[str, Any] | None = None) -> None:
        self.timing_calls.append({"metric": metric, "value": value, "tags": tags or {}})

    def increment(
        self, metric: str, value: float = 1.0, *, tags: dict[str, Any] | None = None
    ) -> None:
        self.increment_calls.append({"metric": metric, "value": value, "tags": tags or {}})

    def count(self, metric: str) -> int:
        return sum(1 for call in self.increment_calls if call["metric"] == metric)
