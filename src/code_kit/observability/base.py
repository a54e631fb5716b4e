# src/code_kit/observability/base.py

"""Metrics seam for code-kit.

Clients record completion and stream latencies and counters, and
`run_with_retry` counts retry attempts, through a `MetricsHook`. Metric
names live in `code_kit.observability.names`. Nothing is recorded unless a
hook is injected; the default is `NoOpMetricsHook`.
"""

import logging
from typing import Protocol

Labels = dict[str, str] | None


class MetricsHook(Protocol):
    """Receives metrics from clients and the retry executor.

    Implementations adapt to a concrete backend (Prometheus, StatsD, ...).
    Calls are made inline on the request path and must not raise.
    """

    def record_latency(self, name: str, value_ms: float, labels: Labels = None) -> None:
        """Record one duration, in milliseconds."""
        ...

    def increment(self, name: str, value: int = 1, labels: Labels = None) -> None:
        """Add `value` to a counter: requests, errors, tokens, fragments, retries."""
        ...


class NoOpMetricsHook:
    """Default hook. Discards everything."""

    def record_latency(self, name: str, value_ms: float, labels: Labels = None) -> None:
        pass

    def increment(self, name: str, value: int = 1, labels: Labels = None) -> None:
        pass


class LoggingMetricsHook:
    """Writes each metric as a DEBUG record, for local runs without a backend."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("code_kit.metrics")

    def record_latency(self, name: str, value_ms: float, labels: Labels = None) -> None:
        self._logger.debug("%s %.1fms %s", name, value_ms, labels or {})

    def increment(self, name: str, value: int = 1, labels: Labels = None) -> None:
        self._logger.debug("%s +%d %s", name, value, labels or {})
