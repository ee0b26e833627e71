"""
Shared metrics configuration for the CodeAuth SDK.
"""

from prometheus_client import Counter, Histogram, CollectorRegistry
from typing import Dict, Any, Optional
import time
from contextlib import contextmanager


class MetricsCollector:
    """Prometheus metrics owned by one client instance."""

    def __init__(self, service_name: str = "codeauth", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        # A private registry per client keeps independent instances from colliding.
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up cache and transport metrics."""

        # Session cache metrics
        self._metrics["cache_hits_total"] = Counter(
            "codeauth_cache_hits_total",
            "Total session cache hits",
            registry=self.registry
        )

        self._metrics["cache_misses_total"] = Counter(
            "codeauth_cache_misses_total",
            "Total session cache misses",
            registry=self.registry
        )

        self._metrics["cache_evictions_total"] = Counter(
            "codeauth_cache_evictions_total",
            "Total session cache evictions",
            ["reason"],
            registry=self.registry
        )

        # Transport metrics
        self._metrics["requests_total"] = Counter(
            "codeauth_requests_total",
            "Total requests sent to the CodeAuth service",
            ["path", "outcome"],
            registry=self.registry
        )

        self._metrics["request_duration_seconds"] = Histogram(
            "codeauth_request_duration_seconds",
            "CodeAuth request duration in seconds",
            ["path"],
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def get_sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Read the current value of a sample from this collector's registry."""
        value = self.registry.get_sample_value(name, labels or {})
        return value or 0.0

    def record_cache_hit(self):
        self._metrics["cache_hits_total"].inc()

    def record_cache_miss(self):
        self._metrics["cache_misses_total"].inc()

    def record_cache_eviction(self, reason: str, count: int = 1):
        """Record entries dropped from the cache."""
        if count > 0:
            self._metrics["cache_evictions_total"].labels(reason=reason).inc(count)

    def record_request(self, path: str, outcome: str, duration: float):
        """Record one transport round trip."""
        self._metrics["requests_total"].labels(path=path, outcome=outcome).inc()
        self._metrics["request_duration_seconds"].labels(path=path).observe(duration)

    @contextmanager
    def time_request(self, path: str):
        """Time a request; the caller sets ``outcome["value"]`` before leaving the block."""
        start_time = time.time()
        outcome = {"value": "success"}
        try:
            yield outcome
        finally:
            self.record_request(path, outcome["value"], time.time() - start_time)
