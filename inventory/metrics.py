"""
inventory/metrics.py - Prometheus 메트릭

CollectorMetrics마다 자체 CollectorRegistry를 가지므로 여러 수집기(및 테스트)가
카운터를 공유하지 않습니다.
"""

from __future__ import annotations

import logging

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)


class CollectorMetrics:
    """수집 사이클 메트릭

    Attributes:
        registry: prometheus registry holding the metrics
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.cycle_errors = Counter(
            "aic_cycle_errors_total",
            "Collection cycles that ended with an error",
            ["category"],
            registry=self.registry,
        )
        self.cycles = Counter(
            "aic_cycles_total",
            "Collection cycles run",
            ["status"],
            registry=self.registry,
        )
        self.cycle_duration = Histogram(
            "aic_cycle_duration_seconds",
            "Duration of collection cycles",
            registry=self.registry,
        )
        self.parts = Counter(
            "aic_parts_total",
            "Inventory parts written",
            ["entity_type"],
            registry=self.registry,
        )

    def record_error(self, category: str) -> None:
        """One cycle-level failure"""
        self.cycle_errors.labels(category=str(category)).inc()

    def record_cycle(self, status: str, duration: float) -> None:
        self.cycles.labels(status=str(status)).inc()
        self.cycle_duration.observe(duration)

    def record_parts(self, entity_type: str, count: int) -> None:
        if count > 0:
            self.parts.labels(entity_type=str(entity_type)).inc(count)

    def get(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Current value of a sample, 0.0 when it was never set"""
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0

    def start_server(self, port: int) -> None:
        """Serve the metrics over HTTP"""
        start_http_server(port, registry=self.registry)
        logger.info("Metrics available on :%d/metrics", port)
