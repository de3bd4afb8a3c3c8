"""In-process store of per-call generation metrics."""

import logging
from collections import Counter
from typing import Any

from generationproxy.models.metrics import GenerationMetrics

logger = logging.getLogger(__name__)


class MetricsService:
    """Collects GenerationMetrics from GenerationService, keyed by feature name."""

    def __init__(self):
        self._records: list[tuple[str | None, GenerationMetrics]] = []

    def record(self, metrics: GenerationMetrics, service_name: str | None = None) -> None:
        """
        Record a generation metrics object.

        Args:
            metrics: The metrics to record
            service_name: Optional feature name for categorization
        """
        self._records.append((service_name, metrics))
        logger.debug(
            f"📊 [MetricsService] Recorded metrics for {service_name or 'unknown'}: "
            f"duration={metrics.duration_ms}ms, attempts={metrics.attempts}, success={metrics.success}"
        )

    def get_all(self, service_name: str | None = None) -> list[GenerationMetrics]:
        """Recorded metrics in call order, optionally only those of one feature."""
        return [m for name, m in self._records if service_name is None or name == service_name]

    def clear(self) -> None:
        self._records.clear()

    def failures_by_kind(self) -> dict[str, int]:
        """Terminal failure counts keyed by ErrorKind value."""
        counts = Counter(m.error_kind.value for _, m in self._records if m.error_kind is not None)
        return dict(counts)

    def summary(self, service_name: str | None = None) -> dict[str, Any]:
        """Call, failure and retry totals plus average duration."""
        metrics = self.get_all(service_name)
        total_duration = sum(m.duration_ms for m in metrics)
        return {
            "count": len(metrics),
            "failure_count": sum(1 for m in metrics if not m.success),
            "retry_total": sum(m.retry_count for m in metrics),
            "total_duration_ms": total_duration,
            "avg_duration_ms": total_duration / len(metrics) if metrics else 0,
        }
