"""Prometheus metrics for the export worker.

Job code talks to a small MetricsSink interface (increment / observe /
gauge) so it can be tested without a live registry. PrometheusMetricsSink
backs that interface with prometheus_client collectors.
"""

from typing import Literal, Protocol

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram
from prometheus_client import start_http_server

from export_worker.observability.logging import get_logger

logger = get_logger(__name__)

MetricUnit = Literal["milliseconds", "records"]

# Batch export queue metrics
BATCH_EXPORT_QUEUE_REQUEST = "batch_export_queue_request"
BATCH_EXPORT_QUEUE_WAIT_TIME = "batch_export_queue_wait_time"
BATCH_EXPORT_QUEUE_PROCESSING_TIME = "batch_export_queue_processing_time"
BATCH_EXPORT_QUEUE_LENGTH = "batch_export_queue_length"

# Exports queue for seconds to minutes and run for up to an hour
MILLISECOND_BUCKETS: tuple[float, ...] = (
    10,
    50,
    100,
    250,
    500,
    1_000,
    2_500,
    5_000,
    10_000,
    30_000,
    60_000,
    300_000,
    900_000,
    3_600_000,
)

METRIC_DESCRIPTIONS: dict[str, str] = {
    BATCH_EXPORT_QUEUE_REQUEST: "Batch export jobs received by the worker",
    BATCH_EXPORT_QUEUE_WAIT_TIME: "Time batch export jobs spent queued before execution",
    BATCH_EXPORT_QUEUE_PROCESSING_TIME: "Time spent executing successful batch export jobs",
    BATCH_EXPORT_QUEUE_LENGTH: "Batch export jobs waiting in the queue",
}


class MetricsSink(Protocol):
    """Destination for counter, histogram and gauge observations."""

    def increment(self, name: str, value: float = 1) -> None: ...

    def observe(self, name: str, value: float, unit: MetricUnit) -> None: ...

    def gauge(self, name: str, value: float, unit: MetricUnit) -> None: ...


class PrometheusMetricsSink:
    """MetricsSink backed by prometheus_client.

    Collectors are created on first use and registered in the given
    registry. The unit becomes the exported name suffix, so
    ``observe("batch_export_queue_wait_time", 12, "milliseconds")`` feeds
    ``batch_export_queue_wait_time_milliseconds``. Negative values are
    clamped to zero.
    """

    def __init__(
        self,
        registry: CollectorRegistry = REGISTRY,
        buckets: tuple[float, ...] = MILLISECOND_BUCKETS,
    ) -> None:
        self._registry = registry
        self._buckets = buckets
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}
        self._gauges: dict[str, Gauge] = {}

    def increment(self, name: str, value: float = 1) -> None:
        counter = self._counters.get(name)
        if counter is None:
            self._check_unclaimed(name, self._histograms, self._gauges)
            counter = Counter(
                name,
                METRIC_DESCRIPTIONS.get(name, name),
                registry=self._registry,
            )
            self._counters[name] = counter
        counter.inc(max(0.0, value))

    def observe(self, name: str, value: float, unit: MetricUnit) -> None:
        histogram = self._histograms.get(name)
        if histogram is None:
            self._check_unclaimed(name, self._counters, self._gauges)
            histogram = Histogram(
                name,
                METRIC_DESCRIPTIONS.get(name, name),
                unit=unit,
                buckets=self._buckets,
                registry=self._registry,
            )
            self._histograms[name] = histogram
        histogram.observe(max(0.0, value))

    def gauge(self, name: str, value: float, unit: MetricUnit) -> None:
        gauge = self._gauges.get(name)
        if gauge is None:
            self._check_unclaimed(name, self._counters, self._histograms)
            gauge = Gauge(
                name,
                METRIC_DESCRIPTIONS.get(name, name),
                unit=unit,
                registry=self._registry,
            )
            self._gauges[name] = gauge
        gauge.set(max(0.0, value))

    @staticmethod
    def _check_unclaimed(name: str, *others: dict[str, object]) -> None:
        for collectors in others:
            if name in collectors:
                raise ValueError(f"Metric {name!r} is already registered with another type")


def start_metrics_server(port: int, registry: CollectorRegistry = REGISTRY) -> None:
    """Expose the registry on http://0.0.0.0:{port}/metrics from a daemon thread."""
    start_http_server(port, registry=registry)
    logger.info("metrics_server_started", port=port)
