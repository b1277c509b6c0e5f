"""Prometheus metrics for monitoring the video feed collector."""

import logging
import time
from typing import Optional

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

BATCHES_SERVED = Counter(
    "video_feed_batches_served_total",
    "Number of non-empty batches returned to callers",
    ["category", "origin"],
)

FETCH_ATTEMPTS = Counter(
    "video_feed_fetch_attempts_total",
    "Number of listing fetch attempts by outcome",
    ["outcome"],
)

RECORDS_REJECTED = Counter(
    "video_feed_records_rejected_total",
    "Number of listing items dropped before reaching a batch",
    ["reason"],
)

EXHAUSTED_FETCHES = Counter(
    "video_feed_exhausted_fetches_total",
    "Number of fetches that returned nothing after spending the retry budget",
    ["category"],
)

RETRY_COUNT = Gauge(
    "video_feed_retry_count",
    "Consecutive failed or empty attempts since the last served batch",
)

CACHE_ENTRIES = Gauge(
    "video_feed_cache_entries",
    "Number of batches held in the response cache",
)

REQUEST_DURATION = Histogram(
    "video_feed_request_duration_seconds",
    "Duration of listing requests in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)


class PrometheusExporter:
    """Prometheus metrics exporter for the video feed collector."""

    def __init__(self, port: int = 8000):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
        """
        self.port = port
        self.server_started = False

    def start_server(self) -> None:
        """Start the Prometheus metrics server."""
        if not self.server_started:
            try:
                start_http_server(self.port)
                self.server_started = True
                logger.info(f"Started Prometheus metrics server on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus metrics server: {str(e)}")

    def record_batch_served(self, category: str, origin: str) -> None:
        """
        Record a batch handed to the caller.

        Args:
            category: Active category
            origin: 'cache' or 'network'
        """
        BATCHES_SERVED.labels(category=category, origin=origin).inc()

    def record_fetch_attempt(self, outcome: str) -> None:
        """
        Record one listing request and how it ended.

        Args:
            outcome: e.g. 'success', 'timeout', 'not_found', 'http_error', 'malformed', 'no_content'
        """
        FETCH_ATTEMPTS.labels(outcome=outcome).inc()

    def record_rejected(self, reason: str, count: int = 1) -> None:
        if count > 0:
            RECORDS_REJECTED.labels(reason=reason).inc(count)

    def record_exhausted(self, category: str) -> None:
        EXHAUSTED_FETCHES.labels(category=category).inc()

    def set_retry_count(self, count: int) -> None:
        RETRY_COUNT.set(count)

    def set_cache_entries(self, count: int) -> None:
        CACHE_ENTRIES.set(count)

    def time_request(self) -> "RequestTimer":
        """
        Create a context manager for timing listing requests.

        Returns:
            RequestTimer context manager
        """
        return RequestTimer()


class RequestTimer:
    """Context manager for timing listing requests."""

    def __init__(self):
        self.start_time: Optional[float] = None

    def __enter__(self) -> "RequestTimer":
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is not None:
            REQUEST_DURATION.observe(time.time() - self.start_time)
