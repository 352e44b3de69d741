"""
Prometheus metrics for the ingest pipeline, registered in the global REGISTRY.
Import this module at app startup; call serve_metrics() to expose them.
"""

from typing import Optional

from loguru import logger
from prometheus_client import Counter, Gauge, Histogram, start_http_server


# --- Batcher Metrics ---

INGEST_MESSAGES_TOTAL = Counter(
    "ingest_messages_total",
    "Messages received from the subject, by outcome",
    ["outcome"],  # accepted | invalid_utf8 | filtered
)

INGEST_BUFFERED_ROWS = Gauge(
    "ingest_buffered_rows",
    "Rows currently held in the batch buffer",
)

# --- Flush Metrics ---

INGEST_FLUSHES_TOTAL = Counter(
    "ingest_flushes_total",
    "Flush attempts, by trigger and status",
    ["trigger", "status"],
)

INGEST_FLUSH_LATENCY_MS = Histogram(
    "ingest_flush_latency_ms",
    "Bulk insert latency in milliseconds",
    ["trigger"],
    buckets=[1, 2.5, 5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

INGEST_FLUSH_ROWS = Histogram(
    "ingest_flush_rows",
    "Rows per flush attempt",
    buckets=[1, 5, 10, 25, 50, 100, 200, 500, 1000, 5000],
)


class MetricsRegistry:
    """Centralized access to ingest metrics.

    Used by the Batcher and FlushExecutor to record metrics.
    """

    messages_total = INGEST_MESSAGES_TOTAL
    buffered_rows = INGEST_BUFFERED_ROWS
    flushes_total = INGEST_FLUSHES_TOTAL
    flush_latency_ms = INGEST_FLUSH_LATENCY_MS
    flush_rows = INGEST_FLUSH_ROWS


# Singleton instance
metrics_registry = MetricsRegistry()


def serve_metrics(port: Optional[int]) -> bool:
    """Start the Prometheus exposition endpoint if a port is configured."""
    if not port:
        return False
    start_http_server(port)
    logger.info(f"Prometheus metrics exposed on :{port}/metrics")
    return True
