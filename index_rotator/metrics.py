"""
Prometheus metrics for index rotation
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable

from prometheus_client import Counter, Histogram, start_http_server

from index_rotator import get_env_int

logger = logging.getLogger(__name__)

# Metrics port for pull mode
METRICS_PORT = get_env_int("METRICS_PORT", 8000)

# Lazy initialization flag
_initialized = False
_metrics = {}


def _init_metrics():
    """Register Prometheus collectors once per process"""
    global _initialized

    if _initialized:
        return

    _metrics["primary_sets"] = Counter(
        "index_rotator_primary_sets_total",
        "Total primary pointer writes",
        ["prefix"]
    )
    _metrics["secondaries_created"] = Counter(
        "index_rotator_secondaries_created_total",
        "Total secondary entries created",
        ["prefix"]
    )
    _metrics["primary_read_retries"] = Counter(
        "index_rotator_primary_read_retries_total",
        "Primary reads retried after a transient failure",
        ["prefix"]
    )
    _metrics["copy_failures"] = Counter(
        "index_rotator_copy_failures_total",
        "Primary to secondary copies that exhausted retries",
        ["prefix"]
    )
    _metrics["secondaries_deleted"] = Counter(
        "index_rotator_secondaries_deleted_total",
        "Secondary indexes handled by pruning",
        ["prefix", "status"]  # deleted, missing, protected
    )
    _metrics["prune_latency"] = Histogram(
        "index_rotator_prune_latency_seconds",
        "Pruning run latency",
        buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
    )

    _initialized = True


def start_metrics_server(port: int = None):
    """Start Prometheus metrics HTTP server (for pull mode)"""
    _init_metrics()
    port = port or METRICS_PORT
    start_http_server(port)
    logger.info("Metrics server started on port %d", port)


def inc_primary_set(prefix: str):
    """Increment primary write counter"""
    _init_metrics()
    _metrics["primary_sets"].labels(prefix=prefix).inc()


def inc_secondary_created(prefix: str):
    """Increment secondary entry counter"""
    _init_metrics()
    _metrics["secondaries_created"].labels(prefix=prefix).inc()


def inc_primary_read_retry(prefix: str):
    """Increment retry counter"""
    _init_metrics()
    _metrics["primary_read_retries"].labels(prefix=prefix).inc()


def inc_copy_failure(prefix: str):
    """Increment exhausted-retry counter"""
    _init_metrics()
    _metrics["copy_failures"].labels(prefix=prefix).inc()


def inc_secondary_deleted(prefix: str, status: str = "deleted"):
    """Increment pruning counter (status: deleted/missing/protected)"""
    _init_metrics()
    _metrics["secondaries_deleted"].labels(prefix=prefix, status=status).inc()


def observe_prune_latency(seconds: float):
    """Record pruning latency"""
    _init_metrics()
    _metrics["prune_latency"].observe(seconds)


@contextmanager
def track_latency(observe_fn: Callable[[float], None]):
    """Context manager to track operation latency"""
    start = time.time()
    try:
        yield
    finally:
        observe_fn(time.time() - start)
