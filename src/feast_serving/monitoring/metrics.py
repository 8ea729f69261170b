"""
Client Metrics
==============

Prometheus metrics for outgoing serving RPCs.

This module provides:
1. Safe metric creation helpers (avoid duplicate registration errors)
2. Module-level RPC collectors, registered once at import
3. ``track_rpc`` context manager recording count and latency per call

Recording is skipped when ``PROMETHEUS_METRICS=false``.

Usage:
    from feast_serving.monitoring import track_rpc

    with track_rpc("GetOnlineFeaturesV2"):
        response = stub.GetOnlineFeaturesV2(request)
"""

import os
import time
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from prometheus_client import REGISTRY, Counter, Histogram

logger = logging.getLogger(__name__)

REQUESTS_TOTAL = "feast_client_requests_total"
REQUEST_LATENCY = "feast_client_request_latency_seconds"

# Latency buckets (in seconds)
LATENCY_BUCKETS = [0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]


def metrics_enabled() -> bool:
    return os.getenv("PROMETHEUS_METRICS", "true").lower() == "true"


# =============================================================================
# SAFE METRIC CREATION HELPERS
# =============================================================================

def get_or_create_counter(
    name: str,
    description: str,
    labelnames: List[str],
) -> Counter:
    """
    Get existing counter or create new one.
    Safely handles duplicate registration errors from Prometheus.
    """
    try:
        return Counter(name, description, labelnames)
    except ValueError:
        # Counters register under the name with and without the _total suffix
        return REGISTRY._names_to_collectors.get(name)


def get_or_create_histogram(
    name: str,
    description: str,
    labelnames: List[str],
    buckets: Optional[List[float]] = None,
) -> Histogram:
    """
    Get existing histogram or create new one.
    Safely handles duplicate registration errors from Prometheus.
    """
    try:
        if buckets:
            return Histogram(name, description, labelnames, buckets=buckets)
        return Histogram(name, description, labelnames)
    except ValueError:
        return REGISTRY._names_to_collectors.get(name)


# =============================================================================
# RPC METRICS
# =============================================================================

RPC_REQUESTS = get_or_create_counter(
    REQUESTS_TOTAL,
    "Serving RPCs issued by the Feast client",
    ["method", "status"],
)

RPC_LATENCY = get_or_create_histogram(
    REQUEST_LATENCY,
    "Serving RPC latency in seconds",
    ["method"],
    buckets=LATENCY_BUCKETS,
)


@contextmanager
def track_rpc(method: str) -> Iterator[None]:
    """
    Record one RPC: count by method/status and latency by method.

    Exceptions from the wrapped block are re-raised after recording.
    """
    if not metrics_enabled():
        yield
        return

    start_time = time.time()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.time() - start_time

        try:
            RPC_REQUESTS.labels(method=method, status=status).inc()
        except Exception as e:
            logger.debug(f"Failed to increment counter: {e}")

        try:
            RPC_LATENCY.labels(method=method).observe(duration)
        except Exception as e:
            logger.debug(f"Failed to observe histogram: {e}")
