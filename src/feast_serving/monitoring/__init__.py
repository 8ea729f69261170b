"""
Client Monitoring
=================

Usage:
    from feast_serving.monitoring import track_rpc
"""

from feast_serving.monitoring.metrics import (
    get_or_create_counter,
    get_or_create_histogram,
    metrics_enabled,
    track_rpc,
    RPC_REQUESTS,
    RPC_LATENCY,
    LATENCY_BUCKETS,
    REQUESTS_TOTAL,
    REQUEST_LATENCY,
)

__all__ = [
    "get_or_create_counter",
    "get_or_create_histogram",
    "metrics_enabled",
    "track_rpc",
    "RPC_REQUESTS",
    "RPC_LATENCY",
    "LATENCY_BUCKETS",
    "REQUESTS_TOTAL",
    "REQUEST_LATENCY",
]
