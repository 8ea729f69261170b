"""
Feast Serving Client
====================

Python client for the Feast online serving API.

Usage:
    from feast_serving import FeastClient, Row

    client = FeastClient.create("localhost", 6566)
    rows = client.get_online_features(
        ["driver:name", "driver:rating"],
        [Row.create().set("driver_id", 123)],
        project="driver_project",
    )
"""

from feast_serving.client import (
    FeastClient,
    SecurityConfig,
    CallCredentials,
    JwtCallCredentials,
)
from feast_serving.errors import (
    FeastClientError,
    InvalidArgumentError,
    UnsupportedTypeError,
    RemoteCallError,
)
from feast_serving.features import FeatureReference, FieldStatus, Row, parse_feature_refs

__version__ = "0.1.0"

__all__ = [
    # Client
    "FeastClient",
    "SecurityConfig",
    "CallCredentials",
    "JwtCallCredentials",
    # Data
    "Row",
    "FieldStatus",
    "FeatureReference",
    "parse_feature_refs",
    # Errors
    "FeastClientError",
    "InvalidArgumentError",
    "UnsupportedTypeError",
    "RemoteCallError",
]
