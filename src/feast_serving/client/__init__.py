"""
Feast Serving Client
====================

Usage:
    from feast_serving.client import FeastClient, SecurityConfig, JwtCallCredentials

    client = FeastClient.create_secure(
        "serving.internal", 6566,
        SecurityConfig(tls_enabled=True, credentials=JwtCallCredentials(token)),
    )
"""

from feast_serving.client.channel import build_channel
from feast_serving.client.credentials import (
    CallCredentials,
    CallCredentialsInterceptor,
    JwtCallCredentials,
)
from feast_serving.client.feast_client import FeastClient
from feast_serving.client.security import SecurityConfig

__all__ = [
    "FeastClient",
    "SecurityConfig",
    "CallCredentials",
    "CallCredentialsInterceptor",
    "JwtCallCredentials",
    "build_channel",
]
