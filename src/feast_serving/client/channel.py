"""
Channel Construction
====================

Builds the gRPC channel a client talks to Feast serving over.
"""

import logging
from typing import Optional

import grpc

from feast_serving.client.security import SecurityConfig

logger = logging.getLogger(__name__)


def _read_certificate(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def build_channel(host: str, port: int, security_config: Optional[SecurityConfig] = None) -> grpc.Channel:
    """
    Open a channel to ``host:port``.

    Plaintext unless ``security_config.tls_enabled``; with TLS the root
    certificate at ``certificate_path`` is trusted, or the system roots when
    no path is given.
    """
    security_config = security_config or SecurityConfig()
    target = f"{host}:{port}"

    if not security_config.tls_enabled:
        logger.info(f"Opening plaintext channel to {target}")
        return grpc.insecure_channel(target)

    root_certificates = None
    if security_config.certificate_path:
        root_certificates = _read_certificate(security_config.certificate_path)

    logger.info(f"Opening TLS channel to {target}")
    channel_credentials = grpc.ssl_channel_credentials(root_certificates=root_certificates)
    return grpc.secure_channel(target, channel_credentials)
