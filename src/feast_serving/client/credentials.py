"""
Call Credentials
================

Attaches a pre-built credential to every outgoing call.

The client holds an optional credential object and wraps its channel with
``CallCredentialsInterceptor``; each call then carries the credential's
metadata. Token acquisition is the caller's job.

Usage:
    credentials = JwtCallCredentials(token)
    channel = grpc.intercept_channel(raw_channel, CallCredentialsInterceptor(credentials))
"""

import collections
from abc import ABC, abstractmethod
from typing import List, Tuple

import grpc

Metadata = List[Tuple[str, str]]

AUTHORIZATION_HEADER = "authorization"


class CallCredentials(ABC):
    """Credential whose metadata is sent with every call."""

    @abstractmethod
    def metadata(self) -> Metadata:
        """Metadata entries (lower-case keys) to attach."""
        pass


class JwtCallCredentials(CallCredentials):
    """Sends a pre-issued JWT as ``authorization: Bearer <token>``."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("JWT credentials require a non-empty token")
        self._token = token

    def metadata(self) -> Metadata:
        return [(AUTHORIZATION_HEADER, f"Bearer {self._token}")]

    def __repr__(self) -> str:
        return "JwtCallCredentials(token=***)"


class _ClientCallDetails(
    collections.namedtuple(
        "_ClientCallDetails",
        ("method", "timeout", "metadata", "credentials", "wait_for_ready", "compression"),
    ),
    grpc.ClientCallDetails,
):
    pass


class CallCredentialsInterceptor(grpc.UnaryUnaryClientInterceptor):
    """Adds the credential's metadata to each unary call, keeping existing entries."""

    def __init__(self, credentials: CallCredentials):
        self._credentials = credentials

    def intercept_unary_unary(self, continuation, client_call_details, request):
        metadata = list(client_call_details.metadata or [])
        metadata.extend(self._credentials.metadata())

        new_details = _ClientCallDetails(
            client_call_details.method,
            client_call_details.timeout,
            metadata,
            client_call_details.credentials,
            getattr(client_call_details, "wait_for_ready", None),
            getattr(client_call_details, "compression", None),
        )
        return continuation(new_details, request)
