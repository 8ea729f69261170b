"""
Client Error Handling
=====================

Exception hierarchy for the Feast serving client.

Usage:
    from feast_serving.errors import (
        FeastClientError,
        InvalidArgumentError,
        UnsupportedTypeError,
        RemoteCallError,
    )

    try:
        rows = client.get_online_features(["driver:rating"], [row])
    except RemoteCallError as e:
        logger.warning(f"Serving call failed: {e.code()} {e.details()}")
"""

from typing import Optional, Dict, Any

import grpc


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================

class FeastClientError(Exception):
    """Base client error class."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class InvalidArgumentError(FeastClientError, ValueError):
    """Malformed input, e.g. a feature reference without a feature name."""

    def __init__(self, message: str = "Invalid argument", **context):
        super().__init__(
            message=message,
            error_code="INVALID_ARGUMENT",
            context=context,
        )


class UnsupportedTypeError(FeastClientError, TypeError):
    """A Python value has no mapping into the wire Value union."""

    def __init__(self, message: str = "Unsupported value type", value_type: str = None, **context):
        if value_type:
            context["value_type"] = value_type
        super().__init__(
            message=message,
            error_code="UNSUPPORTED_TYPE",
            context=context,
        )


class RemoteCallError(FeastClientError, grpc.RpcError):
    """
    A serving RPC finished with a non-OK status.

    Carries the transport's status code and message unchanged and stays a
    ``grpc.RpcError`` so callers catching the transport error keep working.
    """

    def __init__(self, method: str, code: grpc.StatusCode, message: str):
        self._code = code
        self._details = message
        super().__init__(
            message=f"{method} failed with {code.name}: {message}",
            error_code="REMOTE_CALL_FAILED",
            context={"method": method, "status_code": code.name},
        )

    @classmethod
    def from_rpc_error(cls, method: str, error: grpc.RpcError) -> "RemoteCallError":
        """Build from a raised ``grpc.RpcError`` (which is also a ``grpc.Call``)."""
        code = error.code() if hasattr(error, "code") else None
        details = error.details() if hasattr(error, "details") else str(error)
        return cls(method=method, code=code or grpc.StatusCode.UNKNOWN, message=details or "")

    def code(self) -> grpc.StatusCode:
        return self._code

    def details(self) -> str:
        return self._details
