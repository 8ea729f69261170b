"""
Feast Serving Client
====================

Retrieves online features from a Feast serving endpoint over gRPC.

Features:
- Plaintext, TLS or pre-built channels
- Optional bearer credential attached to every call
- Row-oriented requests and responses with per-field status
- Remote failures surfaced with the transport's status code

Usage:
    client = FeastClient.create("localhost", 6566)
    rows = client.get_online_features(
        ["driver:name", "driver:rating"],
        [Row.create().set("driver_id", 123), Row.create().set("driver_id", 456)],
    )
    for row in rows:
        print(row.get("driver:rating"), row.get_status("driver:rating"))
"""

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

import grpc

from feast_serving.client.channel import build_channel
from feast_serving.client.credentials import CallCredentials, CallCredentialsInterceptor, JwtCallCredentials
from feast_serving.client.security import SecurityConfig
from feast_serving.config import ClientSettings, get_settings
from feast_serving.errors import RemoteCallError
from feast_serving.features.references import parse_feature_refs
from feast_serving.features.row import FieldStatus, Row
from feast_serving.monitoring import track_rpc
from feast_serving.proto import serving_pb2
from feast_serving.proto.serving_pb2_grpc import ServingServiceStub

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT")


class FeastClient:
    """
    Client for the Feast online serving API.

    Holds one channel for its lifetime; calls are independent and blocking.
    When ``credentials`` is given every call carries them.
    """

    def __init__(
        self,
        channel: grpc.Channel,
        credentials: Optional[CallCredentials] = None,
        project: str = "",
    ):
        self._channel = channel
        self._credentials = credentials
        self.project = project

        if credentials is not None:
            channel = grpc.intercept_channel(channel, CallCredentialsInterceptor(credentials))
        self._stub = ServingServiceStub(channel)

    @classmethod
    def create(cls, host: str, port: int) -> "FeastClient":
        """Client over a plaintext channel without credentials."""
        return cls.create_secure(host, port, SecurityConfig())

    @classmethod
    def create_secure(cls, host: str, port: int, security_config: SecurityConfig) -> "FeastClient":
        """Client with TLS and/or call credentials as configured."""
        channel = build_channel(host, port, security_config)
        logger.info(
            f"Feast client created for {host}:{port} "
            f"(tls={security_config.tls_enabled}, authenticated={security_config.credentials is not None})"
        )
        return cls(channel, security_config.credentials)

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "FeastClient":
        """Client configured from ``ClientSettings`` (environment by default)."""
        settings = settings or get_settings()
        credentials = JwtCallCredentials(settings.auth_token) if settings.auth_token else None
        security_config = SecurityConfig(
            tls_enabled=settings.tls_enabled,
            certificate_path=settings.certificate_path,
            credentials=credentials,
        )
        client = cls.create_secure(settings.host, settings.port, security_config)
        client.project = settings.project
        return client

    @property
    def authenticated(self) -> bool:
        return self._credentials is not None

    def _call(self, method: str, rpc: Callable[..., ResponseT], request) -> ResponseT:
        with track_rpc(method):
            try:
                return rpc(request)
            except grpc.RpcError as e:
                error = RemoteCallError.from_rpc_error(method, e)
                logger.warning(f"Feast serving call failed: {error.message}")
                raise error from e

    def get_feast_serving_info(self) -> serving_pb2.GetFeastServingInfoResponse:
        """
        Obtain info about Feast serving.

        Returns:
            GetFeastServingInfoResponse with the serving version and type
        """
        return self._call(
            "GetFeastServingInfo",
            self._stub.GetFeastServingInfo,
            serving_pb2.GetFeastServingInfoRequest(),
        )

    def get_online_features(
        self,
        feature_refs: Sequence[str],
        rows: Sequence[Row],
        project: Optional[str] = None,
    ) -> List[Row]:
        """
        Get online features for a list of entity rows.

        Args:
            feature_refs: references as ``feature_table:feature`` or ``feature``
            rows: entity rows (key fields plus entity timestamp)
            project: project override; falls back to the client's project,
                and "" lets the server pick its default project

        Returns:
            One Row per input row, in input order, holding entity and feature
            fields with their FieldStatus

        Raises:
            InvalidArgumentError: malformed feature reference
            RemoteCallError: the serving call failed
        """
        features = [ref.to_proto() for ref in parse_feature_refs(feature_refs)]

        entity_refs = set()
        entity_rows = []
        for row in rows:
            fields = row.get_fields()
            entity_refs.update(fields.keys())
            entity_rows.append(
                serving_pb2.GetOnlineFeaturesRequestV2.EntityRow(
                    timestamp=row.get_entity_timestamp(),
                    fields=fields,
                )
            )

        request = serving_pb2.GetOnlineFeaturesRequestV2(
            features=features,
            entity_rows=entity_rows,
            project=self.project if project is None else project,
        )
        logger.debug(
            f"Requesting {len(features)} features for {len(entity_rows)} rows "
            f"(entities={sorted(entity_refs)}, project='{request.project}')"
        )

        response = self._call("GetOnlineFeaturesV2", self._stub.GetOnlineFeaturesV2, request)

        results = [self._decode_field_values(field_values) for field_values in response.field_values]
        if len(results) != len(entity_rows):
            logger.warning(f"Feast serving returned {len(results)} rows for {len(entity_rows)} entity rows")
        return results

    @staticmethod
    def _decode_field_values(field_values) -> Row:
        row = Row.create()
        for name, value in field_values.fields.items():
            # Servers may omit the status of present values
            status = field_values.statuses.get(name, FieldStatus.PRESENT)
            row.set(name, value, status)
        return row

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> "FeastClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
