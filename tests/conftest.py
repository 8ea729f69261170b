"""
Shared test fixtures for the Feast serving client.
"""

import os
import sys
from concurrent import futures
from types import SimpleNamespace

import grpc
import pytest
from google.protobuf.timestamp_pb2 import Timestamp

# Make the src/ layout importable without an installed package
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from feast_serving.config import get_settings
from feast_serving.proto import serving_pb2, serving_pb2_grpc

AUTH_TOKEN = "test token"

Value = serving_pb2.Value
Response = serving_pb2.GetOnlineFeaturesResponse


# =============================================================================
# ENVIRONMENT SETUP
# =============================================================================

@pytest.fixture(autouse=True)
def mock_environment(monkeypatch):
    """Isolate tests from host FEAST_SERVING_* settings and disable metrics."""
    for key in list(os.environ):
        if key.startswith("FEAST_SERVING_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("PROMETHEUS_METRICS", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# SAMPLE MESSAGES
# =============================================================================

def make_driver_request() -> serving_pb2.GetOnlineFeaturesRequestV2:
    """The request the driver scenario must serialize to."""
    return serving_pb2.GetOnlineFeaturesRequestV2(
        features=[
            serving_pb2.FeatureReferenceV2(feature_table="driver", name="name"),
            serving_pb2.FeatureReferenceV2(feature_table="driver", name="rating"),
            serving_pb2.FeatureReferenceV2(feature_table="driver", name="null_value"),
        ],
        entity_rows=[
            serving_pb2.GetOnlineFeaturesRequestV2.EntityRow(
                timestamp=Timestamp(seconds=100),
                fields={"driver_id": Value(int32_val=1)},
            )
        ],
        project="driver_project",
    )


def make_driver_response() -> serving_pb2.GetOnlineFeaturesResponse:
    return Response(
        field_values=[
            Response.FieldValues(
                fields={
                    "driver_id": Value(int32_val=1),
                    "driver:name": Value(string_val="david"),
                    "driver:rating": Value(int32_val=3),
                    "driver:null_value": Value(),
                },
                statuses={
                    "driver_id": Response.PRESENT,
                    "driver:name": Response.PRESENT,
                    "driver:rating": Response.PRESENT,
                    "driver:null_value": Response.NULL_VALUE,
                },
            )
        ]
    )


@pytest.fixture
def auth_token():
    return AUTH_TOKEN


@pytest.fixture
def driver_request():
    return make_driver_request()


# =============================================================================
# IN-PROCESS SERVING SERVER
# =============================================================================

class FakeServingServicer(serving_pb2_grpc.ServingServiceServicer):
    """
    Answers GetOnlineFeaturesV2 with ``response`` when the request equals
    ``expected_request`` (any request when it is None), FAILED_PRECONDITION
    otherwise.
    """

    def __init__(self):
        self.expected_request = make_driver_request()
        self.response = make_driver_response()
        self.requests = []

    def GetFeastServingInfo(self, request, context):
        return serving_pb2.GetFeastServingInfoResponse(
            version="0.9.5",
            type=serving_pb2.FEAST_SERVING_TYPE_ONLINE,
        )

    def GetOnlineFeaturesV2(self, request, context):
        self.requests.append(request)
        if self.expected_request is not None and request != self.expected_request:
            context.abort(grpc.StatusCode.FAILED_PRECONDITION, "Unexpected request")
        return self.response


class AuthCheckInterceptor(grpc.ServerInterceptor):
    """Records whether a call carried the bearer token; rejects it when required."""

    def __init__(self, require_auth: bool = False):
        self.require_auth = require_auth
        self.authenticated = False

        def deny(request, context):
            context.abort(grpc.StatusCode.UNAUTHENTICATED, "Missing or invalid token")

        self._deny_handler = grpc.unary_unary_rpc_method_handler(deny)

    def intercept_service(self, continuation, handler_call_details):
        metadata = dict(handler_call_details.invocation_metadata or ())
        if metadata.get("authorization") == f"Bearer {AUTH_TOKEN}":
            self.authenticated = True
        elif self.require_auth:
            return self._deny_handler
        return continuation(handler_call_details)


@pytest.fixture
def start_serving_server():
    """Factory starting in-process servers on free ports; stopped at teardown."""
    servers = []

    def _start(require_auth: bool = False) -> SimpleNamespace:
        servicer = FakeServingServicer()
        interceptor = AuthCheckInterceptor(require_auth=require_auth)
        server = grpc.server(futures.ThreadPoolExecutor(max_workers=4), interceptors=[interceptor])
        serving_pb2_grpc.add_ServingServiceServicer_to_server(servicer, server)
        port = server.add_insecure_port("localhost:0")
        server.start()
        servers.append(server)
        return SimpleNamespace(
            host="localhost",
            port=port,
            target=f"localhost:{port}",
            servicer=servicer,
            auth=interceptor,
        )

    yield _start

    for server in servers:
        server.stop(None)


@pytest.fixture
def serving_server(start_serving_server):
    return start_serving_server()
