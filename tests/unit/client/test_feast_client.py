"""
Unit tests for feast_serving.client.feast_client.

Runs FeastClient against an in-process gRPC server (see conftest) to check
request serialization, response decoding, credential attachment and error
propagation.
"""

import grpc
import pytest

from feast_serving.client import FeastClient, JwtCallCredentials, SecurityConfig
from feast_serving.config import ClientSettings
from feast_serving.errors import InvalidArgumentError, RemoteCallError
from feast_serving.features import FieldStatus, Row
from feast_serving.proto import serving_pb2

Value = serving_pb2.Value
Response = serving_pb2.GetOnlineFeaturesResponse

DRIVER_FEATURES = ["driver:name", "driver:rating", "driver:null_value"]


def driver_rows():
    return [Row.create().set("driver_id", 1).set_entity_timestamp(100)]


@pytest.fixture
def client(serving_server):
    with FeastClient(grpc.insecure_channel(serving_server.target)) as client:
        yield client


@pytest.fixture
def authenticated_client(serving_server, auth_token):
    channel = grpc.insecure_channel(serving_server.target)
    with FeastClient(channel, JwtCallCredentials(auth_token)) as client:
        yield client


def assert_driver_rows(rows):
    assert len(rows) == 1
    assert rows[0].get_fields() == {
        "driver_id": Value(int32_val=1),
        "driver:name": Value(string_val="david"),
        "driver:rating": Value(int32_val=3),
        "driver:null_value": Value(),
    }
    assert rows[0].get_statuses() == {
        "driver_id": FieldStatus.PRESENT,
        "driver:name": FieldStatus.PRESENT,
        "driver:rating": FieldStatus.PRESENT,
        "driver:null_value": FieldStatus.NULL_VALUE,
    }


class TestGetOnlineFeatures:
    """Tests for FeastClient.get_online_features."""

    def test_get_online_features(self, client, serving_server):
        rows = client.get_online_features(DRIVER_FEATURES, driver_rows(), "driver_project")

        assert_driver_rows(rows)
        assert len(serving_server.servicer.requests) == 1

    def test_request_serialization(self, client, serving_server, driver_request):
        serving_server.servicer.expected_request = None

        client.get_online_features(DRIVER_FEATURES, driver_rows(), "driver_project")

        assert serving_server.servicer.requests[0] == driver_request

    def test_default_project_is_empty(self, client, serving_server):
        serving_server.servicer.expected_request = None

        client.get_online_features(["rating"], driver_rows())

        request = serving_server.servicer.requests[0]
        assert request.project == ""
        assert request.features[0] == serving_pb2.FeatureReferenceV2(name="rating")

    def test_client_project_used_when_not_overridden(self, serving_server):
        serving_server.servicer.expected_request = None
        with FeastClient(grpc.insecure_channel(serving_server.target), project="driver_project") as client:
            client.get_online_features(["driver:rating"], driver_rows())
            client.get_online_features(["driver:rating"], driver_rows(), project="other")

        assert [r.project for r in serving_server.servicer.requests] == ["driver_project", "other"]

    def test_rows_keep_input_order(self, client, serving_server):
        serving_server.servicer.expected_request = None
        serving_server.servicer.response = Response(
            field_values=[
                Response.FieldValues(fields={"driver_id": Value(int32_val=i)}, statuses={"driver_id": Response.PRESENT})
                for i in (1, 2, 3)
            ]
        )
        rows = [Row.create().set("driver_id", i) for i in (1, 2, 3)]

        results = client.get_online_features(["driver:rating"], rows)

        assert [r.get("driver_id") for r in results] == [1, 2, 3]
        assert len(serving_server.servicer.requests[0].entity_rows) == 3

    def test_missing_status_decodes_as_present(self, client, serving_server):
        serving_server.servicer.expected_request = None
        serving_server.servicer.response = Response(
            field_values=[
                Response.FieldValues(
                    fields={"driver_id": Value(int32_val=1), "driver:rating": Value(int32_val=3)},
                    statuses={"driver:rating": Response.OUTSIDE_MAX_AGE},
                )
            ]
        )

        rows = client.get_online_features(["driver:rating"], driver_rows())

        assert rows[0].get_statuses() == {
            "driver_id": FieldStatus.PRESENT,
            "driver:rating": FieldStatus.OUTSIDE_MAX_AGE,
        }

    def test_not_found_status(self, client, serving_server):
        serving_server.servicer.expected_request = None
        serving_server.servicer.response = Response(
            field_values=[
                Response.FieldValues(
                    fields={"driver:rating": Value()},
                    statuses={"driver:rating": Response.NOT_FOUND},
                )
            ]
        )

        rows = client.get_online_features(["driver:rating"], driver_rows())

        assert rows[0].get_status("driver:rating") == FieldStatus.NOT_FOUND
        assert rows[0].get("driver:rating") is None

    def test_unrecognised_status_decodes_as_invalid(self, client, serving_server):
        serving_server.servicer.expected_request = None
        serving_server.servicer.response = Response(
            field_values=[
                Response.FieldValues(
                    fields={"driver_id": Value(int32_val=1), "driver:rating": Value(int32_val=3)},
                    statuses={"driver_id": Response.PRESENT, "driver:rating": 5},
                )
            ]
        )

        rows = client.get_online_features(["driver:rating"], driver_rows())

        assert rows[0].get_statuses() == {
            "driver_id": FieldStatus.PRESENT,
            "driver:rating": FieldStatus.INVALID,
        }
        assert rows[0].get("driver:rating") == 3

    def test_invalid_reference_fails_before_call(self, client, serving_server):
        with pytest.raises(InvalidArgumentError):
            client.get_online_features(["driver:"], driver_rows())

        assert serving_server.servicer.requests == []


class TestRemoteFailures:
    """Remote errors surface with the transport's code and message."""

    def test_failed_precondition_propagates(self, client):
        with pytest.raises(RemoteCallError) as exc_info:
            client.get_online_features(DRIVER_FEATURES, driver_rows(), "wrong_project")

        error = exc_info.value
        assert error.code() == grpc.StatusCode.FAILED_PRECONDITION
        assert error.details() == "Unexpected request"
        assert error.error_code == "REMOTE_CALL_FAILED"
        assert error.context["method"] == "GetOnlineFeaturesV2"
        assert isinstance(error, grpc.RpcError)
        assert isinstance(error.__cause__, grpc.RpcError)

    def test_unavailable_server(self):
        channel = grpc.insecure_channel("localhost:1")
        with FeastClient(channel) as client:
            with pytest.raises(grpc.RpcError) as exc_info:
                client.get_feast_serving_info()

        assert exc_info.value.code() == grpc.StatusCode.UNAVAILABLE


class TestAuthentication:
    """Credential attachment through the client interceptor."""

    def test_authenticated_client_attaches_token(self, authenticated_client, serving_server):
        rows = authenticated_client.get_online_features(DRIVER_FEATURES, driver_rows(), "driver_project")

        assert_driver_rows(rows)
        assert serving_server.auth.authenticated is True
        assert authenticated_client.authenticated is True

    def test_unauthenticated_client_sends_no_token(self, client, serving_server):
        client.get_online_features(DRIVER_FEATURES, driver_rows(), "driver_project")

        assert serving_server.auth.authenticated is False
        assert client.authenticated is False

    def test_auth_required_server_rejects_unauthenticated(self, start_serving_server):
        server = start_serving_server(require_auth=True)

        with FeastClient(grpc.insecure_channel(server.target)) as client:
            with pytest.raises(RemoteCallError) as exc_info:
                client.get_online_features(DRIVER_FEATURES, driver_rows(), "driver_project")

        assert exc_info.value.code() == grpc.StatusCode.UNAUTHENTICATED

    def test_auth_required_server_accepts_authenticated(self, start_serving_server, auth_token):
        server = start_serving_server(require_auth=True)
        channel = grpc.insecure_channel(server.target)

        with FeastClient(channel, JwtCallCredentials(auth_token)) as client:
            rows = client.get_online_features(DRIVER_FEATURES, driver_rows(), "driver_project")

        assert_driver_rows(rows)
        assert server.auth.authenticated is True


class TestServingInfo:
    """Tests for FeastClient.get_feast_serving_info."""

    def test_get_feast_serving_info(self, client):
        info = client.get_feast_serving_info()

        assert info.version == "0.9.5"
        assert info.type == serving_pb2.FEAST_SERVING_TYPE_ONLINE


class TestClientConstruction:
    """Tests for the construction helpers."""

    def test_create(self, serving_server):
        with FeastClient.create(serving_server.host, serving_server.port) as client:
            assert client.authenticated is False
            assert client.get_feast_serving_info().version == "0.9.5"

    def test_create_secure_with_credentials(self, start_serving_server, auth_token):
        server = start_serving_server(require_auth=True)
        config = SecurityConfig(credentials=JwtCallCredentials(auth_token))

        with FeastClient.create_secure(server.host, server.port, config) as client:
            assert client.get_feast_serving_info().version == "0.9.5"

        assert server.auth.authenticated is True

    def test_from_settings(self, start_serving_server, auth_token):
        server = start_serving_server(require_auth=True)
        settings = ClientSettings(
            host=server.host,
            port=server.port,
            project="driver_project",
            auth_token=auth_token,
        )

        with FeastClient.from_settings(settings) as client:
            rows = client.get_online_features(DRIVER_FEATURES, driver_rows())

        assert client.project == "driver_project"
        assert_driver_rows(rows)

    def test_from_environment(self, monkeypatch, serving_server):
        monkeypatch.setenv("FEAST_SERVING_HOST", serving_server.host)
        monkeypatch.setenv("FEAST_SERVING_PORT", str(serving_server.port))
        monkeypatch.setenv("FEAST_SERVING_PROJECT", "driver_project")

        with FeastClient.from_settings() as client:
            rows = client.get_online_features(DRIVER_FEATURES, driver_rows())

        assert client.authenticated is False
        assert_driver_rows(rows)
