"""gRPC client stub and server registration for ``feast.serving.ServingService``.

Provides ``ServingServiceStub`` for the client and the servicer base class plus
``add_ServingServiceServicer_to_server`` for in-process test servers.
"""

import grpc

from feast_serving.proto import serving_pb2

SERVICE_NAME = "feast.serving.ServingService"

GET_FEAST_SERVING_INFO = f"/{SERVICE_NAME}/GetFeastServingInfo"
GET_ONLINE_FEATURES_V2 = f"/{SERVICE_NAME}/GetOnlineFeaturesV2"


class ServingServiceStub:
    """Client stub for the ServingService gRPC service.

    Provides two unary-unary RPC methods:
    - GetFeastServingInfo: server version and serving type.
    - GetOnlineFeaturesV2: feature values for a list of entity rows.
    """

    def __init__(self, channel: grpc.Channel) -> None:
        self.GetFeastServingInfo = channel.unary_unary(
            GET_FEAST_SERVING_INFO,
            request_serializer=serving_pb2.GetFeastServingInfoRequest.SerializeToString,
            response_deserializer=serving_pb2.GetFeastServingInfoResponse.FromString,
        )
        self.GetOnlineFeaturesV2 = channel.unary_unary(
            GET_ONLINE_FEATURES_V2,
            request_serializer=serving_pb2.GetOnlineFeaturesRequestV2.SerializeToString,
            response_deserializer=serving_pb2.GetOnlineFeaturesResponse.FromString,
        )


class ServingServiceServicer:
    """Server-side base class. Unimplemented methods answer UNIMPLEMENTED."""

    def GetFeastServingInfo(self, request, context):
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")

    def GetOnlineFeaturesV2(self, request, context):
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")


def add_ServingServiceServicer_to_server(servicer: ServingServiceServicer, server: grpc.Server) -> None:
    rpc_method_handlers = {
        "GetFeastServingInfo": grpc.unary_unary_rpc_method_handler(
            servicer.GetFeastServingInfo,
            request_deserializer=serving_pb2.GetFeastServingInfoRequest.FromString,
            response_serializer=serving_pb2.GetFeastServingInfoResponse.SerializeToString,
        ),
        "GetOnlineFeaturesV2": grpc.unary_unary_rpc_method_handler(
            servicer.GetOnlineFeaturesV2,
            request_deserializer=serving_pb2.GetOnlineFeaturesRequestV2.FromString,
            response_serializer=serving_pb2.GetOnlineFeaturesResponse.SerializeToString,
        ),
    }
    generic_handler = grpc.method_handlers_generic_handler(SERVICE_NAME, rpc_method_handlers)
    server.add_generic_rpc_handlers((generic_handler,))
