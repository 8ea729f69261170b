"""
Wire Schema
===========

Protobuf messages and gRPC stubs for the Feast online serving API.
"""

from feast_serving.proto import serving_pb2, serving_pb2_grpc

__all__ = [
    "serving_pb2",
    "serving_pb2_grpc",
]
