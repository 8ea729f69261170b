"""
Serving API Messages
====================

Protobuf message classes for the Feast online serving API.

The schema lives in ``serving.proto`` next to this module. Instead of shipping
protoc output, the file descriptor is assembled here with ``descriptor_pb2``
and handed to the protobuf runtime builder, which is exactly what generated
``*_pb2`` modules do with their embedded serialized descriptor. The result is a
module exposing the same names protoc would generate. The test suite compiles
``serving.proto`` with grpcio-tools and checks the two descriptors match.

Usage:
    from feast_serving.proto import serving_pb2

    ref = serving_pb2.FeatureReferenceV2(feature_table="driver", name="rating")
    status = serving_pb2.GetOnlineFeaturesResponse.PRESENT

Messages are registered under the ``feast_serving.proto`` package so they never
collide with other Feast protos loaded into the default pool. Message names do
not travel on the wire; the RPC paths in ``serving_pb2_grpc`` carry the
``feast.serving.ServingService`` service name servers expect.
"""

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import timestamp_pb2  # noqa: F401  (registers the Timestamp dependency)
from google.protobuf.internal import builder as _builder

PACKAGE = "feast_serving.proto"
FILE_NAME = "feast_serving/proto/serving.proto"

_F = descriptor_pb2.FieldDescriptorProto

# (list message, element type)
_LIST_TYPES = [
    ("BytesList", _F.TYPE_BYTES),
    ("StringList", _F.TYPE_STRING),
    ("Int32List", _F.TYPE_INT32),
    ("Int64List", _F.TYPE_INT64),
    ("DoubleList", _F.TYPE_DOUBLE),
    ("FloatList", _F.TYPE_FLOAT),
    ("BoolList", _F.TYPE_BOOL),
]

# Members of the Value.val oneof: (field name, number, type, type name)
_VALUE_VARIANTS = [
    ("bytes_val", 1, _F.TYPE_BYTES, None),
    ("string_val", 2, _F.TYPE_STRING, None),
    ("int32_val", 3, _F.TYPE_INT32, None),
    ("int64_val", 4, _F.TYPE_INT64, None),
    ("double_val", 5, _F.TYPE_DOUBLE, None),
    ("float_val", 6, _F.TYPE_FLOAT, None),
    ("bool_val", 7, _F.TYPE_BOOL, None),
    ("bytes_list_val", 11, _F.TYPE_MESSAGE, "BytesList"),
    ("string_list_val", 12, _F.TYPE_MESSAGE, "StringList"),
    ("int32_list_val", 13, _F.TYPE_MESSAGE, "Int32List"),
    ("int64_list_val", 14, _F.TYPE_MESSAGE, "Int64List"),
    ("double_list_val", 15, _F.TYPE_MESSAGE, "DoubleList"),
    ("float_list_val", 16, _F.TYPE_MESSAGE, "FloatList"),
    ("bool_list_val", 17, _F.TYPE_MESSAGE, "BoolList"),
    ("null_val", 19, _F.TYPE_ENUM, "Null"),
]


def _qualified(name: str) -> str:
    return f".{PACKAGE}.{name}"


def _add_field(message, name, number, field_type, label=_F.LABEL_OPTIONAL, type_name=None, oneof_index=None):
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name:
        field.type_name = type_name
    if oneof_index is not None:
        field.oneof_index = oneof_index
    return field


def _add_map_field(message, scope: str, name: str, number: int, value_type, value_type_name=None):
    """Add a ``map<string, V>`` field as protoc lowers it: a nested *Entry message."""
    entry_name = "".join(part.title() for part in name.split("_")) + "Entry"
    entry = message.nested_type.add(name=entry_name)
    entry.options.map_entry = True
    _add_field(entry, "key", 1, _F.TYPE_STRING)
    _add_field(entry, "value", 2, value_type, type_name=value_type_name)
    _add_field(
        message, name, number, _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED,
        type_name=_qualified(f"{scope}.{entry_name}"),
    )


def _build_file_descriptor_proto() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=FILE_NAME,
        package=PACKAGE,
        syntax="proto3",
    )
    file_proto.dependency.append("google/protobuf/timestamp.proto")

    # -------------------------------------------------------------------------
    # Value types
    # -------------------------------------------------------------------------
    null_enum = file_proto.enum_type.add(name="Null")
    null_enum.value.add(name="NULL", number=0)

    for list_name, element_type in _LIST_TYPES:
        list_message = file_proto.message_type.add(name=list_name)
        _add_field(list_message, "val", 1, element_type, label=_F.LABEL_REPEATED)

    value = file_proto.message_type.add(name="Value")
    value.oneof_decl.add(name="val")
    for name, number, field_type, type_name in _VALUE_VARIANTS:
        _add_field(
            value, name, number, field_type,
            type_name=_qualified(type_name) if type_name else None,
            oneof_index=0,
        )

    # -------------------------------------------------------------------------
    # Serving info
    # -------------------------------------------------------------------------
    serving_type = file_proto.enum_type.add(name="FeastServingType")
    for number, name in enumerate(["INVALID", "ONLINE", "BATCH"]):
        serving_type.value.add(name=f"FEAST_SERVING_TYPE_{name}", number=number)

    file_proto.message_type.add(name="GetFeastServingInfoRequest")

    info_response = file_proto.message_type.add(name="GetFeastServingInfoResponse")
    _add_field(info_response, "version", 1, _F.TYPE_STRING)
    _add_field(info_response, "type", 2, _F.TYPE_ENUM, type_name=_qualified("FeastServingType"))
    _add_field(info_response, "job_staging_location", 10, _F.TYPE_STRING)

    # -------------------------------------------------------------------------
    # Online features
    # -------------------------------------------------------------------------
    feature_ref = file_proto.message_type.add(name="FeatureReferenceV2")
    _add_field(feature_ref, "feature_table", 1, _F.TYPE_STRING)
    _add_field(feature_ref, "name", 2, _F.TYPE_STRING)

    request = file_proto.message_type.add(name="GetOnlineFeaturesRequestV2")
    _add_field(
        request, "features", 4, _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED, type_name=_qualified("FeatureReferenceV2"),
    )
    _add_field(
        request, "entity_rows", 2, _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED, type_name=_qualified("GetOnlineFeaturesRequestV2.EntityRow"),
    )
    _add_field(request, "project", 5, _F.TYPE_STRING)

    entity_row = request.nested_type.add(name="EntityRow")
    _add_field(entity_row, "timestamp", 1, _F.TYPE_MESSAGE, type_name=".google.protobuf.Timestamp")
    _add_map_field(
        entity_row, "GetOnlineFeaturesRequestV2.EntityRow", "fields", 2,
        _F.TYPE_MESSAGE, _qualified("Value"),
    )

    response = file_proto.message_type.add(name="GetOnlineFeaturesResponse")
    _add_field(
        response, "field_values", 1, _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED, type_name=_qualified("GetOnlineFeaturesResponse.FieldValues"),
    )

    field_status = response.enum_type.add(name="FieldStatus")
    for number, name in enumerate(["INVALID", "PRESENT", "NULL_VALUE", "NOT_FOUND", "OUTSIDE_MAX_AGE"]):
        field_status.value.add(name=name, number=number)

    field_values = response.nested_type.add(name="FieldValues")
    _add_map_field(
        field_values, "GetOnlineFeaturesResponse.FieldValues", "fields", 1,
        _F.TYPE_MESSAGE, _qualified("Value"),
    )
    _add_map_field(
        field_values, "GetOnlineFeaturesResponse.FieldValues", "statuses", 2,
        _F.TYPE_ENUM, _qualified("GetOnlineFeaturesResponse.FieldStatus"),
    )

    # -------------------------------------------------------------------------
    # Service
    # -------------------------------------------------------------------------
    service = file_proto.service.add(name="ServingService")
    service.method.add(
        name="GetFeastServingInfo",
        input_type=_qualified("GetFeastServingInfoRequest"),
        output_type=_qualified("GetFeastServingInfoResponse"),
    )
    service.method.add(
        name="GetOnlineFeaturesV2",
        input_type=_qualified("GetOnlineFeaturesRequestV2"),
        output_type=_qualified("GetOnlineFeaturesResponse"),
    )

    return file_proto


DESCRIPTOR = descriptor_pool.Default().AddSerializedFile(
    _build_file_descriptor_proto().SerializeToString()
)

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, __name__, _globals)
