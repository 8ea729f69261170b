"""
Row Adapter
===========

One entity's fields, used both ways:

- request side: entity key values plus the entity timestamp
- response side: feature values plus a FieldStatus per field

Usage:
    row = Row.create().set("driver_id", 123).set_entity_timestamp(datetime.utcnow())

    for row in client.get_online_features(["driver:rating"], [row]):
        if row.get_status("driver:rating") == FieldStatus.PRESENT:
            rating = row.get("driver:rating")
"""

import time
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional, Union

from google.protobuf.timestamp_pb2 import Timestamp

from feast_serving.errors import InvalidArgumentError
from feast_serving.features.values import Value, to_value, value_to_python
from feast_serving.proto import serving_pb2


class FieldStatus(IntEnum):
    """Why a returned field does or does not carry a value. Mirrors the wire enum."""
    INVALID = serving_pb2.GetOnlineFeaturesResponse.INVALID
    PRESENT = serving_pb2.GetOnlineFeaturesResponse.PRESENT
    NULL_VALUE = serving_pb2.GetOnlineFeaturesResponse.NULL_VALUE
    NOT_FOUND = serving_pb2.GetOnlineFeaturesResponse.NOT_FOUND
    OUTSIDE_MAX_AGE = serving_pb2.GetOnlineFeaturesResponse.OUTSIDE_MAX_AGE

    @classmethod
    def _missing_(cls, value):
        # Newer servers may send statuses this client does not know
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.INVALID
        return None


TimestampLike = Union[datetime, Timestamp, int, float]


def to_timestamp(value: TimestampLike) -> Timestamp:
    """Convert a datetime (naive means UTC), Timestamp or epoch seconds."""
    if isinstance(value, Timestamp):
        ts = Timestamp()
        ts.CopyFrom(value)
        return ts
    if isinstance(value, datetime):
        ts = Timestamp()
        ts.FromDatetime(value)
        return ts
    if isinstance(value, bool):
        raise InvalidArgumentError("Entity timestamp cannot be a bool", value=repr(value))
    if isinstance(value, int):
        return Timestamp(seconds=value)
    if isinstance(value, float):
        ts = Timestamp()
        ts.FromNanoseconds(int(round(value * 1e9)))
        return ts
    raise InvalidArgumentError(
        f"Unsupported entity timestamp type {type(value).__name__}",
        value=repr(value),
    )


class Row:
    """
    Mutable field map with per-field status and an entity timestamp.

    Two rows are equal when their fields and statuses are equal; the entity
    timestamp is not compared.
    """

    def __init__(self) -> None:
        self._fields: Dict[str, Value] = {}
        self._statuses: Dict[str, FieldStatus] = {}
        self._entity_timestamp = Timestamp(seconds=int(time.time()))

    @classmethod
    def create(cls) -> "Row":
        return cls()

    def set(self, field: str, value: Any, status: Optional[int] = None) -> "Row":
        """
        Store ``value`` under ``field``, converting it to a wire Value.

        ``status`` is given when decoding a response; it replaces any earlier
        status for the field. Without a status any earlier status is dropped.
        Status numbers unknown to this client decode as
        ``FieldStatus.INVALID``.

        Raises:
            UnsupportedTypeError: ``value`` has no Value mapping
        """
        converted = to_value(value)
        stored = Value()
        stored.CopyFrom(converted)
        self._fields[field] = stored
        if status is not None:
            self._statuses[field] = FieldStatus(status)
        else:
            self._statuses.pop(field, None)
        return self

    def set_entity_timestamp(self, timestamp: TimestampLike) -> "Row":
        self._entity_timestamp = to_timestamp(timestamp)
        return self

    def get_entity_timestamp(self) -> Timestamp:
        return self._entity_timestamp

    def get_fields(self) -> Dict[str, Value]:
        return dict(self._fields)

    def get_statuses(self) -> Dict[str, FieldStatus]:
        return dict(self._statuses)

    def get(self, field: str, default: Any = None) -> Any:
        """Native Python value for ``field``."""
        if field not in self._fields:
            return default
        return value_to_python(self._fields[field])

    def get_status(self, field: str) -> Optional[FieldStatus]:
        return self._statuses.get(field)

    def to_dict(self) -> Dict[str, Any]:
        return {name: value_to_python(value) for name, value in self._fields.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._fields == other._fields and self._statuses == other._statuses

    def __hash__(self) -> int:
        fields = frozenset(
            (name, value.SerializeToString(deterministic=True))
            for name, value in self._fields.items()
        )
        return hash((fields, frozenset(self._statuses.items())))

    def __repr__(self) -> str:
        statuses = {name: status.name for name, status in self._statuses.items()}
        return (
            f"Row(fields={self.to_dict()}, statuses={statuses}, "
            f"entity_timestamp={self._entity_timestamp.ToJsonString()})"
        )
