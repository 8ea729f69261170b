"""
Value Conversion
================

Maps Python values to and from the wire ``Value`` union.

Explicit converters (one per wire variant) are the primary API. ``to_value``
picks one of them by inspecting the runtime type and is what ``Row.set`` uses
for plain Python values:

    to_value(1)            -> Value(int32_val=1)
    to_value(2 ** 40)      -> Value(int64_val=1099511627776)
    to_value(3.5)          -> Value(double_val=3.5)
    to_value(["a", "b"])   -> Value(string_list_val=StringList(val=["a", "b"]))
    to_value(None)         -> Value(null_val=NULL)

Pass a converter result (e.g. ``float_value(0.5)``) to choose a variant the
dispatcher would not pick on its own.
"""

import numbers
from typing import Any, Iterable, List, Optional

from feast_serving.errors import UnsupportedTypeError
from feast_serving.proto import serving_pb2

Value = serving_pb2.Value

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


# =============================================================================
# SCALAR CONVERTERS
# =============================================================================

def int32_value(value: int) -> Value:
    return Value(int32_val=value)


def int64_value(value: int) -> Value:
    return Value(int64_val=value)


def float_value(value: float) -> Value:
    return Value(float_val=value)


def double_value(value: float) -> Value:
    return Value(double_val=value)


def string_value(value: str) -> Value:
    return Value(string_val=value)


def bytes_value(value: bytes) -> Value:
    return Value(bytes_val=bytes(value))


def bool_value(value: bool) -> Value:
    return Value(bool_val=value)


def null_value() -> Value:
    return Value(null_val=serving_pb2.NULL)


# =============================================================================
# LIST CONVERTERS
# =============================================================================

def int32_list_value(values: Iterable[int]) -> Value:
    return Value(int32_list_val=serving_pb2.Int32List(val=list(values)))


def int64_list_value(values: Iterable[int]) -> Value:
    return Value(int64_list_val=serving_pb2.Int64List(val=list(values)))


def float_list_value(values: Iterable[float]) -> Value:
    return Value(float_list_val=serving_pb2.FloatList(val=list(values)))


def double_list_value(values: Iterable[float]) -> Value:
    return Value(double_list_val=serving_pb2.DoubleList(val=list(values)))


def string_list_value(values: Iterable[str]) -> Value:
    return Value(string_list_val=serving_pb2.StringList(val=list(values)))


def bytes_list_value(values: Iterable[bytes]) -> Value:
    return Value(bytes_list_val=serving_pb2.BytesList(val=[bytes(v) for v in values]))


def bool_list_value(values: Iterable[bool]) -> Value:
    return Value(bool_list_val=serving_pb2.BoolList(val=list(values)))


# =============================================================================
# DISPATCH
# =============================================================================

def _kind(value: Any) -> Optional[str]:
    """Classify a scalar; bool is checked first since it subclasses int."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, numbers.Integral):
        return "int"
    if isinstance(value, numbers.Real):
        return "double"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    return None


def _check_int64(value: int) -> int:
    value = int(value)
    if not INT64_MIN <= value <= INT64_MAX:
        raise UnsupportedTypeError(
            f"Integer {value} does not fit in a 64-bit Value",
            value_type="int",
        )
    return value


def _fits_int32(value: int) -> bool:
    return INT32_MIN <= value <= INT32_MAX


def _list_to_value(values: List[Any]) -> Value:
    if not values:
        raise UnsupportedTypeError("Cannot infer a Value list type from an empty sequence", value_type="list")

    kinds = {_kind(v) for v in values}
    if len(kinds) != 1 or None in kinds:
        names = sorted({type(v).__name__ for v in values})
        raise UnsupportedTypeError(
            f"List values must share one supported element type, got {names}",
            value_type="list",
        )

    kind = kinds.pop()
    if kind == "bool":
        return bool_list_value(values)
    if kind == "int":
        ints = [_check_int64(v) for v in values]
        if all(_fits_int32(v) for v in ints):
            return int32_list_value(ints)
        return int64_list_value(ints)
    if kind == "double":
        return double_list_value(float(v) for v in values)
    if kind == "string":
        return string_list_value(values)
    return bytes_list_value(values)


def to_value(value: Any) -> Value:
    """
    Convert a Python value into a wire ``Value`` by runtime type.

    Raises:
        UnsupportedTypeError: the type has no Value variant
    """
    if isinstance(value, Value):
        return value
    if value is None:
        return null_value()

    kind = _kind(value)
    if kind == "bool":
        return bool_value(value)
    if kind == "int":
        number = _check_int64(value)
        return int32_value(number) if _fits_int32(number) else int64_value(number)
    if kind == "double":
        return double_value(float(value))
    if kind == "string":
        return string_value(value)
    if kind == "bytes":
        return bytes_value(value)
    if isinstance(value, (list, tuple)):
        return _list_to_value(list(value))

    raise UnsupportedTypeError(
        f"No Value mapping for type {type(value).__name__}",
        value_type=type(value).__name__,
    )


def value_to_python(value: Value) -> Any:
    """Unwrap a wire ``Value``; unset and ``null_val`` both give ``None``."""
    which = value.WhichOneof("val")
    if which is None or which == "null_val":
        return None
    field = getattr(value, which)
    if which.endswith("_list_val"):
        return list(field.val)
    return field
