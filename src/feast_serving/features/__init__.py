"""
Feature Data Layer
==================

Feature references, wire Value conversion and the Row adapter used to build
requests and decode responses.
"""

from feast_serving.features.references import FeatureReference, parse_feature_refs
from feast_serving.features.row import FieldStatus, Row, to_timestamp
from feast_serving.features.values import (
    Value,
    to_value,
    value_to_python,
    int32_value,
    int64_value,
    float_value,
    double_value,
    string_value,
    bytes_value,
    bool_value,
    null_value,
    int32_list_value,
    int64_list_value,
    float_list_value,
    double_list_value,
    string_list_value,
    bytes_list_value,
    bool_list_value,
)

__all__ = [
    # References
    "FeatureReference",
    "parse_feature_refs",
    # Rows
    "Row",
    "FieldStatus",
    "to_timestamp",
    # Values
    "Value",
    "to_value",
    "value_to_python",
    "int32_value",
    "int64_value",
    "float_value",
    "double_value",
    "string_value",
    "bytes_value",
    "bool_value",
    "null_value",
    "int32_list_value",
    "int64_list_value",
    "float_list_value",
    "double_list_value",
    "string_list_value",
    "bytes_list_value",
    "bool_list_value",
]
