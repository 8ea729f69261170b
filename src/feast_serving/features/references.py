"""
Feature References
==================

Parses ``feature_table:feature`` strings into structured references.

Only the feature name is required; ``rating`` and ``driver:rating`` are both
valid. The first ``:`` separates table from name, and a name may not contain
another one.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from feast_serving.errors import InvalidArgumentError
from feast_serving.proto import serving_pb2

SEPARATOR = ":"


@dataclass(frozen=True)
class FeatureReference:
    """A feature name, optionally qualified by its feature table."""
    name: str
    table: Optional[str] = None

    @classmethod
    def parse(cls, ref: str) -> "FeatureReference":
        """
        Parse a single reference string.

        Raises:
            InvalidArgumentError: not a string, empty name, or a name containing ':'
        """
        if not isinstance(ref, str):
            raise InvalidArgumentError(
                f"Feature reference must be a string, got {type(ref).__name__}",
                feature_ref=repr(ref),
            )

        table, sep, name = ref.partition(SEPARATOR)
        if not sep:
            table, name = "", ref

        if not name:
            raise InvalidArgumentError(
                f"Feature reference '{ref}' has no feature name",
                feature_ref=ref,
            )
        if SEPARATOR in name:
            raise InvalidArgumentError(
                f"Feature reference '{ref}' must be 'feature_table:feature' or 'feature'",
                feature_ref=ref,
            )

        return cls(name=name, table=table or None)

    def to_proto(self) -> serving_pb2.FeatureReferenceV2:
        if self.table:
            return serving_pb2.FeatureReferenceV2(feature_table=self.table, name=self.name)
        return serving_pb2.FeatureReferenceV2(name=self.name)

    def __str__(self) -> str:
        return f"{self.table}{SEPARATOR}{self.name}" if self.table else self.name


def parse_feature_refs(refs: Iterable[str]) -> List[FeatureReference]:
    """Parse references in order. Fails on the first malformed entry."""
    if isinstance(refs, str):
        raise InvalidArgumentError(
            "Feature references must be a list of strings, not a single string",
            feature_ref=refs,
        )
    return [FeatureReference.parse(ref) for ref in refs]
