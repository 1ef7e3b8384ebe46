# ==============================================
# Field Category (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that describe a schema field and the statistic
#   category it was assigned. The category is computed once and
#   carried through planning, merging and output.
#
# ENUMS:
# ------
# - FieldCategory(Enum): NUMERIC, TEMPORAL, ROW_IDENTIFIER,
#                        CATEGORICAL, UNSUPPORTED
#
# CLASSES:
# --------
# - FieldDescriptor (frozen dataclass)
#     name: str        → Field name as published by the layer
#     raw_type: str    → esri type tag, e.g. "esriFieldTypeDouble"
#
# - ClassifiedField (frozen dataclass)
#     descriptor: FieldDescriptor
#     category: FieldCategory
#
# ==============================================

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict


class FieldCategory(Enum):
    """
    Statistic category of a field.

    - NUMERIC:        min, max, avg, sum, count
    - TEMPORAL:       min, max, count (epoch milliseconds)
    - ROW_IDENTIFIER: the layer's object id, aggregated like NUMERIC
    - CATEGORICAL:    distinct values with counts (grouping query)
    - UNSUPPORTED:    no statistics (geometry, blobs, GUIDs, ...)
    """
    NUMERIC = "numeric"
    TEMPORAL = "temporal"
    ROW_IDENTIFIER = "row_identifier"
    CATEGORICAL = "categorical"
    UNSUPPORTED = "unsupported"

    @property
    def is_aggregatable(self) -> bool:
        """True for categories handled by the batched aggregate query."""
        return self in (FieldCategory.NUMERIC, FieldCategory.TEMPORAL, FieldCategory.ROW_IDENTIFIER)


@dataclass(frozen=True)
class FieldDescriptor:
    """A named, typed column of the remote layer."""

    name: str
    raw_type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDescriptor":
        """
        Build a descriptor from a layer schema entry.

        Args:
            data: One element of the layer's "fields" array

        Returns:
            A FieldDescriptor
        """
        return cls(name=data["name"], raw_type=data.get("type") or "")


@dataclass(frozen=True)
class ClassifiedField:
    """A field tagged with its category."""

    descriptor: FieldDescriptor
    category: FieldCategory

    @property
    def name(self) -> str:
        return self.descriptor.name
