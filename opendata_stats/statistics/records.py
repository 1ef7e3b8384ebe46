# ==============================================
# Statistics Records
# ==============================================
#
# PURPOSE:
#   Data classes that hold the statistics computed for each field,
#   and the OpenDataStatistics root that groups them by category.
#
# WHY THIS FILE EXISTS:
#   Records are created empty when a run starts and filled in place
#   as query responses arrive. Once the run finishes the root is
#   frozen so the returned value can no longer change.
#
# CLASSES:
# --------
# - NumericStatsRecord (dataclass)
#     min, max, avg, sum, count   → all Optional, filled by the merge step
#
# - TemporalStatsRecord (dataclass)
#     min, max                    → Optional[int], epoch milliseconds
#     count                       → Optional[int]
#
# - CategoryCount (frozen dataclass)
#     value: str | None           → None represents missing data
#     count: int
#
# - CategoricalStatsRecord (dataclass)
#     values: tuple[CategoryCount] → one entry per group, response order
#     total_count: int            → sum of values[].count
#     unique_count: int           → len(values)
#
# - OpenDataStatistics
#     numeric, temporal, row_identifier, categorical
#       → dict[field_name, record]
#
#     Methods:
#     --------
#     - freeze() -> OpenDataStatistics
#     - to_dict() -> dict     (OpenData JSON layout)
#     - from_dict(data) -> OpenDataStatistics  (classmethod)
#
# ==============================================

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union


class FrozenRecordError(AttributeError):
    """Raised when a record is modified after its run has finished."""


class _FreezableRecord:
    """Mixin: attribute assignment raises once freeze() has been called."""

    _frozen = False

    def freeze(self) -> None:
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenRecordError(f"{type(self).__name__} is frozen; cannot set '{name}'")
        object.__setattr__(self, name, value)

    def _present_fields(self) -> Dict[str, Any]:
        """Statistic values that have been filled in."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class NumericStatsRecord(_FreezableRecord):
    """Statistics of a numeric or row-identifier field."""

    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    sum: Optional[float] = None
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._present_fields()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NumericStatsRecord":
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})


@dataclass
class TemporalStatsRecord(_FreezableRecord):
    """Statistics of a date field; min and max are epoch milliseconds."""

    min: Optional[int] = None
    max: Optional[int] = None
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._present_fields()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemporalStatsRecord":
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})


@dataclass(frozen=True)
class CategoryCount:
    """One distinct value of a categorical field and how many rows hold it."""

    value: Optional[Any]
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "count": self.count}


@dataclass
class CategoricalStatsRecord(_FreezableRecord):
    """
    Distinct-value table of a categorical field.

    Always built through from_counts() so the totals match the values.
    """

    values: Tuple[CategoryCount, ...] = field(default_factory=tuple)
    total_count: int = 0
    unique_count: int = 0

    @classmethod
    def from_counts(cls, values: Iterable[CategoryCount]) -> "CategoricalStatsRecord":
        """
        Args:
            values: Groups in the order the server returned them

        Returns:
            A record whose total_count is the sum of counts and
            unique_count the number of groups
        """
        values = tuple(values)
        return cls(
            values=values,
            total_count=sum(v.count for v in values),
            unique_count=len(values)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "values": [v.to_dict() for v in self.values],
            "count": self.total_count,
            "uniqueCount": self.unique_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoricalStatsRecord":
        return cls.from_counts([
            CategoryCount(value=v.get("value"), count=v.get("count", 0))
            for v in data.get("values", [])
        ])


StatsRecord = Union[NumericStatsRecord, TemporalStatsRecord, CategoricalStatsRecord]


class OpenDataStatistics:
    """
    Statistics for every supported field of a layer, grouped by category.

    Serialized keys follow the OpenData layout:
    numeric → "numeric", categorical → "string",
    temporal → "date", row_identifier → "objectid".
    """

    SERIALIZED_KEYS = {
        "numeric": "numeric",
        "categorical": "string",
        "temporal": "date",
        "row_identifier": "objectid",
    }

    def __init__(self):
        self.numeric: Dict[str, NumericStatsRecord] = {}
        self.temporal: Dict[str, TemporalStatsRecord] = {}
        self.row_identifier: Dict[str, NumericStatsRecord] = {}
        self.categorical: Dict[str, CategoricalStatsRecord] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def buckets(self) -> Dict[str, Mapping[str, StatsRecord]]:
        return {name: getattr(self, name) for name in self.SERIALIZED_KEYS}

    def freeze(self) -> "OpenDataStatistics":
        """
        Make the statistics read-only: buckets become mapping proxies and
        every record rejects further assignment.
        """
        if self._frozen:
            return self
        for name, bucket in self.buckets().items():
            for record in bucket.values():
                record.freeze()
            setattr(self, name, MappingProxyType(dict(bucket)))
        self._frozen = True
        return self

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            self.SERIALIZED_KEYS[name]: {field_name: record.to_dict() for field_name, record in bucket.items()}
            for name, bucket in self.buckets().items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "OpenDataStatistics":
        """
        Rebuild statistics from their serialized form (e.g. a results file).

        Returns:
            A frozen OpenDataStatistics
        """
        stats = cls()
        stats.numeric = {k: NumericStatsRecord.from_dict(v) for k, v in data.get("numeric", {}).items()}
        stats.temporal = {k: TemporalStatsRecord.from_dict(v) for k, v in data.get("date", {}).items()}
        stats.row_identifier = {k: NumericStatsRecord.from_dict(v) for k, v in data.get("objectid", {}).items()}
        stats.categorical = {k: CategoricalStatsRecord.from_dict(v) for k, v in data.get("string", {}).items()}
        return stats.freeze()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OpenDataStatistics):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        counts = ", ".join(f"{name}={len(bucket)}" for name, bucket in self.buckets().items())
        return f"OpenDataStatistics({counts})"
