# ==============================================
# BatchPlanner
# ==============================================
#
# PURPOSE:
#   Split the aggregatable fields (NUMERIC, TEMPORAL, ROW_IDENTIFIER)
#   into contiguous groups; one aggregate query is sent per group.
#
# CLASS: BatchPlanner
# -------------------
#   Constructor:
#   ------------
#   - __init__(batch_size: int = 1)
#
#   Methods:
#   --------
#   - plan(fields: list[ClassifiedField]) -> list[Batch]
#       Drop categorical / unsupported fields, then slice in order.
#       Every batch is non-empty and at most batch_size long; only
#       the last one may be shorter.
#
# CLASS: Batch (frozen dataclass)
# -------------------------------
#   - fields: tuple[ClassifiedField, ...]
#   - directives() -> list[StatDirective]
#       Concatenation of directives_for() over the batch's fields.
#
# NOTES:
# ------
#   Larger batches mean fewer requests but longer outStatistics
#   expressions, which some servers reject. No server limit is
#   assumed here; the caller picks the size.
#
# ==============================================

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .directives import StatDirective, directives_for
from .field_category import ClassifiedField


@dataclass(frozen=True)
class Batch:
    """Fields whose statistics are requested together in one query."""

    fields: Tuple[ClassifiedField, ...]

    def directives(self) -> List[StatDirective]:
        return [d for f in self.fields for d in directives_for(f)]

    def __len__(self) -> int:
        return len(self.fields)


class BatchPlanner:
    """Partitions aggregatable fields into fixed-size batches."""

    def __init__(self, batch_size: int = 1):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.batch_size = batch_size

    def plan(self, fields: Iterable[ClassifiedField]) -> List[Batch]:
        aggregatable = [f for f in fields if f.category.is_aggregatable]
        return [
            Batch(fields=tuple(aggregatable[i:i + self.batch_size]))
            for i in range(0, len(aggregatable), self.batch_size)
        ]
