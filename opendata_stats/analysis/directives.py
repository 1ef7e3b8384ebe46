from enum import Enum
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .field_category import ClassifiedField, FieldCategory


class Statistic(Enum):
    """Aggregate functions understood by the query endpoint."""
    MIN = "min"
    MAX = "max"
    AVG = "avg"
    SUM = "sum"
    COUNT = "count"


NUMERIC_STATISTICS: Tuple[Statistic, ...] = (
    Statistic.MIN, Statistic.MAX, Statistic.AVG, Statistic.SUM, Statistic.COUNT
)
TEMPORAL_STATISTICS: Tuple[Statistic, ...] = (Statistic.MIN, Statistic.MAX, Statistic.COUNT)

_CATEGORY_STATISTICS: Dict[FieldCategory, Tuple[Statistic, ...]] = {
    FieldCategory.NUMERIC: NUMERIC_STATISTICS,
    FieldCategory.ROW_IDENTIFIER: NUMERIC_STATISTICS,
    FieldCategory.TEMPORAL: TEMPORAL_STATISTICS,
}


def output_alias(field_name: str, statistic: Statistic) -> str:
    """Alias a statistic is returned under: "<field>_<statistic>"."""
    return f"{field_name}_{statistic.value}"


@dataclass(frozen=True)
class StatDirective:
    """One aggregate over one field, returned under output_alias."""

    statistic: Statistic
    source_field: str
    output_alias: str

    @classmethod
    def for_field(cls, statistic: Statistic, field_name: str) -> "StatDirective":
        return cls(statistic=statistic, source_field=field_name, output_alias=output_alias(field_name, statistic))

    def to_dict(self) -> Dict[str, str]:
        """Wire form of an outStatistics entry."""
        return {
            "statisticType": self.statistic.value,
            "onStatisticField": self.source_field,
            "outStatisticFieldName": self.output_alias,
        }


def directives_for(field: ClassifiedField) -> List[StatDirective]:
    """
    Statistic directives requested for one field.

    Args:
        field: A NUMERIC, ROW_IDENTIFIER or TEMPORAL field

    Returns:
        5 directives for NUMERIC / ROW_IDENTIFIER, 3 for TEMPORAL

    Raises:
        ValueError: The field's category is not aggregated this way
    """
    statistics = _CATEGORY_STATISTICS.get(field.category)
    if statistics is None:
        raise ValueError(f"No aggregate statistics for {field.category.value} field '{field.name}'")
    return [StatDirective.for_field(s, field.name) for s in statistics]
