# ==============================================
# CategoricalAggregator
# ==============================================
#
# PURPOSE:
#   Build the distinct-value table of a string field with one
#   grouped-count query (groupByFieldsForStatistics=<field>).
#
# CLASS: CategoricalAggregator
# ----------------------------
#   Constructor:
#   ------------
#   - __init__(layer, layer_url, field_names=())
#       field_names: every field of the schema, so the internal count
#       alias never shadows a real field.
#
#   Methods:
#   --------
#   - aggregate(field: FieldDescriptor) -> CategoricalStatsRecord
#       values keep the server's row order (no re-sorting),
#       total_count = sum of counts, unique_count = number of rows.
#       No rows → empty table with zero counts.
#
# ==============================================

from typing import Iterable

from opendata_stats.analysis.field_category import FieldDescriptor
from opendata_stats.logger import get_logger
from opendata_stats.transport.feature_layer import FeatureLayerClient
from .records import CategoricalStatsRecord, CategoryCount

logger = get_logger(__name__)


class CategoricalAggregator:
    """Grouped-count statistics for categorical fields."""

    DEFAULT_COUNT_ALIAS = "value_count"

    def __init__(self, layer: FeatureLayerClient, layer_url: str, field_names: Iterable[str] = ()):
        self.layer = layer
        self.layer_url = layer_url
        self.count_alias = self.count_alias_for(field_names)

    @classmethod
    def count_alias_for(cls, field_names: Iterable[str]) -> str:
        """
        Alias for the group count that differs from every field name.

        Field names are compared case-insensitively since servers may
        change the case of returned keys.
        """
        taken = {name.lower() for name in field_names}
        alias = cls.DEFAULT_COUNT_ALIAS
        while alias.lower() in taken:
            alias = f"{alias}_"
        return alias

    def aggregate(self, field: FieldDescriptor) -> CategoricalStatsRecord:
        groups = self.layer.run_grouped_query(self.layer_url, field.name, self.count_alias)
        record = CategoricalStatsRecord.from_counts([
            CategoryCount(value=value, count=count) for value, count in groups
        ])
        logger.debug(
            f"'{field.name}': {record.unique_count} distinct values over {record.total_count} rows"
        )
        return record
