# ==============================================
# AggregateQueryRunner
# ==============================================
#
# PURPOSE:
#   Send one aggregate query per batch and write the returned
#   values into the records of the batch's fields.
#
# HOW MERGING WORKS:
#   The server answers with one flat attribute map keyed by the
#   output aliases we asked for ("<field>_<statistic>"). Instead of
#   splitting keys back into field and statistic, the runner builds
#   an alias → (record, statistic) table from the batch's own
#   directives and looks each key up in it:
#     1. exact match
#     2. case-insensitive match (servers that rewrite alias case)
#     3. no match → logged and ignored
#
#   A field literally named like "<other>_<statistic>" can still
#   collide with another field's alias on servers that rewrite
#   alias case; that case is not resolved here.
#
# CLASS: AggregateQueryRunner
# ---------------------------
#   Constructor:
#   ------------
#   - __init__(layer, layer_url, records)
#       records: field name → the (empty) record created for it
#
#   Methods:
#   --------
#   - run(batch: Batch) -> None
#   - merge(batch: Batch, attributes: dict) -> int
#       Returns the number of values written.
#
# ==============================================

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from opendata_stats.analysis.batch_planner import Batch
from opendata_stats.analysis.directives import Statistic, directives_for
from opendata_stats.analysis.field_category import FieldCategory
from opendata_stats.errors import ResponseShapeError
from opendata_stats.logger import get_logger
from opendata_stats.transport.feature_layer import FeatureLayerClient
from .records import StatsRecord

logger = get_logger(__name__)

DATETIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y",
]


def to_epoch_millis(value: Any) -> Optional[int]:
    """
    Normalize a date statistic to epoch milliseconds.

    Numbers are taken as epoch milliseconds already; strings are parsed
    with DATETIME_FORMATS and read as UTC.

    Raises:
        ResponseShapeError: The value is not a number or a known date format
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ResponseShapeError(f"Unexpected boolean date statistic: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return int(value)
        except (ValueError, OverflowError) as e:
            raise ResponseShapeError(f"Date statistic is not a finite number: {value!r}") from e
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(float(text))
        except (ValueError, OverflowError):
            pass
        for fmt in DATETIME_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
            except ValueError:
                continue
            return int(parsed.replace(tzinfo=timezone.utc).timestamp() * 1000)
    raise ResponseShapeError(f"Unrecognized date statistic: {value!r}")


class AggregateQueryRunner:
    """
    Runs the aggregate query of a batch and merges the answer.

    Each record is only ever written by the batch that contains its field.
    """

    def __init__(
        self,
        layer: FeatureLayerClient,
        layer_url: str,
        records: Mapping[str, Tuple[FieldCategory, StatsRecord]]
    ):
        """
        Args:
            layer: Client for the layer's query endpoint
            layer_url: URL of the layer
            records: Field name → (category, record) built at classification time
        """
        self.layer = layer
        self.layer_url = layer_url
        self.records = records

    def run(self, batch: Batch) -> None:
        directives = batch.directives()
        attributes = self.layer.run_aggregate_query(self.layer_url, directives)
        written = self.merge(batch, attributes)
        logger.debug(f"Merged {written}/{len(directives)} statistics for {[f.name for f in batch.fields]}")

    def merge(self, batch: Batch, attributes: Dict[str, Any]) -> int:
        """
        Write an aggregate response into the batch's records.

        Args:
            batch: The batch the response answers
            attributes: Flat alias → value map (may be empty)

        Returns:
            The number of statistic values written
        """
        targets = self._merge_targets(batch)
        folded = {alias.lower(): target for alias, target in targets.items()}

        written = 0
        for key, value in attributes.items():
            target = targets.get(key) or folded.get(key.lower())
            if target is None:
                logger.warning(f"Ignoring unrequested statistic '{key}' from {self.layer_url}")
                continue

            category, record, statistic = target
            if category is FieldCategory.TEMPORAL and statistic is not Statistic.COUNT:
                value = to_epoch_millis(value)
            setattr(record, statistic.value, value)
            written += 1
        return written

    def _merge_targets(self, batch: Batch) -> Dict[str, Tuple[FieldCategory, StatsRecord, Statistic]]:
        targets = {}
        for field in batch.fields:
            category, record = self.records[field.name]
            for directive in directives_for(field):
                targets[directive.output_alias] = (category, record, directive.statistic)
        return targets
