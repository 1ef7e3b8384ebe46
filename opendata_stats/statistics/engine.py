# ==============================================
# StatisticsEngine — Orchestrator
# ==============================================
#
# PURPOSE:
#   This is the MAIN CLASS that ties the topics together into a
#   single statistics run. Users interact with this class only.
#
# HOW A RUN FLOWS:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                   StatisticsEngine.compute               │
#   │                                                          │
#   │  FeatureLayerClient.fetch_schema(layer_url)              │
#   │                 │ list[FieldDescriptor]                  │
#   │                 ▼                                        │
#   │  FieldClassifier.classify_all → ClassifiedField[]        │
#   │                 │ records created once per field         │
#   │                 ▼                                        │
#   │  BatchPlanner.plan → AggregateQueryRunner.run (per batch)│
#   │                 │ numeric / date / objectid filled       │
#   │                 ▼                                        │
#   │  CategoricalAggregator.aggregate (per string field)      │
#   │                 │                                        │
#   │                 ▼                                        │
#   │  OpenDataStatistics.freeze() → returned                  │
#   └──────────────────────────────────────────────────────────┘
#
#   Requests are strictly sequential: a batch is only sent after
#   the previous response has been merged. Any error aborts the
#   run; no partial statistics are returned.
#
# CLASS: StatisticsEngine
# -----------------------
#   Constructor:
#   ------------
#   - __init__(layer: FeatureLayerClient, batch_size: int = 1,
#              classifier: FieldClassifier | None = None)
#
#   - from_config(config: AppConfig | None = None) (classmethod)
#       Build the HTTP client, rate limit policy and layer client
#       from configuration.
#
#   Public Methods:
#   ---------------
#   - compute(layer_url: str) -> OpenDataStatistics
#
#   Attributes:
#   -----------
#   - last_run_request_count: int | None
#       Requests issued by the most recent compute() call.
#
# ==============================================

from typing import Dict, List, Optional, Tuple

from opendata_stats.analysis.batch_planner import BatchPlanner
from opendata_stats.analysis.classifier import FieldClassifier
from opendata_stats.analysis.field_category import ClassifiedField, FieldCategory
from opendata_stats.config import AppConfig, get_config
from opendata_stats.logger import get_logger
from opendata_stats.transport.feature_layer import FeatureLayerClient
from opendata_stats.transport.http_client import HttpJsonClient
from opendata_stats.transport.rate_limit import FixedDelayPolicy
from .aggregate_runner import AggregateQueryRunner
from .categorical import CategoricalAggregator
from .records import NumericStatsRecord, OpenDataStatistics, StatsRecord, TemporalStatsRecord

logger = get_logger(__name__)


class StatisticsEngine:
    """
    Computes OpenData-style statistics for one layer at a time.
    """

    def __init__(
        self,
        layer: FeatureLayerClient,
        batch_size: int = 1,
        classifier: Optional[FieldClassifier] = None
    ):
        """
        Args:
            layer: Client for the layer's schema and query endpoints
            batch_size: Fields per aggregate query
            classifier: Field type classifier (default FieldClassifier)
        """
        self.layer = layer
        self.planner = BatchPlanner(batch_size)
        self.classifier = classifier or FieldClassifier()
        self.last_run_request_count: Optional[int] = None

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None) -> "StatisticsEngine":
        config = config or get_config()
        http = HttpJsonClient(
            rate_limit=FixedDelayPolicy(config.http.request_delay_seconds),
            timeout=config.http.timeout_seconds
        )
        return cls(FeatureLayerClient(http), batch_size=config.stats.batch_size)

    @property
    def http(self) -> HttpJsonClient:
        return self.layer.http

    def compute(self, layer_url: str) -> OpenDataStatistics:
        """
        Compute statistics for every supported field of a layer.

        Args:
            layer_url: URL of the FeatureServer / MapServer layer

        Returns:
            Frozen OpenDataStatistics

        Raises:
            TransportError: Any request answered with a non-success status
            ResponseShapeError: A response did not have the expected shape
        """
        start_count = self.http.request_count
        try:
            return self._compute(layer_url)
        finally:
            self.last_run_request_count = self.http.request_count - start_count

    def _compute(self, layer_url: str) -> OpenDataStatistics:
        # 1. Schema
        descriptors = self.layer.fetch_schema(layer_url)
        logger.info(f"Fetched schema with {len(descriptors)} fields from {layer_url}")

        # 2. Classify once, create every record up front
        output = OpenDataStatistics()
        classified = self._unique_fields(self.classifier.classify_all(descriptors))
        records = self._create_records(classified, output)

        # 3. Numeric, date and object id fields, batch by batch
        batches = self.planner.plan(classified)
        runner = AggregateQueryRunner(self.layer, layer_url, records)
        for index, batch in enumerate(batches, start=1):
            logger.info(f"Aggregate batch {index}/{len(batches)}: {', '.join(f.name for f in batch.fields)}")
            runner.run(batch)

        # 4. String fields, one grouped query each
        categorical = [f for f in classified if f.category is FieldCategory.CATEGORICAL]
        aggregator = CategoricalAggregator(self.layer, layer_url, (d.name for d in descriptors))
        for field in categorical:
            output.categorical[field.name] = aggregator.aggregate(field.descriptor)
            logger.info(f"Categorical field '{field.name}' done")

        skipped = [f.name for f in classified if f.category is FieldCategory.UNSUPPORTED]
        if skipped:
            logger.debug(f"Skipped unsupported fields: {', '.join(skipped)}")

        return output.freeze()

    @staticmethod
    def _unique_fields(classified: List[ClassifiedField]) -> List[ClassifiedField]:
        """Drop repeated field names so no field is processed twice."""
        seen = set()
        unique = []
        for field in classified:
            if field.name in seen:
                logger.warning(f"Field '{field.name}' appears more than once in the schema; ignoring repeat")
                continue
            seen.add(field.name)
            unique.append(field)
        return unique

    @staticmethod
    def _create_records(
        classified: List[ClassifiedField],
        output: OpenDataStatistics
    ) -> Dict[str, Tuple[FieldCategory, StatsRecord]]:
        """
        Create the empty record of every aggregatable field in its bucket.

        Returns:
            Field name → (category, record), the table the merge step writes through
        """
        records = {}
        for field in classified:
            if field.category is FieldCategory.NUMERIC:
                record = output.numeric[field.name] = NumericStatsRecord()
            elif field.category is FieldCategory.ROW_IDENTIFIER:
                record = output.row_identifier[field.name] = NumericStatsRecord()
            elif field.category is FieldCategory.TEMPORAL:
                record = output.temporal[field.name] = TemporalStatsRecord()
            else:
                continue
            records[field.name] = (field.category, record)
        return records
