# ==============================================
# TOPIC 3: STATISTICS
# ==============================================
#
# This package runs the planned queries and assembles the result.
#
# Modules:
# --------
# - records.py          → Per-field records and the OpenDataStatistics root
# - aggregate_runner.py → One aggregate query per batch, merged by alias
# - categorical.py      → One grouped-count query per categorical field
# - engine.py           → Orchestrates schema → classify → batches → categories
#
# ==============================================

from .records import (
    CategoricalStatsRecord,
    CategoryCount,
    FrozenRecordError,
    NumericStatsRecord,
    OpenDataStatistics,
    TemporalStatsRecord,
)
from .aggregate_runner import AggregateQueryRunner
from .categorical import CategoricalAggregator
from .engine import StatisticsEngine

__all__ = [
    "CategoricalStatsRecord",
    "CategoryCount",
    "FrozenRecordError",
    "NumericStatsRecord",
    "OpenDataStatistics",
    "TemporalStatsRecord",
    "AggregateQueryRunner",
    "CategoricalAggregator",
    "StatisticsEngine"
]
