# ==============================================
# Tests for CategoricalAggregator
# ==============================================

import json

import pytest

from conftest import LAYER_URL, FakeLayerServer

from opendata_stats.analysis.field_category import FieldDescriptor
from opendata_stats.errors import ResponseShapeError
from opendata_stats.statistics.categorical import CategoricalAggregator
from opendata_stats.statistics.records import CategoricalStatsRecord, CategoryCount
from opendata_stats.transport.feature_layer import FeatureLayerClient
from opendata_stats.transport.http_client import HttpJsonClient


STATE = FieldDescriptor("STATE", "esriFieldTypeString")


class StubLayer:

    def __init__(self, groups):
        self.groups = groups
        self.calls = []

    def run_grouped_query(self, layer_url, group_field, count_alias):
        self.calls.append((group_field, count_alias))
        return self.groups


class TestCategoricalAggregator:

    def test_reduces_groups_in_response_order(self):
        aggregator = CategoricalAggregator(StubLayer([("CA", 3), ("NY", 2), (None, 1)]), LAYER_URL)

        record = aggregator.aggregate(STATE)

        assert record.values == (CategoryCount("CA", 3), CategoryCount("NY", 2), CategoryCount(None, 1))
        assert record.total_count == 6
        assert record.unique_count == 3

    def test_no_rows(self):
        record = CategoricalAggregator(StubLayer([]), LAYER_URL).aggregate(STATE)
        assert record == CategoricalStatsRecord(values=(), total_count=0, unique_count=0)

    def test_no_resorting(self):
        groups = [("b", 1), ("a", 5), ("c", 2)]
        record = CategoricalAggregator(StubLayer(groups), LAYER_URL).aggregate(STATE)
        assert [v.value for v in record.values] == ["b", "a", "c"]

    def test_count_alias_avoids_field_names(self):
        assert CategoricalAggregator.count_alias_for(["STATE"]) == "value_count"
        assert CategoricalAggregator.count_alias_for(["VALUE_COUNT"]) == "value_count_"
        assert CategoricalAggregator.count_alias_for(["value_count", "value_count_"]) == "value_count__"

    def test_serialized_layout(self):
        record = CategoricalAggregator(StubLayer([("CA", 3), (None, 1)]), LAYER_URL).aggregate(STATE)
        assert record.to_dict() == {
            "values": [{"value": "CA", "count": 3}, {"value": None, "count": 1}],
            "count": 4,
            "uniqueCount": 2,
        }


class TestGroupedQueryOverHttp:

    def test_grouped_query_parameters_and_null_group(self, no_sleep):
        server = FakeLayerServer(
            [{"name": "STATE", "type": "esriFieldTypeString"}],
            groups={"STATE": [("CA", 3), (None, 1)]}
        )
        layer = FeatureLayerClient(HttpJsonClient(rate_limit=no_sleep, session=server))

        record = CategoricalAggregator(layer, LAYER_URL, ["STATE"]).aggregate(STATE)

        url, params = server.calls[0]
        assert url == LAYER_URL + "/query"
        assert params["groupByFieldsForStatistics"] == "STATE"
        assert params["where"] == "1=1"
        assert json.loads(params["outStatistics"]) == [{
            "statisticType": "count",
            "onStatisticField": "STATE",
            "outStatisticFieldName": "value_count",
        }]
        assert record.values == (CategoryCount("CA", 3), CategoryCount(None, 1))

    def test_absent_group_value_reads_as_null(self, no_sleep):
        class AbsentValueServer(FakeLayerServer):
            def get(self, url, params=None, timeout=None):
                response = super().get(url, params, timeout)
                response._body = {"features": [{"attributes": {"VALUE_COUNT": 4}}]}
                return response

        server = AbsentValueServer([{"name": "STATE", "type": "esriFieldTypeString"}])
        layer = FeatureLayerClient(HttpJsonClient(rate_limit=no_sleep, session=server))

        record = CategoricalAggregator(layer, LAYER_URL).aggregate(STATE)

        assert record.values == (CategoryCount(None, 4),)
        assert record.total_count == 4

    def test_row_without_count_is_a_shape_error(self, no_sleep):
        class MissingCountServer(FakeLayerServer):
            def get(self, url, params=None, timeout=None):
                response = super().get(url, params, timeout)
                response._body = {"features": [{"attributes": {"STATE": "CA"}}]}
                return response

        server = MissingCountServer([{"name": "STATE", "type": "esriFieldTypeString"}])
        layer = FeatureLayerClient(HttpJsonClient(rate_limit=no_sleep, session=server))

        with pytest.raises(ResponseShapeError):
            CategoricalAggregator(layer, LAYER_URL).aggregate(STATE)
