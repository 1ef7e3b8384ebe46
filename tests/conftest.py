# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# This file contains shared fixtures for all tests.
#
# No test talks to a real server: FakeLayerServer stands in for the
# requests.Session inside HttpJsonClient and answers the three calls
# the engine makes (schema, aggregate query, grouped query) from an
# in-memory layer description.
#
# FIXTURES:
# ---------
# - no_sleep           → FixedDelayPolicy that records delays instead of sleeping
# - sample_fields      → AGE / UPDATED / OBJECTID / STATE / Shape schema
# - layer_server       → FakeLayerServer for sample_fields
# - http_client        → HttpJsonClient wired to layer_server
# - layer_client       → FeatureLayerClient over http_client
# - clean_config       → Clears ODSTATS_* env vars and the config singleton
#
# ==============================================

import json

import pytest

from opendata_stats.config import reset_config
from opendata_stats.transport.feature_layer import FeatureLayerClient
from opendata_stats.transport.http_client import HttpJsonClient
from opendata_stats.transport.rate_limit import FixedDelayPolicy

LAYER_URL = "https://example.com/arcgis/rest/services/Test/FeatureServer/0"

_NOT_JSON = object()


class FakeResponse:
    """The parts of requests.Response that HttpJsonClient reads."""

    def __init__(self, url, status_code=200, body=None):
        self.url = url
        self.status_code = status_code
        self._body = body

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is _NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeLayerServer:
    """
    In-memory ArcGIS layer answering GET requests like a FeatureServer.

    Args:
        fields: Schema entries ({"name", "type"})
        stats: field → {statistic: value}; an aggregate query returns no
               rows when none of its fields have stats
        groups: field → [(value, count), ...] for grouped queries
        status: Force this HTTP status on every request
    """

    def __init__(self, fields, stats=None, groups=None, status=200):
        self.fields = fields
        self.stats = stats or {}
        self.groups = groups or {}
        self.status = status
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        params = dict(params or {})
        self.calls.append((url, params))

        if self.status != 200:
            return FakeResponse(url, self.status, {"error": "nope"})

        if not url.endswith("/query"):
            return FakeResponse(url, 200, {"name": "Test", "fields": self.fields})

        out_statistics = json.loads(params["outStatistics"])
        group_field = params.get("groupByFieldsForStatistics")
        if group_field:
            alias = out_statistics[0]["outStatisticFieldName"]
            features = [
                {"attributes": {group_field: value, alias: count}}
                for value, count in self.groups.get(group_field, [])
            ]
            return FakeResponse(url, 200, {"features": features})

        attributes = {}
        for directive in out_statistics:
            field_stats = self.stats.get(directive["onStatisticField"], {})
            if directive["statisticType"] in field_stats:
                attributes[directive["outStatisticFieldName"]] = field_stats[directive["statisticType"]]
        features = [{"attributes": attributes}] if attributes else []
        return FakeResponse(url, 200, {"features": features})

    def close(self):
        self.closed = True

    def query_calls(self):
        return [params for url, params in self.calls if url.endswith("/query")]


class RecordingSleep:
    """Stand-in for time.sleep that remembers what it was asked to wait."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def no_sleep(recording_sleep):
    return FixedDelayPolicy(0.5, sleep=recording_sleep)


@pytest.fixture
def sample_fields():
    return [
        {"name": "OBJECTID", "type": "esriFieldTypeOID"},
        {"name": "AGE", "type": "esriFieldTypeInteger"},
        {"name": "UPDATED", "type": "esriFieldTypeDate"},
        {"name": "STATE", "type": "esriFieldTypeString"},
        {"name": "Shape", "type": "esriFieldTypeGeometry"},
    ]


@pytest.fixture
def sample_stats():
    return {
        "OBJECTID": {"min": 1, "max": 6, "avg": 3.5, "sum": 21, "count": 6},
        "AGE": {"min": 18, "max": 90, "avg": 41.5, "sum": 249, "count": 6},
        "UPDATED": {"min": 1577836800000, "max": 1609459200000, "count": 6},
    }


@pytest.fixture
def sample_groups():
    return {"STATE": [("CA", 3), ("NY", 2), (None, 1)]}


@pytest.fixture
def layer_server(sample_fields, sample_stats, sample_groups):
    return FakeLayerServer(sample_fields, sample_stats, sample_groups)


@pytest.fixture
def http_client(layer_server, no_sleep):
    return HttpJsonClient(rate_limit=no_sleep, session=layer_server)


@pytest.fixture
def layer_client(http_client):
    return FeatureLayerClient(http_client)


@pytest.fixture
def clean_config(monkeypatch):
    for name in (
        "ODSTATS_REQUEST_DELAY_SECONDS",
        "ODSTATS_TIMEOUT_SECONDS",
        "ODSTATS_BATCH_SIZE",
        "ODSTATS_LAYER_URL",
        "ODSTATS_RESULTS_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
