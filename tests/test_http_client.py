# ==============================================
# Tests for HttpJsonClient and the rate limit policy
# ==============================================

import pytest

from conftest import LAYER_URL, FakeLayerServer, FakeResponse, _NOT_JSON

from opendata_stats.errors import ResponseShapeError, TransportError
from opendata_stats.transport.feature_layer import FeatureLayerClient
from opendata_stats.transport.http_client import HttpJsonClient
from opendata_stats.transport.rate_limit import FixedDelayPolicy, RateLimitPolicy


class CannedSession:

    def __init__(self, response):
        self.response = response
        self.timeouts = []

    def get(self, url, params=None, timeout=None):
        self.timeouts.append(timeout)
        self.response.url = url
        return self.response


class TestHttpJsonClient:

    def test_delay_applied_before_every_request(self, http_client, recording_sleep):
        http_client.get_json(LAYER_URL, params={"f": "json"})
        http_client.get_json(LAYER_URL, params={"f": "json"})

        assert recording_sleep.delays == [0.5, 0.5]

    def test_request_counter_and_reset(self, http_client):
        for _ in range(3):
            http_client.get_json(LAYER_URL)
        assert http_client.request_count == 3

        http_client.reset_request_count()
        assert http_client.request_count == 0

    def test_counters_are_per_client(self, layer_server, no_sleep):
        first = HttpJsonClient(rate_limit=no_sleep, session=layer_server)
        second = HttpJsonClient(rate_limit=no_sleep, session=layer_server)

        first.get_json(LAYER_URL)

        assert first.request_count == 1
        assert second.request_count == 0

    def test_non_success_status_raises_transport_error(self, sample_fields, no_sleep):
        client = HttpJsonClient(rate_limit=no_sleep, session=FakeLayerServer(sample_fields, status=404))

        with pytest.raises(TransportError) as excinfo:
            client.get_json(LAYER_URL)

        assert excinfo.value.status == 404
        assert excinfo.value.url == LAYER_URL
        assert "404" in str(excinfo.value)
        assert client.request_count == 1

    def test_arcgis_error_body_raises_transport_error(self, no_sleep):
        session = CannedSession(FakeResponse(LAYER_URL, 200, {"error": {"code": 400, "message": "Invalid query"}}))
        client = HttpJsonClient(rate_limit=no_sleep, session=session)

        with pytest.raises(TransportError) as excinfo:
            client.get_json(LAYER_URL)

        assert excinfo.value.status == 400
        assert excinfo.value.message == "Invalid query"

    @pytest.mark.parametrize("error", [
        {"code": "ERR", "message": "bad"},
        {"code": None, "message": "bad"},
        {"message": "bad"},
    ])
    def test_error_body_without_numeric_code(self, no_sleep, error):
        session = CannedSession(FakeResponse(LAYER_URL, 200, {"error": error}))
        client = HttpJsonClient(rate_limit=no_sleep, session=session)

        with pytest.raises(TransportError) as excinfo:
            client.get_json(LAYER_URL)

        assert excinfo.value.status == 500
        assert excinfo.value.url == LAYER_URL
        assert excinfo.value.message == "bad"

    def test_non_json_body(self, no_sleep):
        client = HttpJsonClient(rate_limit=no_sleep, session=CannedSession(FakeResponse(LAYER_URL, 200, _NOT_JSON)))

        with pytest.raises(ResponseShapeError):
            client.get_json(LAYER_URL)

    def test_timeout_passed_to_session(self, no_sleep):
        session = CannedSession(FakeResponse(LAYER_URL, 200, {}))
        HttpJsonClient(rate_limit=no_sleep, timeout=7.5, session=session).get_json(LAYER_URL)
        assert session.timeouts == [7.5]

    def test_injected_session_not_closed(self, layer_server, no_sleep):
        with HttpJsonClient(rate_limit=no_sleep, session=layer_server):
            pass
        assert not layer_server.closed


class TestFixedDelayPolicy:

    def test_zero_interval_never_sleeps(self, recording_sleep):
        FixedDelayPolicy(0, sleep=recording_sleep).wait()
        assert recording_sleep.delays == []

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            FixedDelayPolicy(-1)

    def test_policy_interface_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            RateLimitPolicy()

    def test_policy_without_wait_cannot_be_instantiated(self):
        class NoWait(RateLimitPolicy):
            pass

        with pytest.raises(TypeError):
            NoWait()


class TestFeatureLayerClient:

    def test_fetch_schema(self, layer_client, layer_server):
        fields = layer_client.fetch_schema(LAYER_URL + "/")

        assert [f.name for f in fields] == ["OBJECTID", "AGE", "UPDATED", "STATE", "Shape"]
        assert layer_server.calls[0] == (LAYER_URL, {"f": "json"})

    def test_schema_without_fields(self, no_sleep):
        client = FeatureLayerClient(HttpJsonClient(rate_limit=no_sleep, session=CannedSession(FakeResponse(LAYER_URL, 200, {"name": "x"}))))

        with pytest.raises(ResponseShapeError):
            client.fetch_schema(LAYER_URL)

    def test_aggregate_query_without_rows_is_empty(self, layer_client):
        assert layer_client.run_aggregate_query(LAYER_URL, []) == {}
