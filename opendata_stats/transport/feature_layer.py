# ==============================================
# FeatureLayerClient
# ==============================================
#
# PURPOSE:
#   The three calls the statistics engine makes against an ArcGIS
#   FeatureServer / MapServer layer. Query parameters are encoded
#   here; the engine only sees field descriptors, attribute maps
#   and (value, count) rows.
#
# CLASS: FeatureLayerClient
# -------------------------
#   Constructor:
#   ------------
#   - __init__(http: HttpJsonClient)
#
#   Methods:
#   --------
#   - fetch_schema(layer_url) -> list[FieldDescriptor]
#       GET <layer_url>?f=json and read "fields".
#
#   - run_aggregate_query(layer_url, directives) -> dict
#       GET <layer_url>/query with outStatistics. Returns the first
#       row's attributes, or {} when the response has no rows.
#
#   - run_grouped_query(layer_url, group_field, count_alias)
#         -> list[tuple[value, count]]
#       GET <layer_url>/query grouped by one field with a single
#       count statistic. One tuple per returned row, in order.
#
# ==============================================

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from opendata_stats.analysis.directives import Statistic, StatDirective
from opendata_stats.analysis.field_category import FieldDescriptor
from opendata_stats.errors import ResponseShapeError
from opendata_stats.logger import get_logger
from .http_client import HttpJsonClient

logger = get_logger(__name__)

# Selects every row of the layer
WHERE_ALL = "1=1"


def get_attribute(attributes: Dict[str, Any], name: str) -> Any:
    """
    Read an attribute by name, falling back to a case-insensitive match.

    Some servers return field names and statistic aliases in a different
    case than requested.
    """
    if name in attributes:
        return attributes[name]
    lowered = name.lower()
    for key, value in attributes.items():
        if key.lower() == lowered:
            return value
    return None


class FeatureLayerClient:
    """Schema, aggregate and grouped-count access to one layer service."""

    def __init__(self, http: HttpJsonClient):
        self.http = http

    @staticmethod
    def query_url(layer_url: str) -> str:
        return f"{layer_url.rstrip('/')}/query"

    def fetch_schema(self, layer_url: str) -> List[FieldDescriptor]:
        """
        Args:
            layer_url: URL of the layer (…/FeatureServer/0)

        Returns:
            The layer's fields in schema order

        Raises:
            TransportError: The schema request failed
            ResponseShapeError: The layer description has no "fields" list
        """
        layer_info = self.http.get_json(layer_url.rstrip("/"), params={"f": "json"})
        fields = layer_info.get("fields") if isinstance(layer_info, dict) else None
        if not isinstance(fields, list):
            raise ResponseShapeError(f"Layer description at {layer_url} has no 'fields' list")

        descriptors = []
        for entry in fields:
            if not isinstance(entry, dict) or "name" not in entry:
                raise ResponseShapeError(f"Malformed field entry in {layer_url}: {entry!r}")
            descriptors.append(FieldDescriptor.from_dict(entry))
        return descriptors

    def run_aggregate_query(self, layer_url: str, directives: Sequence[StatDirective]) -> Dict[str, Any]:
        params = {
            "f": "json",
            "where": WHERE_ALL,
            "returnGeometry": "false",
            "outStatistics": json.dumps([d.to_dict() for d in directives]),
        }
        response = self.http.get_json(self.query_url(layer_url), params=params)
        rows = self._rows(response, layer_url)
        if not rows:
            return {}
        return rows[0]

    def run_grouped_query(
        self,
        layer_url: str,
        group_field: str,
        count_alias: str
    ) -> List[Tuple[Optional[Any], int]]:
        count_directive = StatDirective(
            statistic=Statistic.COUNT,
            source_field=group_field,
            output_alias=count_alias
        )
        params = {
            "f": "json",
            "where": WHERE_ALL,
            "returnGeometry": "false",
            "groupByFieldsForStatistics": group_field,
            "outStatistics": json.dumps([count_directive.to_dict()]),
        }
        response = self.http.get_json(self.query_url(layer_url), params=params)

        groups = []
        for attributes in self._rows(response, layer_url):
            count = get_attribute(attributes, count_alias)
            if count is None:
                raise ResponseShapeError(
                    f"Grouped query on '{group_field}' at {layer_url} returned a row without '{count_alias}'"
                )
            groups.append((get_attribute(attributes, group_field), int(count)))
        return groups

    @staticmethod
    def _rows(response: Any, layer_url: str) -> List[Dict[str, Any]]:
        """Attribute maps of a query response's features; [] when there are none."""
        if not isinstance(response, dict):
            raise ResponseShapeError(f"Query response from {layer_url} is not a JSON object")
        features = response.get("features") or []
        rows = []
        for feature in features:
            attributes = feature.get("attributes") if isinstance(feature, dict) else None
            rows.append(attributes or {})
        return rows
