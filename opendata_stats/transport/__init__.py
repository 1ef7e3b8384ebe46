# ==============================================
# TOPIC 1: TRANSPORT (Remote feature layer access)
# ==============================================
#
# This package handles every request made to the remote layer:
# throttling, JSON fetching, request counting, and the three
# endpoints the statistics engine needs.
#
# Modules:
# --------
# - rate_limit.py     → Fixed delay applied before every request
# - http_client.py    → JSON GET with status checks and a request counter
# - feature_layer.py  → Schema fetch, aggregate query, grouped query
#
# ==============================================

from .rate_limit import FixedDelayPolicy, RateLimitPolicy
from .http_client import HttpJsonClient
from .feature_layer import FeatureLayerClient

__all__ = [
    "FixedDelayPolicy",
    "RateLimitPolicy",
    "HttpJsonClient",
    "FeatureLayerClient"
]
