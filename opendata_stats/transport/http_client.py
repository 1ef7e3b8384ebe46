# ==============================================
# HttpJsonClient
# ==============================================
#
# PURPOSE:
#   Issue GET requests that return JSON. Every call:
#     1. waits on the rate limit policy
#     2. increments the request counter
#     3. sends the request through a requests.Session
#     4. raises TransportError on a non-success status
#
# CLASS: HttpJsonClient
# ---------------------
#   Stateful — holds the session, the policy and the request counter.
#
#   Constructor:
#   ------------
#   - __init__(rate_limit=None, timeout=30.0, session=None)
#
#   Methods:
#   --------
#   - get_json(url: str, params: dict | None = None) -> Any
#   - reset_request_count() -> None
#   - request_count (property)
#   - close() / context manager
#
# ==============================================

from typing import Any, Dict, Optional

import requests

from opendata_stats.errors import ResponseShapeError, TransportError
from opendata_stats.logger import get_logger
from .rate_limit import FixedDelayPolicy, RateLimitPolicy

logger = get_logger(__name__)

# Status reported for an error body whose code is missing or not a number
DEFAULT_ERROR_STATUS = 500


def _error_status(error: Dict[str, Any]) -> int:
    """Status code of an ArcGIS error object."""
    try:
        return int(error.get("code"))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_ERROR_STATUS


class HttpJsonClient:
    """
    JSON-over-HTTP client with a fixed pre-request delay and a request counter.

    The counter belongs to this instance, not to the process. Callers that
    want a per-run count reset it (or diff it) around the run.
    """

    def __init__(
        self,
        rate_limit: Optional[RateLimitPolicy] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            rate_limit: Policy applied before every request (default 0.5 s fixed delay)
            timeout: Seconds before requests gives up on a response
            session: Session to send requests through (a new one if omitted)
        """
        self.rate_limit = rate_limit or FixedDelayPolicy()
        self.timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._request_count = 0

    @property
    def request_count(self) -> int:
        """Number of requests dispatched since creation or the last reset."""
        return self._request_count

    def reset_request_count(self) -> None:
        self._request_count = 0

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Fetch a URL and parse the body as JSON.

        Args:
            url: Resource to fetch
            params: Query string parameters

        Returns:
            The parsed JSON body

        Raises:
            TransportError: Non-success HTTP status, or an ArcGIS error body
            ResponseShapeError: Body is not valid JSON
        """
        self.rate_limit.wait()
        self._request_count += 1

        response = self._session.get(url, params=params, timeout=self.timeout)
        requested_url = getattr(response, "url", None) or url
        logger.debug(f"GET {requested_url} -> {response.status_code}")

        if not response.ok:
            raise TransportError(response.status_code, requested_url)

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseShapeError(f"Response from {requested_url} is not JSON: {e}") from e

        # ArcGIS reports many failures as HTTP 200 with an error object
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            raise TransportError(
                _error_status(error),
                requested_url,
                error.get("message")
            )

        return body

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "HttpJsonClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
