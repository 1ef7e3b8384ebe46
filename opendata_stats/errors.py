# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Exception hierarchy for the package.
#
# CLASSES:
# --------
# - StatsError            → base for everything raised here
# - TransportError        → non-success status from a remote call
# - ResponseShapeError    → response body is not the expected JSON shape
#
# ==============================================

from typing import Optional


class StatsError(Exception):
    """
    Base exception for all statistics errors
    """
    pass


class TransportError(StatsError):
    """
    Raised when a remote call answers with a non-success status.

    ArcGIS servers sometimes answer HTTP 200 with an ``{"error": {...}}``
    body; those are reported here too, with the embedded code as status.
    """

    def __init__(self, status: int, url: str, message: Optional[str] = None):
        self.status = status
        self.url = url
        self.message = message
        text = f"HTTP Error: {status} - {url}"
        if message:
            text = f"{text} ({message})"
        super().__init__(text)


class ResponseShapeError(StatsError, ValueError):
    """
    Raised when a response cannot be parsed or lacks the expected keys
    """
    pass
