# ==============================================
# Rate Limiting
# ==============================================
#
# PURPOSE:
#   Throttle outgoing requests so a run never hammers the server.
#   The policy is an object injected into the HTTP client, so tests
#   (and callers with their own limits) can swap it.
#
# CLASSES:
# --------
# - RateLimitPolicy   → interface: wait() before each request
# - FixedDelayPolicy  → sleep a fixed interval, unconditionally
#
# ==============================================

import time
from abc import ABC, abstractmethod
from typing import Callable


class RateLimitPolicy(ABC):
    """Called by the HTTP client immediately before each request."""

    @abstractmethod
    def wait(self) -> None:
        pass


class FixedDelayPolicy(RateLimitPolicy):
    """
    Sleep the same interval before every request.

    Not adaptive: the delay is applied regardless of what earlier
    requests returned.
    """

    def __init__(self, interval_seconds: float = 0.5, sleep: Callable[[float], None] = time.sleep):
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self._sleep = sleep

    def wait(self) -> None:
        if self.interval_seconds > 0:
            self._sleep(self.interval_seconds)

    def __repr__(self) -> str:
        return f"FixedDelayPolicy(interval_seconds={self.interval_seconds})"
