# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - HttpConfig (dataclass)
#     request_delay_seconds: float  (default 0.5)
#     timeout_seconds: float        (default 30.0)
#
# - StatsConfig (dataclass)
#     batch_size: int               (default 1)
#
# - AppConfig (dataclass)
#     http: HttpConfig
#     stats: StatsConfig
#     layer_url: str | None         (default None)
#     results_dir: str              (default "results/")
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Drop the cached singleton (tests, long-lived processes).
#
# USAGE:
# ------
#   from opendata_stats.config import get_config
#   config = get_config()
#   print(config.http.request_delay_seconds)
#   print(config.stats.batch_size)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_REQUEST_DELAY_SECONDS = 0.5
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_BATCH_SIZE = 1
DEFAULT_RESULTS_DIR = "results/"


@dataclass
class HttpConfig:
    """HTTP transport configuration."""
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        if self.request_delay_seconds < 0:
            raise ValueError(f"request_delay_seconds must be >= 0, got {self.request_delay_seconds}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")


@dataclass
class StatsConfig:
    """Statistics run configuration."""
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")


@dataclass
class AppConfig:
    """Main application configuration."""
    http: HttpConfig = field(default_factory=HttpConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)
    layer_url: Optional[str] = None
    results_dir: str = DEFAULT_RESULTS_DIR


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    http_config = HttpConfig(
        request_delay_seconds=float(
            os.getenv("ODSTATS_REQUEST_DELAY_SECONDS", str(DEFAULT_REQUEST_DELAY_SECONDS))
        ),
        timeout_seconds=float(os.getenv("ODSTATS_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)))
    )

    stats_config = StatsConfig(
        batch_size=int(os.getenv("ODSTATS_BATCH_SIZE", str(DEFAULT_BATCH_SIZE)))
    )

    _config_instance = AppConfig(
        http=http_config,
        stats=stats_config,
        layer_url=os.getenv("ODSTATS_LAYER_URL") or None,
        results_dir=os.getenv("ODSTATS_RESULTS_DIR", DEFAULT_RESULTS_DIR)
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
