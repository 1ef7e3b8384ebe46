# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Compute statistics for a layer from the command line, print
#   them as JSON, write them to a timestamped results file and
#   report how many HTTP requests the run made.
#
# USAGE:
# ------
#   python -m opendata_stats.cli https://.../FeatureServer/0
#   python -m opendata_stats.cli URL --batch-size 5 --delay 0.25
#   python -m opendata_stats.cli URL --no-save --verbose
#
#   Without URL, ODSTATS_LAYER_URL from the environment / .env is used.
#
# EXIT CODES:
# -----------
#   0 → statistics computed
#   1 → a request failed or a response was malformed
#   2 → bad arguments (argparse)
#
# ==============================================

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import requests

from opendata_stats.config import AppConfig, StatsConfig, get_config
from opendata_stats.errors import StatsError, TransportError
from opendata_stats.logger import set_level
from opendata_stats.persistence.results_store import ResultsStore
from opendata_stats.statistics.engine import StatisticsEngine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opendata-stats",
        description="Compute OpenData-style field statistics for an ArcGIS feature layer."
    )
    parser.add_argument("layer_url", nargs="?", help="Layer URL, e.g. .../FeatureServer/0")
    parser.add_argument("--batch-size", type=int, help="Fields per aggregate query")
    parser.add_argument("--delay", type=float, help="Seconds to wait before every request")
    parser.add_argument("--timeout", type=float, help="Seconds before a request times out")
    parser.add_argument("--results-dir", help="Directory for the results JSON file")
    parser.add_argument("--no-save", action="store_true", help="Print results without writing a file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every request")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return a copy of config with command line flags applied."""
    http = config.http
    if args.delay is not None:
        http = replace(http, request_delay_seconds=args.delay)
    if args.timeout is not None:
        http = replace(http, timeout_seconds=args.timeout)

    stats = config.stats
    if args.batch_size is not None:
        stats = StatsConfig(batch_size=args.batch_size)

    return replace(
        config,
        http=http,
        stats=stats,
        layer_url=args.layer_url or config.layer_url,
        results_dir=args.results_dir or config.results_dir
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_overrides(get_config(), args)
    except ValueError as e:
        parser.error(str(e))

    if not config.layer_url:
        parser.error("a layer URL is required (argument or ODSTATS_LAYER_URL)")

    if args.verbose:
        set_level(logging.DEBUG)

    print("Fetching statistics...\n", file=sys.stderr)

    engine = StatisticsEngine.from_config(config)
    try:
        statistics = engine.compute(config.layer_url)
    except TransportError as e:
        print(f"✗ Error: request failed with status {e.status}: {e.url}", file=sys.stderr)
        return 1
    except (StatsError, requests.RequestException) as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1
    finally:
        engine.http.close()

    print(json.dumps(statistics.to_dict(), indent=2))

    if not args.no_save:
        path = ResultsStore(config.results_dir).save(statistics)
        print(f"\nResults written to: {path}", file=sys.stderr)

    print(f"\nHTTP requests made: {engine.last_run_request_count}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
