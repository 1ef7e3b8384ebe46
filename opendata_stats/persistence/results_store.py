import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from opendata_stats.logger import get_logger
from opendata_stats.statistics.records import OpenDataStatistics

logger = get_logger(__name__)


# ==============================================
# ResultsStore
# ==============================================
#
# PURPOSE:
#   Persist finished statistics runs as pretty-printed JSON files,
#   one file per run, named after the UTC time the run was saved.
#
# FILE STRUCTURE:
# ---------------
#   results/
#   ├── results_2026-10-18T19-12-03-512Z.json
#   └── results_2026-10-18T20-40-11-007Z.json
#
#   Each file holds OpenDataStatistics.to_dict():
#     {"numeric": {...}, "string": {...}, "date": {...}, "objectid": {...}}
#
# CLASS: ResultsStore
# -------------------
#   Stateful — holds a reference to the results directory.
#
class ResultsStore:
    """
    Saves and loads statistics results.
    """

    FILE_PREFIX = "results_"

    def __init__(self, results_dir: str = "results/"):
        """
        Args:
            results_dir: Directory to write result files into (created on first save)
        """
        self.results_dir = Path(results_dir)

    @classmethod
    def filename_for(cls, moment: datetime) -> str:
        """
        File name for a run saved at `moment`: ISO timestamp with ':' and '.'
        replaced by '-' so it is valid on every filesystem.
        """
        moment = moment.astimezone(timezone.utc)
        stamp = moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
        return f"{cls.FILE_PREFIX}{stamp.replace(':', '-').replace('.', '-')}.json"

    def save(self, statistics: OpenDataStatistics, moment: Optional[datetime] = None) -> Path:
        """
        Write statistics to a new timestamped file.

        Args:
            statistics: Result of a statistics run
            moment: Timestamp for the file name (default: now)

        Returns:
            Path of the written file
        """
        self.results_dir.mkdir(parents=True, exist_ok=True)
        path = self.results_dir / self.filename_for(moment or datetime.now(timezone.utc))

        with open(path, "w", encoding="utf-8") as f:
            json.dump(statistics.to_dict(), f, indent=2)

        logger.info(f"Saved statistics to {path}")
        return path

    def load(self, path: Path) -> OpenDataStatistics:
        with open(path, "r", encoding="utf-8") as f:
            return OpenDataStatistics.from_dict(json.load(f))

    def list_results(self) -> List[Path]:
        """Saved result files, oldest first."""
        if not self.results_dir.exists():
            return []
        return sorted(self.results_dir.glob(f"{self.FILE_PREFIX}*.json"))

    def latest(self) -> Optional[OpenDataStatistics]:
        """Most recently saved statistics, or None when nothing has been saved."""
        results = self.list_results()
        if not results:
            return None
        return self.load(results[-1])
