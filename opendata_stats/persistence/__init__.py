# ==============================================
# TOPIC 4: PERSISTENCE (Results on disk)
# ==============================================
#
# This package writes finished statistics runs to disk and reads
# them back.
#
# Modules:
# --------
# - results_store.py  → Save/load timestamped results JSON files
#
# ==============================================

from .results_store import ResultsStore

__all__ = ["ResultsStore"]
