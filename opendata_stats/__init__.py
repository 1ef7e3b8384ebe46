# ==============================================
# OpenData-style Statistics for ArcGIS Feature Layers
# ==============================================
#
# Package Structure (3 Topics + Orchestrator):
#
# opendata_stats/
# ├── transport/      # Topic 1: Talk to the layer (HTTP, throttle, query endpoints)
# ├── analysis/       # Topic 2: Classify fields & plan aggregation batches
# ├── statistics/     # Topic 3: Run queries, merge results, orchestrate
# ├── persistence/    # Topic 4: Write results to disk
# ├── config.py       # Configuration management
# ├── errors.py       # Exception hierarchy
# ├── logger.py       # Logging setup
# └── cli.py          # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
