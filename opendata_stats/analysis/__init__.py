# ==============================================
# TOPIC 2: ANALYSIS & PLANNING
# ==============================================
#
# This package turns a layer schema into a plan of aggregation
# requests.
#
# Two-step process:
#   Step 1 (Classification): raw field type tag → FieldCategory
#   Step 2 (Planning):       classified fields → batches of statistic directives
#
# Modules:
# --------
# - field_category.py → FieldCategory enum, FieldDescriptor, ClassifiedField
# - classifier.py     → Map esri type tags to categories
# - directives.py     → Statistic enum, StatDirective, directives_for()
# - batch_planner.py  → Split aggregatable fields into fixed-size batches
#
# ==============================================

from .field_category import ClassifiedField, FieldCategory, FieldDescriptor
from .classifier import FieldClassifier
from .directives import Statistic, StatDirective, directives_for
from .batch_planner import Batch, BatchPlanner

__all__ = [
    "ClassifiedField",
    "FieldCategory",
    "FieldDescriptor",
    "FieldClassifier",
    "Statistic",
    "StatDirective",
    "directives_for",
    "Batch",
    "BatchPlanner"
]
