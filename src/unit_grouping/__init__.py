"""
Minimum-unit grouping: glyphs -> word/phrase regions.

- single left-to-right scan over units already in reading order
- punctuation attaches to a neighbouring unit instead of standing alone
- separator lines (table borders) veto merges
- output split into accepted / low-confidence regions

No recognition, no confidence estimation, no table detection.
"""

from .config import GroupingConfig
from .distance import DISTANCE_FUNCS, DistanceFuncKind, get_distance_func, resolve_distance_func
from .errors import GroupingConfigError
from .group_units import combine_units, group_minimum_units, is_same_line
from .obstruction import LineSearchIndex
from .ordering import sort_reading_order

__all__ = [
    "GroupingConfig",
    "GroupingConfigError",
    "DistanceFuncKind",
    "DISTANCE_FUNCS",
    "get_distance_func",
    "resolve_distance_func",
    "LineSearchIndex",
    "combine_units",
    "group_minimum_units",
    "is_same_line",
    "sort_reading_order",
]
