"""
Schema boundary for minimum-unit grouping.

Upstream detection/recognition produces `MinimumUnit` values (and, optionally,
separator `LineSegment`s); the grouping stage produces a `GroupedResult`.
Stage code should consume/produce these objects, not ad-hoc dicts.
"""

from .geometry import LineSegment, LineValidationError, Point, Rect
from .regions import GroupedRegion, GroupedResult
from .units import MinimumUnit, PunctuationMark, UnitType, UnitValidationError

__all__ = [
    "Point",
    "Rect",
    "LineSegment",
    "LineValidationError",
    "UnitType",
    "PunctuationMark",
    "MinimumUnit",
    "UnitValidationError",
    "GroupedRegion",
    "GroupedResult",
]
