from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .distance import DistanceFuncKind
from .errors import GroupingConfigError


@dataclass(frozen=True, slots=True)
class GroupingConfig:
    """
    Per-call grouping parameters.

    Defaults reproduce the reference behaviour. Instances are immutable and
    passed into each grouping call; nothing is shared between calls.
    """

    # Regions whose integer confidence is <= threshold * 100 are low-confidence.
    confidence_threshold: float = 0.8
    distance_func: DistanceFuncKind = DistanceFuncKind.FIXED

    # Same-line test: center/min/max Y differences must all be <= this.
    same_line_tolerance_px: int = 5
    # Units whose connecting angle reaches this are never merged.
    max_merge_angle_deg: float = 30.0

    obstruction_cell_px: int = 64

    def validate(self) -> None:
        if not (0.0 <= self.confidence_threshold <= 1.0):
            raise GroupingConfigError("confidence_threshold must be within [0, 1]")
        if not isinstance(self.distance_func, DistanceFuncKind):
            raise GroupingConfigError(f"distance_func must be a DistanceFuncKind, got {self.distance_func!r}")
        if self.same_line_tolerance_px < 0:
            raise GroupingConfigError("same_line_tolerance_px must be >= 0")
        if not (0.0 < self.max_merge_angle_deg <= 180.0):
            raise GroupingConfigError("max_merge_angle_deg must be within (0, 180]")
        if self.obstruction_cell_px <= 0:
            raise GroupingConfigError("obstruction_cell_px must be > 0")

    def __post_init__(self) -> None:
        self.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "confidence_threshold": self.confidence_threshold,
            "distance_func": self.distance_func.value,
            "same_line_tolerance_px": self.same_line_tolerance_px,
            "max_merge_angle_deg": self.max_merge_angle_deg,
            "obstruction_cell_px": self.obstruction_cell_px,
        }
