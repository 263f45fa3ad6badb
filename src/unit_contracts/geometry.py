from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


class LineValidationError(ValueError):
    """
    A separator line failed validation. `field` names the offending endpoint coordinate.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


@dataclass(frozen=True, slots=True)
class Point:
    """
    Integer pixel coordinate. y grows downwards (image convention).
    """

    x: int
    y: int

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Point":
        return Point(x=int(d["x"]), y=int(d["y"]))

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle anchored at its top-left corner.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Rect":
        return Rect(x=int(d["x"]), y=int(d["y"]), width=int(d["width"]), height=int(d["height"]))

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class LineSegment:
    """
    Separator line (table border, rule) supplied by layout detection.
    Endpoints are floating point, in the same pixel space as the units.
    """

    x0: float
    y0: float
    x1: float
    y1: float

    def __post_init__(self) -> None:
        for name in ("x0", "y0", "x1", "y1"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise LineValidationError(name, f"expected a number, got {v!r}")
            if not math.isfinite(v):
                raise LineValidationError(name, f"must be finite, got {v!r}")

    def is_degenerate(self) -> bool:
        return self.x0 == self.x1 and self.y0 == self.y1

    def bounds(self) -> tuple[float, float, float, float]:
        return (min(self.x0, self.x1), min(self.y0, self.y1), max(self.x0, self.x1), max(self.y0, self.y1))

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LineSegment":
        p1 = d["p1"]
        p2 = d["p2"]
        if not isinstance(p1, dict) or not isinstance(p2, dict):
            raise TypeError("LineSegment endpoints must be objects with x and y")
        coords: dict[str, float] = {}
        for name, p, key in (("x0", p1, "x"), ("y0", p1, "y"), ("x1", p2, "x"), ("y1", p2, "y")):
            try:
                coords[name] = float(p[key])
            except (TypeError, ValueError) as e:
                raise LineValidationError(name, f"expected a number, got {p[key]!r}") from e
        return LineSegment(**coords)

    def to_dict(self) -> dict[str, Any]:
        return {"p1": {"x": self.x0, "y": self.y0}, "p2": {"x": self.x1, "y": self.y1}}
