from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Iterable

from unit_contracts.geometry import LineSegment, Rect
from unit_contracts.units import MinimumUnit

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = 64
MAX_CELLS_PER_LINE = 4096


def _cell_range(lo: float, hi: float, cell_size: int) -> range:
    return range(math.floor(lo / cell_size), math.floor(hi / cell_size) + 1)


def _span(r: range) -> int:
    # len() overflows for ranges wider than sys.maxsize.
    return r.stop - r.start


def segment_crosses_interior(segment: LineSegment, rect: Rect) -> bool:
    """
    True iff `segment` passes through the open interior of `rect`.

    Segments that only touch or run along the boundary do not count, and a
    rectangle with zero width or height has no interior.
    """

    x0, y0, x1, y1 = rect.x, rect.y, rect.right, rect.bottom
    if x1 <= x0 or y1 <= y0:
        return False

    # Liang-Barsky clip against the closed rectangle.
    dx = segment.x1 - segment.x0
    dy = segment.y1 - segment.y0
    t0, t1 = 0.0, 1.0
    for p, q in (
        (-dx, segment.x0 - x0),
        (dx, x1 - segment.x0),
        (-dy, segment.y0 - y0),
        (dy, y1 - segment.y0),
    ):
        if p == 0:
            if q < 0:
                return False
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return False
            t0 = max(t0, t)
        else:
            if t < t0:
                return False
            t1 = min(t1, t)

    if t0 >= t1:
        return False

    # A clipped chord not lying on an edge has its midpoint strictly inside.
    tm = (t0 + t1) / 2.0
    mx = segment.x0 + tm * dx
    my = segment.y0 + tm * dy
    return x0 < mx < x1 and y0 < my < y1


class LineSearchIndex:
    """
    Uniform-grid index over separator lines.

    Each segment is bucketed into every cell its bounding box covers. A query
    only inspects segments sharing a cell with the query rectangle, so the
    per-query cost depends on local line density rather than the total count.
    Segments spanning more than `max_cells` cells are kept on a separate list
    checked by every query, and a query rectangle that large scans all lines.
    """

    def __init__(
        self,
        lines: Iterable[LineSegment] | None,
        *,
        cell_size: int = DEFAULT_CELL_SIZE,
        max_cells: int = MAX_CELLS_PER_LINE,
    ) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be > 0")
        if max_cells <= 0:
            raise ValueError("max_cells must be > 0")
        self.cell_size = cell_size
        self.max_cells = max_cells
        self.lines: list[LineSegment] = []
        self._cells: dict[tuple[int, int], list[int]] = defaultdict(list)
        self._long: list[int] = []

        for seg in lines or ():
            if seg.is_degenerate():
                logger.debug("Skipping zero-length separator line at (%s, %s)", seg.x0, seg.y0)
                continue
            idx = len(self.lines)
            self.lines.append(seg)
            bx0, by0, bx1, by1 = seg.bounds()
            xs = _cell_range(bx0, bx1, cell_size)
            ys = _cell_range(by0, by1, cell_size)
            span = _span(xs) * _span(ys)
            if span > max_cells:
                logger.debug("Separator line %d spans %d cells; kept unbucketed", idx, span)
                self._long.append(idx)
                continue
            for cx in xs:
                for cy in ys:
                    self._cells[(cx, cy)].append(idx)

    def __len__(self) -> int:
        return len(self.lines)

    def candidates(self, rect: Rect) -> list[int]:
        if not self.lines:
            return []
        xs = _cell_range(rect.x, rect.right, self.cell_size)
        ys = _cell_range(rect.y, rect.bottom, self.cell_size)
        if _span(xs) * _span(ys) > self.max_cells:
            return list(range(len(self.lines)))
        seen: set[int] = set(self._long)
        for cx in xs:
            for cy in ys:
                bucket = self._cells.get((cx, cy))
                if bucket:
                    seen.update(bucket)
        return sorted(seen)

    def exists_line_in_region(self, rect: Rect) -> bool:
        if rect.width <= 0 or rect.height <= 0:
            return False
        return any(segment_crosses_interior(self.lines[i], rect) for i in self.candidates(rect))


def region_between_units(unit1: MinimumUnit, unit2: MinimumUnit) -> Rect:
    """
    Rectangle spanning two units: from the left unit's real left edge to the
    right unit's real right edge, over both units' real vertical extents.
    """

    if unit1.real_upper_right().x < unit2.real_upper_right().x:
        left, right = unit1, unit2
    else:
        left, right = unit2, unit1

    x = left.real_upper_left().x
    top = min(left.real_upper_left().y, right.real_upper_left().y)
    bottom = max(left.real_lower_left().y, right.real_lower_left().y)
    return Rect(x=x, y=top, width=abs(right.real_upper_right().x - x), height=abs(bottom - top))


def exists_line_between_units(index: LineSearchIndex, unit1: MinimumUnit, unit2: MinimumUnit) -> bool:
    return index.exists_line_in_region(region_between_units(unit1, unit2))
