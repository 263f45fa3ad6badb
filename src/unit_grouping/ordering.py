from __future__ import annotations

from typing import Iterable

from unit_contracts.units import MinimumUnit


def _top(u: MinimumUnit) -> int:
    return min(u.real_upper_left().y, u.real_upper_right().y)


def _left(u: MinimumUnit) -> int:
    return min(u.real_upper_left().x, u.real_lower_left().x)


def sort_reading_order(units: Iterable[MinimumUnit], *, line_tolerance_px: int = 5) -> list[MinimumUnit]:
    """
    Order units top-Y then left-X, returning a new list.

    The grouping engine expects its input in reading order and never sorts;
    callers whose detector does not guarantee that order can apply this first.
    A unit joins the current row when its top edge is within
    `line_tolerance_px` of the row's first (topmost) unit.
    """

    if line_tolerance_px < 0:
        raise ValueError("line_tolerance_px must be >= 0")

    # Deterministic sweep: y, then x, then original position.
    sweep = sorted(enumerate(units), key=lambda p: (_top(p[1]), _left(p[1]), p[0]))

    rows: list[list[tuple[int, MinimumUnit]]] = []
    for pos, unit in sweep:
        if rows and _top(unit) - _top(rows[-1][0][1]) <= line_tolerance_px:
            rows[-1].append((pos, unit))
        else:
            rows.append([(pos, unit)])

    out: list[MinimumUnit] = []
    for row in rows:
        out.extend(u for _, u in sorted(row, key=lambda p: (_left(p[1]), p[0])))
    return out
