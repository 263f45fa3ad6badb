from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Sequence

from unit_contracts.geometry import LineSegment, Point, Rect
from unit_contracts.regions import GroupedRegion, GroupedResult
from unit_contracts.units import MinimumUnit, UnitType, UnitValidationError

from .config import GroupingConfig
from .distance import DistanceFunc, DistanceFuncKind, resolve_distance_func
from .obstruction import LineSearchIndex, exists_line_between_units

logger = logging.getLogger(__name__)


def get_min_max_y(unit: MinimumUnit) -> tuple[int, int]:
    low_y = min(unit.real_upper_right().y, unit.real_upper_left().y)
    high_y = max(unit.real_lower_right().y, unit.real_lower_left().y)
    return low_y, high_y


def get_center_point(unit: MinimumUnit) -> Point:
    corners = (unit.real_upper_left(), unit.real_upper_right(), unit.real_lower_right(), unit.real_lower_left())
    # Integer average, truncated toward zero.
    return Point(math.trunc(sum(p.x for p in corners) / 4), math.trunc(sum(p.y for p in corners) / 4))


def is_same_line(source: MinimumUnit | None, target: MinimumUnit | None, *, tolerance: int = 5) -> bool:
    if source is None or target is None:
        return False
    min1, max1 = get_min_max_y(source)
    min2, max2 = get_min_max_y(target)
    center_dy = abs(get_center_point(source).y - get_center_point(target).y)
    return center_dy <= tolerance and abs(min1 - min2) <= tolerance and abs(max1 - max2) <= tolerance


def get_angle(p1: Point, p2: Point) -> float:
    angle = math.degrees(math.atan2(p2.y - p1.y, p2.x - p1.x))
    return angle - 180 if angle >= 180 else angle


def can_combine(
    front_distance: int,
    back_distance: int,
    last_x_distance: int,
    angle: float,
    threshold: int,
    *,
    max_angle: float = 30.0,
) -> bool:
    """
    Decide whether a unit continues the current word.

    The gap in front of the unit must resemble either the gap behind it or
    the previous gap inside the word; a zero back gap (last unit) only
    compares against the previous gap.
    """

    if angle >= max_angle:
        return False
    front_distance = abs(front_distance)
    back_distance = abs(back_distance)
    if back_distance != 0:
        return abs(front_distance - back_distance) < threshold or abs(front_distance - last_x_distance) < threshold
    return abs(front_distance - last_x_distance) < threshold


def combine_units(units: Sequence[MinimumUnit]) -> GroupedRegion:
    if not units:
        raise ValueError("cannot combine zero units into a region")

    text = "".join(u.get_text() for u in units)

    min_x = units[0].real_upper_left().x
    max_x = units[-1].real_upper_right().x
    min_y = min(u.real_upper_left().y for u in units)
    max_y = max(u.real_lower_left().y for u in units)

    average = sum(u.confidence for u in units) / len(units)
    return GroupedRegion(
        text=text,
        confidence=int(round(average * 100)),
        bounds=Rect(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y),
    )


def move_to_result_lists(
    result_list: list[GroupedRegion],
    low_confidence_list: list[GroupedRegion],
    source_list: Iterable[GroupedRegion],
    confidence_threshold: float,
) -> None:
    """
    Partition `source_list` by a percentage threshold (0..100).
    """

    for region in source_list:
        if region.confidence <= confidence_threshold:
            low_confidence_list.append(region)
        else:
            result_list.append(region)


def group_minimum_units(
    units: Sequence[MinimumUnit] | None,
    lines: Iterable[LineSegment] | None = None,
    config: GroupingConfig | None = None,
    *,
    distance_funcs: Mapping[DistanceFuncKind, DistanceFunc] | None = None,
) -> GroupedResult | None:
    """
    Group minimum units into text regions in one left-to-right scan.

    `units` must already be in reading order. Punctuation is attached to a
    neighbouring unit instead of being buffered on its own. The units are
    mutated in place (attachments, hard_break, unit_type).

    Returns None for empty or missing input.
    """

    if not units:
        return None

    cfg = GroupingConfig() if config is None else config
    units = list(units)
    for i, u in enumerate(units):
        if not isinstance(u, MinimumUnit):
            raise UnitValidationError(f"units[{i}]", f"expected MinimumUnit, got {type(u).__name__}")

    distance_func = resolve_distance_func(cfg.distance_func, distance_funcs)
    line_list = None if lines is None else list(lines)
    index = LineSearchIndex(line_list, cell_size=cfg.obstruction_cell_px)
    tolerance = cfg.same_line_tolerance_px
    threshold_pct = cfg.confidence_threshold * 100

    combined: list[GroupedRegion] = []
    low_confidence: list[GroupedRegion] = []
    all_regions: list[GroupedRegion] = []
    buffer: list[MinimumUnit] = []
    last_x_distance = 0
    dropped = 0
    vetoed = 0

    def flush() -> None:
        if buffer:
            region = combine_units(buffer)
            logger.debug("Region %r from %d unit(s), confidence=%d", region.text, len(buffer), region.confidence)
            all_regions.append(region)
            buffer.clear()

    def attach_forward(current: MinimumUnit, nxt: MinimumUnit | None) -> bool:
        if nxt is None or not is_same_line(nxt, current, tolerance=tolerance):
            return False
        if not exists_line_between_units(index, current, nxt):
            nxt.prepend(current)
            return True
        return False

    for idx, current in enumerate(units):
        if not buffer:
            buffer.append(current)
            continue

        previous = buffer[-1]
        if previous.is_stop():
            flush()
            last_x_distance = 0
            buffer.append(current)
            continue

        nxt: MinimumUnit | None = None
        x_back_distance = 0
        if idx + 1 < len(units):
            nxt = units[idx + 1]
            x_back_distance = nxt.real_upper_left().x - current.real_upper_right().x

        if current.is_punctuation():
            current.unit_type = UnitType.PUNCTUATION
            attached = True
            one_line = is_same_line(previous, current, tolerance=tolerance)
            if one_line and not current.is_right_bracket():
                if not exists_line_between_units(index, previous, current):
                    if current.is_stop():
                        current.upper_right = previous.real_upper_right()
                        current.lower_right = previous.real_lower_right()
                        previous.hard_break = True
                        current.hard_break = True
                        previous.append(current)
                        flush()
                        last_x_distance = 0
                    elif current.is_join():
                        previous.append(current)
                        previous.unit_type = UnitType.CHAR_WITH_JOIN
                    elif current.is_split():
                        previous.append(current)
                        previous.hard_break = True
                    else:
                        attached = attach_forward(current, nxt)
                else:
                    attached = attach_forward(current, nxt)
            elif one_line:
                if not exists_line_between_units(index, previous, current):
                    previous.append(current)
                else:
                    attached = attach_forward(current, nxt)
            else:
                attached = attach_forward(current, nxt)

            if not attached:
                dropped += 1
                logger.debug("Dropping punctuation %r at index %d: no neighbour to attach to", current.text, idx)
            continue

        x_front_distance = current.real_upper_left().x - previous.real_upper_right().x
        angle = get_angle(previous.real_upper_right(), current.real_upper_left())
        is_one_word = can_combine(
            x_front_distance,
            x_back_distance,
            last_x_distance,
            angle,
            distance_func(units, idx),
            max_angle=cfg.max_merge_angle_deg,
        )
        last_x_distance = x_front_distance

        if is_one_word and line_list is not None and exists_line_between_units(index, previous, current):
            is_one_word = False
            vetoed += 1
            logger.debug("Separator line blocks merging %r with %r", previous.text, current.text)

        if not is_one_word:
            flush()
            last_x_distance = 0

            # A hard break on the incoming unit closes the paragraph, not just the word.
            if current.hard_break:
                move_to_result_lists(combined, low_confidence, all_regions, threshold_pct)
                all_regions.clear()

        buffer.append(current)

    flush()
    move_to_result_lists(combined, low_confidence, all_regions, threshold_pct)

    logger.debug(
        "Grouped %d unit(s) into %d region(s) (%d low confidence); dropped=%d vetoed=%d",
        len(units),
        len(combined) + len(low_confidence),
        len(low_confidence),
        dropped,
        vetoed,
    )

    return GroupedResult(grouped_regions=combined, low_confidence_regions=low_confidence)
