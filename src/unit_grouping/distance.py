from __future__ import annotations

from enum import Enum
from typing import Callable, Mapping, Sequence

from unit_contracts.units import MinimumUnit

from .errors import GroupingConfigError

# (units in scan order, index of the unit being tested) -> merge threshold in pixels
DistanceFunc = Callable[[Sequence[MinimumUnit], int], int]

FIXED_DISTANCE_THRESHOLD = 15


class DistanceFuncKind(str, Enum):
    """
    Merge-threshold strategies. The set is closed; implementations may be
    swapped per call by passing a different mapping to the engine.
    """

    FIXED = "fixed"
    ADAPTIVE_INFERENCE = "adaptive_inference"


def fixed_distance(units: Sequence[MinimumUnit], idx: int) -> int:
    return FIXED_DISTANCE_THRESHOLD


def adaptive_inference_distance(units: Sequence[MinimumUnit], idx: int) -> int:
    """
    Placeholder for a context-sensitive threshold. Always 0, which makes
    every distance check fail, so this kind currently never merges units.
    """

    return 0


DISTANCE_FUNCS: Mapping[DistanceFuncKind, DistanceFunc] = {
    DistanceFuncKind.FIXED: fixed_distance,
    DistanceFuncKind.ADAPTIVE_INFERENCE: adaptive_inference_distance,
}


def get_distance_func(
    kind: DistanceFuncKind, funcs: Mapping[DistanceFuncKind, DistanceFunc] | None = None
) -> DistanceFunc | None:
    """
    Look up a strategy; None when `kind` is not registered.
    """

    registry = DISTANCE_FUNCS if funcs is None else funcs
    return registry.get(kind)


def resolve_distance_func(
    kind: DistanceFuncKind, funcs: Mapping[DistanceFuncKind, DistanceFunc] | None = None
) -> DistanceFunc:
    func = get_distance_func(kind, funcs)
    if func is None:
        raise GroupingConfigError(f"No merge-threshold strategy registered for {kind!r}")
    return func
