from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from unit_contracts.geometry import LineSegment, LineValidationError
from unit_contracts.regions import GroupedResult
from unit_contracts.units import MinimumUnit, UnitValidationError

from .config import GroupingConfig

ARTIFACT_VERSION = "unit_grouping_v1"


def load_units_payload(d: dict[str, Any]) -> tuple[list[MinimumUnit], list[LineSegment] | None]:
    """
    Parse an input artifact: {"units": [...], "lines": [...] | null}.
    """

    if not isinstance(d, dict):
        raise TypeError("units artifact must be a JSON object")
    units_raw = d.get("units") or []
    if not isinstance(units_raw, list):
        raise TypeError("units artifact 'units' must be a list")

    units: list[MinimumUnit] = []
    for i, raw in enumerate(units_raw):
        try:
            units.append(MinimumUnit.from_dict(raw))
        except UnitValidationError as e:
            raise UnitValidationError(f"units[{i}].{e.field}", e.message) from e

    lines_raw = d.get("lines")
    if lines_raw is None:
        return units, None
    if not isinstance(lines_raw, list):
        raise TypeError("units artifact 'lines' must be a list or null")
    lines: list[LineSegment] = []
    for i, raw in enumerate(lines_raw):
        if not isinstance(raw, dict):
            raise TypeError(f"units artifact lines[{i}] must be an object")
        try:
            lines.append(LineSegment.from_dict(raw))
        except LineValidationError as e:
            raise LineValidationError(f"lines[{i}].{e.field}", e.message) from e
    return units, lines


def build_grouping_payload(
    result: GroupedResult | None,
    *,
    config: GroupingConfig,
    units_in: int,
    lines_in: int | None,
    source_units_relpath: str | None = None,
) -> dict[str, Any]:
    regions = GroupedResult(grouped_regions=[], low_confidence_regions=[]) if result is None else result
    out: dict[str, Any] = {"ok": True, **regions.to_dict()}
    out["meta"] = {
        "version": ARTIFACT_VERSION,
        "grouping_config": config.to_dict(),
        "counts": {
            "units_in": units_in,
            "lines_in": lines_in,
            "regions": len(regions.grouped_regions),
            "low_confidence_regions": len(regions.low_confidence_regions),
        },
        "empty_input": result is None,
        "source_units_relpath": source_units_relpath,
    }
    return out


def serialize_grouping_payload(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_grouping_json_artifact(*, payload: dict[str, Any], out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_grouping_payload(payload), encoding="utf-8")
