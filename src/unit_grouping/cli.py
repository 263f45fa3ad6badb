from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from unit_contracts.geometry import LineValidationError
from unit_contracts.units import UnitValidationError

from .artifacts import build_grouping_payload, load_units_payload, write_grouping_json_artifact
from .config import GroupingConfig
from .distance import DistanceFuncKind
from .errors import GroupingConfigError
from .group_units import group_minimum_units
from .ordering import sort_reading_order

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="unit-grouping",
        description="Group minimum text units (glyphs) into word/phrase regions.",
    )
    p.add_argument("--input", required=True, type=Path, help="Path to the units JSON artifact.")
    p.add_argument("--output", required=True, type=Path, help="Path to write the grouping JSON artifact.")
    p.add_argument("--confidence-threshold", type=float, default=0.8)
    p.add_argument(
        "--distance-func",
        choices=[k.value for k in DistanceFuncKind],
        default=DistanceFuncKind.FIXED.value,
    )
    p.add_argument("--same-line-tolerance", type=int, default=5)
    p.add_argument(
        "--sort-reading-order",
        action="store_true",
        default=False,
        help="Sort units top-Y then left-X before grouping (input is otherwise used as given).",
    )
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        cfg = GroupingConfig(
            confidence_threshold=args.confidence_threshold,
            distance_func=DistanceFuncKind(args.distance_func),
            same_line_tolerance_px=args.same_line_tolerance,
        )
        raw = json.loads(args.input.read_text(encoding="utf-8"))
        units, lines = load_units_payload(raw)
    except (UnitValidationError, LineValidationError, GroupingConfigError) as e:
        print(f"unit-grouping: invalid input: {e}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError, TypeError, KeyError, ValueError) as e:
        print(f"unit-grouping: cannot read {args.input}: {type(e).__name__}: {e}", file=sys.stderr)
        return 2

    if args.sort_reading_order:
        units = sort_reading_order(units, line_tolerance_px=cfg.same_line_tolerance_px)

    logger.info("Grouping %d unit(s) from %s", len(units), args.input)
    result = group_minimum_units(units, lines, cfg)

    payload = build_grouping_payload(
        result,
        config=cfg,
        units_in=len(units),
        lines_in=None if lines is None else len(lines),
        source_units_relpath=str(args.input),
    )
    write_grouping_json_artifact(payload=payload, out_file=args.output)

    summary = {
        "ok": payload["ok"],
        "units": len(units),
        "regions": len(payload["regions"]),
        "low_confidence_regions": len(payload["low_confidence_regions"]),
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
