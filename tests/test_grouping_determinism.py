from __future__ import annotations

import json
import unittest

from unit_grouping.artifacts import build_grouping_payload, load_units_payload, serialize_grouping_payload
from unit_grouping.config import GroupingConfig
from unit_grouping.group_units import group_minimum_units


def _box(text: str, x0: int, y0: int, x1: int, y1: int, conf: float = 0.9, unit_type: str = "CJK") -> dict:
    return {
        "text": text,
        "confidence": conf,
        "type": unit_type,
        "upper_left": {"x": x0, "y": y0},
        "upper_right": {"x": x1, "y": y0},
        "lower_right": {"x": x1, "y": y1},
        "lower_left": {"x": x0, "y": y1},
    }


class TestGroupingDeterminism(unittest.TestCase):
    def test_grouping_is_deterministic(self) -> None:
        # Two lines of glyphs with a table border between the last two cells.
        payload = {
            "units": [
                _box("東", 10, 10, 20, 20),
                _box("京", 22, 10, 32, 20),
                _box("、", 33, 10, 35, 20),
                _box("大", 60, 10, 70, 20, conf=0.6),
                _box("阪", 72, 10, 82, 20, conf=0.6),
                _box("N", 10, 40, 18, 50, unit_type="Latin"),
                _box("o", 20, 40, 28, 50, unit_type="Latin"),
                _box(".", 29, 45, 31, 50),
                _box("1", 60, 40, 68, 50, unit_type="Number"),
                _box("2", 70, 40, 78, 50, unit_type="Number"),
            ],
            "lines": [{"p1": {"x": 69, "y": 35}, "p2": {"x": 69, "y": 55}}],
        }
        cfg = GroupingConfig()

        def run() -> str:
            # Units are mutated by a pass, so each run parses a fresh copy.
            units, lines = load_units_payload(json.loads(json.dumps(payload)))
            result = group_minimum_units(units, lines, cfg)
            return serialize_grouping_payload(
                build_grouping_payload(result, config=cfg, units_in=len(units), lines_in=len(lines or []))
            )

        j1 = run()
        j2 = run()
        self.assertEqual(j1, j2)

        out = json.loads(j1)
        self.assertEqual([r["text"] for r in out["regions"]], ["東京、", "N o. ", "1", "2"])
        self.assertEqual([r["text"] for r in out["low_confidence_regions"]], ["大阪"])
        self.assertEqual(out["meta"]["counts"]["units_in"], 10)
        self.assertEqual(out["meta"]["grouping_config"]["distance_func"], "fixed")


if __name__ == "__main__":
    unittest.main()
