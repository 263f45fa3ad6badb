from __future__ import annotations

import math
import unittest

from unit_contracts.geometry import Point
from unit_contracts.units import MinimumUnit, UnitType, UnitValidationError


def _unit(text: str, x0: int, y0: int, x1: int, y1: int, *, conf: float = 0.9, t: UnitType = UnitType.CJK) -> MinimumUnit:
    return MinimumUnit.from_bbox(text=text, x0=x0, y0=y0, x1=x1, y1=y1, confidence=conf, unit_type=t)


class TestMinimumUnit(unittest.TestCase):
    def test_text_composition(self) -> None:
        u = _unit("a", 10, 0, 20, 10, t=UnitType.LATIN)
        self.assertEqual(u.get_text(), "a ")

        u.prepend(_unit("(", 5, 0, 9, 10))
        u.append(_unit(")", 21, 0, 25, 10))
        self.assertEqual(u.get_text(), "(a) ")
        self.assertEqual(u.get_prepend_text(), "(")

        cjk = _unit("字", 0, 0, 10, 10)
        self.assertEqual(cjk.get_text(), "字")
        self.assertEqual(cjk.get_prepend_text(), "")

    def test_real_corners_resolve_through_marks(self) -> None:
        u = _unit("b", 10, 0, 20, 10)
        self.assertEqual(u.real_upper_left(), Point(10, 0))
        self.assertEqual(u.width(), 10)
        self.assertEqual(u.height(), 10)

        u.prepend_text("[", Point(4, 1), Point(4, 11))
        u.append_text("]", Point(26, 1), Point(26, 11))
        self.assertEqual(u.real_upper_left(), Point(4, 1))
        self.assertEqual(u.real_lower_left(), Point(4, 11))
        self.assertEqual(u.real_upper_right(), Point(26, 1))
        self.assertEqual(u.real_lower_right(), Point(26, 11))
        self.assertEqual(u.width(), 22)

        u.discard_prepend()
        u.discard_append()
        self.assertEqual(u.real_upper_left(), Point(10, 0))
        self.assertEqual(u.real_upper_right(), Point(20, 0))
        self.assertEqual(u.get_text(), "b")

    def test_raw_marks_need_text(self) -> None:
        u = _unit("b", 10, 0, 20, 10)
        with self.assertRaises(UnitValidationError) as cm:
            u.prepend_text("", Point(4, 1), Point(4, 11))
        self.assertEqual(cm.exception.field, "text")
        with self.assertRaises(UnitValidationError) as cm:
            u.append_text("", Point(26, 1), Point(26, 11))
        self.assertEqual(cm.exception.field, "text")
        self.assertIsNone(u.prepended)
        self.assertIsNone(u.appended)

    def test_attaching_overwrites_slot(self) -> None:
        u = _unit("c", 0, 0, 10, 10)
        u.append(_unit(",", 11, 0, 13, 10))
        u.append(_unit(".", 14, 0, 16, 10))
        self.assertEqual(u.get_text(), "c.")
        self.assertEqual(u.real_upper_right(), Point(16, 0))

    def test_attachment_depth_is_one(self) -> None:
        quote = _unit("「", 0, 0, 4, 10)
        quote.prepend(_unit("(", -5, 0, -1, 10))
        target = _unit("字", 5, 0, 15, 10)
        target.prepend(quote)

        # The nested mark is flattened into a single attachment.
        self.assertEqual(target.get_prepend_text(), "(「")
        self.assertEqual(target.real_upper_left(), Point(-5, 0))
        self.assertFalse(hasattr(target.prepended, "prepended"))

    def test_validation_names_field(self) -> None:
        with self.assertRaises(UnitValidationError) as cm:
            _unit("a", 0, 0, 10, 10, conf=1.5)
        self.assertEqual(cm.exception.field, "confidence")

        with self.assertRaises(UnitValidationError) as cm:
            _unit("a", 0, 0, 10, 10, conf=math.nan)
        self.assertEqual(cm.exception.field, "confidence")

        with self.assertRaises(UnitValidationError) as cm:
            _unit("", 0, 0, 10, 10)
        self.assertEqual(cm.exception.field, "text")

        with self.assertRaises(UnitValidationError) as cm:
            MinimumUnit(
                upper_left=Point(0, 0),
                upper_right=None,  # type: ignore[arg-type]
                lower_right=Point(10, 10),
                lower_left=Point(0, 10),
                text="a",
                confidence=0.5,
                unit_type=UnitType.LATIN,
            )
        self.assertEqual(cm.exception.field, "upper_right")

        with self.assertRaises(UnitValidationError) as cm:
            MinimumUnit(
                upper_left=Point(0, 0),
                upper_right=Point(10, 0),
                lower_right=Point(10, 10),
                lower_left=Point(0, 10),
                text="a",
                confidence=0.5,
                unit_type="Latin",  # type: ignore[arg-type]
            )
        self.assertEqual(cm.exception.field, "unit_type")

    def test_from_dict(self) -> None:
        d = {
            "upper_left": {"x": 0, "y": 0},
            "upper_right": {"x": 10, "y": 0},
            "lower_right": {"x": 10, "y": 12},
            "lower_left": {"x": 0, "y": 12},
            "text": "A",
            "confidence": 0.75,
            "type": "Latin",
            "hard_break": True,
        }
        u = MinimumUnit.from_dict(d)
        self.assertEqual(u.unit_type, UnitType.LATIN)
        self.assertTrue(u.hard_break)
        self.assertEqual(u.lower_right, Point(10, 12))
        self.assertEqual(u.to_dict()["type"], "Latin")

        by_name = MinimumUnit.from_dict({**d, "type": "CHAR_WITH_JOIN"})
        self.assertEqual(by_name.unit_type, UnitType.CHAR_WITH_JOIN)

        from_bbox = MinimumUnit.from_dict(
            {"text": "7", "confidence": 1, "type": "Number", "bbox": {"x0": 1, "y0": 2, "x1": 5, "y1": 9}}
        )
        self.assertEqual(from_bbox.upper_right, Point(5, 2))
        self.assertEqual(from_bbox.lower_left, Point(1, 9))

    def test_from_dict_errors(self) -> None:
        base = {
            "upper_left": {"x": 0, "y": 0},
            "upper_right": {"x": 10, "y": 0},
            "lower_right": {"x": 10, "y": 12},
            "lower_left": {"x": 0, "y": 12},
            "text": "A",
            "confidence": 0.75,
            "type": "Latin",
        }
        cases = {
            "upper_left": {k: v for k, v in base.items() if k != "upper_left"},
            "confidence": {**base, "confidence": None},
            "type": {**base, "type": "Cyrillic"},
            "lower_right": {**base, "lower_right": {"x": "ten", "y": 0}},
        }
        for field, d in cases.items():
            with self.subTest(field=field):
                with self.assertRaises(UnitValidationError) as cm:
                    MinimumUnit.from_dict(d)
                self.assertEqual(cm.exception.field, field)


if __name__ == "__main__":
    unittest.main()
