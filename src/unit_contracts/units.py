from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from . import punctuation
from .geometry import Point

_CORNERS = ("upper_left", "upper_right", "lower_right", "lower_left")


class UnitValidationError(ValueError):
    """
    A minimum unit failed validation. `field` names the offending field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UnitType(str, Enum):
    """
    Coarse glyph type assigned upstream. NUMBER covers digit runs only (10, 100, 999).
    """

    CJK = "CJK"
    LATIN = "Latin"
    NUMBER = "Number"
    PUNCTUATION = "Punctuation"
    CHAR_WITH_JOIN = "CharWithJoin"
    TABLE_LINE = "TableLine"


def _check_point(field: str, value: Any) -> None:
    if value is None:
        raise UnitValidationError(field, "corner is missing")
    if not isinstance(value, Point):
        raise UnitValidationError(field, f"expected Point, got {type(value).__name__}")
    for v in (value.x, value.y):
        if isinstance(v, bool) or not isinstance(v, int):
            raise UnitValidationError(field, f"coordinates must be integers, got {value!r}")


def _check_mark_text(text: Any) -> None:
    if not isinstance(text, str) or text == "":
        raise UnitValidationError("text", "mark text must be a non-empty string")


def _point_from_dict(d: dict[str, Any], field: str) -> Point:
    raw = d.get(field)
    if raw is None:
        raise UnitValidationError(field, "corner is missing")
    if not isinstance(raw, dict):
        raise UnitValidationError(field, "corner must be an object with x and y")
    try:
        return Point.from_dict(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise UnitValidationError(field, f"invalid corner {raw!r}") from e


@dataclass(frozen=True, slots=True)
class PunctuationMark:
    """
    Punctuation bound to a content unit. Carries corners and text only and
    has no attachment slots of its own, so attachments never nest.

    A prepended mark needs its left corners, an appended mark its right corners;
    the other pair may be None.
    """

    text: str
    upper_left: Point | None = None
    upper_right: Point | None = None
    lower_right: Point | None = None
    lower_left: Point | None = None

    @staticmethod
    def from_unit(unit: "MinimumUnit") -> "PunctuationMark":
        # A unit that already holds marks is flattened into one mark.
        return PunctuationMark(
            text=unit.get_prepend_text() + unit.text + unit.get_append_text(),
            upper_left=unit.real_upper_left(),
            upper_right=unit.real_upper_right(),
            lower_right=unit.real_lower_right(),
            lower_left=unit.real_lower_left(),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"text": self.text}
        for name in _CORNERS:
            p = getattr(self, name)
            out[name] = None if p is None else p.to_dict()
        return out


@dataclass(slots=True)
class MinimumUnit:
    """
    Smallest detected text primitive: one glyph with its quadrilateral,
    recognition confidence and coarse type.

    Units are mutated in place while a grouping pass runs (attachments,
    hard_break, unit_type) and are not meant to be reused afterwards.
    """

    upper_left: Point
    upper_right: Point
    lower_right: Point
    lower_left: Point
    text: str
    confidence: float
    unit_type: UnitType
    hard_break: bool = False
    prepended: PunctuationMark | None = None
    appended: PunctuationMark | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in _CORNERS:
            _check_point(name, getattr(self, name))
        if not isinstance(self.text, str) or self.text == "":
            raise UnitValidationError("text", "text must be a non-empty string")
        if isinstance(self.confidence, bool) or not isinstance(self.confidence, (int, float)):
            raise UnitValidationError("confidence", f"expected a number, got {self.confidence!r}")
        if not math.isfinite(self.confidence) or not (0.0 <= self.confidence <= 1.0):
            raise UnitValidationError("confidence", f"must be within [0, 1], got {self.confidence!r}")
        if not isinstance(self.unit_type, UnitType):
            raise UnitValidationError("unit_type", f"expected UnitType, got {self.unit_type!r}")

    def get_text(self) -> str:
        latin = " " if self.unit_type == UnitType.LATIN else ""
        return self.get_prepend_text() + self.text + self.get_append_text() + latin

    def width(self) -> int:
        return self.real_upper_right().x - self.real_upper_left().x

    def height(self) -> int:
        return self.real_lower_right().y - self.real_upper_right().y

    # Real corners resolve through the attached marks.

    def real_upper_left(self) -> Point:
        if self.prepended is not None and self.prepended.upper_left is not None:
            return self.prepended.upper_left
        return self.upper_left

    def real_upper_right(self) -> Point:
        if self.appended is not None and self.appended.upper_right is not None:
            return self.appended.upper_right
        return self.upper_right

    def real_lower_right(self) -> Point:
        if self.appended is not None and self.appended.lower_right is not None:
            return self.appended.lower_right
        return self.lower_right

    def real_lower_left(self) -> Point:
        if self.prepended is not None and self.prepended.lower_left is not None:
            return self.prepended.lower_left
        return self.lower_left

    def is_punctuation(self) -> bool:
        return punctuation.is_punctuation(self.text)

    def is_stop(self) -> bool:
        return punctuation.is_stop(self.text)

    def is_special(self) -> bool:
        return punctuation.is_special(self.text)

    def is_join(self) -> bool:
        return punctuation.is_join(self.text)

    def is_split(self) -> bool:
        return punctuation.is_split(self.text)

    def is_left_bracket(self) -> bool:
        return punctuation.is_left_bracket(self.text)

    def is_right_bracket(self) -> bool:
        return punctuation.is_right_bracket(self.text)

    def prepend(self, unit: "MinimumUnit") -> None:
        """
        Bind `unit` in front of this one, replacing any earlier prepended mark.
        """

        self.prepended = PunctuationMark.from_unit(unit)

    def prepend_text(self, text: str, upper_left: Point, lower_left: Point) -> None:
        _check_mark_text(text)
        _check_point("upper_left", upper_left)
        _check_point("lower_left", lower_left)
        self.prepended = PunctuationMark(text=text, upper_left=upper_left, lower_left=lower_left)

    def get_prepend_text(self) -> str:
        return "" if self.prepended is None else self.prepended.text

    def append(self, unit: "MinimumUnit") -> None:
        """
        Bind `unit` after this one, replacing any earlier appended mark.
        """

        self.appended = PunctuationMark.from_unit(unit)

    def append_text(self, text: str, upper_right: Point, lower_right: Point) -> None:
        _check_mark_text(text)
        _check_point("upper_right", upper_right)
        _check_point("lower_right", lower_right)
        self.appended = PunctuationMark(text=text, upper_right=upper_right, lower_right=lower_right)

    def get_append_text(self) -> str:
        return "" if self.appended is None else self.appended.text

    def discard_prepend(self) -> None:
        self.prepended = None

    def discard_append(self) -> None:
        self.appended = None

    @staticmethod
    def from_bbox(
        *, text: str, x0: int, y0: int, x1: int, y1: int, confidence: float, unit_type: UnitType
    ) -> "MinimumUnit":
        return MinimumUnit(
            upper_left=Point(x0, y0),
            upper_right=Point(x1, y0),
            lower_right=Point(x1, y1),
            lower_left=Point(x0, y1),
            text=text,
            confidence=confidence,
            unit_type=unit_type,
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "MinimumUnit":
        if not isinstance(d, dict):
            raise UnitValidationError("unit", f"expected an object, got {type(d).__name__}")

        raw_type = d.get("type")
        try:
            unit_type = UnitType(raw_type)
        except ValueError:
            try:
                unit_type = UnitType[str(raw_type)]
            except KeyError as e:
                raise UnitValidationError("type", f"unknown unit type {raw_type!r}") from e

        if "confidence" not in d or d["confidence"] is None:
            raise UnitValidationError("confidence", "confidence is missing")
        try:
            confidence = float(d["confidence"])
        except (TypeError, ValueError) as e:
            raise UnitValidationError("confidence", f"expected a number, got {d['confidence']!r}") from e

        text = d.get("text")
        if not isinstance(text, str):
            raise UnitValidationError("text", "text must be a non-empty string")

        if "bbox" in d and not any(name in d for name in _CORNERS):
            bbox = d["bbox"]
            try:
                x0, y0, x1, y1 = (int(bbox[k]) for k in ("x0", "y0", "x1", "y1"))
            except (KeyError, TypeError, ValueError) as e:
                raise UnitValidationError("bbox", f"invalid bbox {bbox!r}") from e
            unit = MinimumUnit.from_bbox(
                text=text, x0=x0, y0=y0, x1=x1, y1=y1, confidence=confidence, unit_type=unit_type
            )
        else:
            unit = MinimumUnit(
                upper_left=_point_from_dict(d, "upper_left"),
                upper_right=_point_from_dict(d, "upper_right"),
                lower_right=_point_from_dict(d, "lower_right"),
                lower_left=_point_from_dict(d, "lower_left"),
                text=text,
                confidence=confidence,
                unit_type=unit_type,
            )
        unit.hard_break = bool(d.get("hard_break", False))
        return unit

    def to_dict(self) -> dict[str, Any]:
        return {
            "upper_left": self.upper_left.to_dict(),
            "upper_right": self.upper_right.to_dict(),
            "lower_right": self.lower_right.to_dict(),
            "lower_left": self.lower_left.to_dict(),
            "text": self.text,
            "confidence": self.confidence,
            "type": self.unit_type.value,
            "hard_break": self.hard_break,
            "prepended": None if self.prepended is None else self.prepended.to_dict(),
            "appended": None if self.appended is None else self.appended.to_dict(),
        }
