from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .geometry import Rect


@dataclass(frozen=True, slots=True)
class GroupedRegion:
    text: str  # composed display text of the merged units, attachments included
    confidence: int  # mean unit confidence as an integer percentage (0..100)
    bounds: Rect

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "GroupedRegion":
        return GroupedRegion(text=str(d["text"]), confidence=int(d["confidence"]), bounds=Rect.from_dict(d["bounds"]))

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "confidence": self.confidence, "bounds": self.bounds.to_dict()}


@dataclass(frozen=True, slots=True)
class GroupedResult:
    """
    Output of one grouping pass, split by the confidence threshold.
    Both lists keep scan order.
    """

    grouped_regions: list[GroupedRegion]
    low_confidence_regions: list[GroupedRegion]

    def all_regions(self) -> list[GroupedRegion]:
        return list(self.grouped_regions) + list(self.low_confidence_regions)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "GroupedResult":
        regions_raw = d.get("regions") or []
        low_raw = d.get("low_confidence_regions") or []
        if not isinstance(regions_raw, list) or not isinstance(low_raw, list):
            raise TypeError("GroupedResult region collections must be lists")
        return GroupedResult(
            grouped_regions=[GroupedRegion.from_dict(r) for r in regions_raw],
            low_confidence_regions=[GroupedRegion.from_dict(r) for r in low_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "regions": [r.to_dict() for r in self.grouped_regions],
            "low_confidence_regions": [r.to_dict() for r in self.low_confidence_regions],
        }
