from __future__ import annotations

# Glyph roles used to decide how a punctuation unit binds to its neighbours.
STOP: frozenset[str] = frozenset({":", ".", "。"})
SPECIAL: frozenset[str] = frozenset({",", ":", ".", "/", "／"})
SPLIT: frozenset[str] = frozenset({"、", ";", "!", "?", "。", "！", "？"})
JOIN: frozenset[str] = frozenset({"-", "'", "・", "@"})
LEFT_BRACKET: frozenset[str] = frozenset(
    {"(", "⦅", "{", "[", "<", "（", "「", "『", "［", "【", "＜", "｟", "〚", "｛", "《", "⟪", "〖", "〈"}
)
RIGHT_BRACKET: frozenset[str] = frozenset(
    {")", "⦆", "}", "]", ">", "）", "」", "』", "］", "】", "＞", "｠", "〛", "｝", "》", "⟫", "〗", "〉"}
)
VERTICAL_BAR = "|"


def is_vertical_bar(text: str) -> bool:
    return text == VERTICAL_BAR


def is_stop(text: str) -> bool:
    return text in STOP


def is_special(text: str) -> bool:
    return text in SPECIAL


def is_join(text: str) -> bool:
    return text in JOIN


def is_split(text: str) -> bool:
    return text in SPLIT


def is_left_bracket(text: str) -> bool:
    return text in LEFT_BRACKET


def is_right_bracket(text: str) -> bool:
    return text in RIGHT_BRACKET


def is_punctuation(text: str) -> bool:
    """
    Aggregate test: special, join, split or either bracket.

    Stop glyphs are covered through SPECIAL/SPLIT; the vertical bar is not punctuation.
    """

    return is_special(text) or is_join(text) or is_split(text) or is_left_bracket(text) or is_right_bracket(text)
