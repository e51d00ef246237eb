"""
Nine-point anchor placement for overlays and text.

Positions are given by name ("top-left", "bottom", "center", ...). Each
anchor accepts a few aliases, e.g. "left-top" for "top-left" or "left" for
"center-left". Offsets are truncated toward zero.
"""

from __future__ import annotations

from enum import Enum
from fractions import Fraction

from .errors import InvalidAnchor

Size = tuple[int, int]


class Anchor(Enum):
    TOP_LEFT = "top-left"
    TOP = "top"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER = "center"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM = "bottom"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def column(self) -> str:
        """Horizontal alignment: left, center or right."""
        return _PLACEMENT[self][0]

    @property
    def row(self) -> str:
        """Vertical alignment: top, center or bottom."""
        return _PLACEMENT[self][1]


_PLACEMENT: dict[Anchor, tuple[str, str]] = {
    Anchor.TOP_LEFT: ("left", "top"),
    Anchor.TOP: ("center", "top"),
    Anchor.TOP_RIGHT: ("right", "top"),
    Anchor.CENTER_LEFT: ("left", "center"),
    Anchor.CENTER: ("center", "center"),
    Anchor.CENTER_RIGHT: ("right", "center"),
    Anchor.BOTTOM_LEFT: ("left", "bottom"),
    Anchor.BOTTOM: ("center", "bottom"),
    Anchor.BOTTOM_RIGHT: ("right", "bottom"),
}

ANCHOR_ALIASES: dict[str, Anchor] = {
    "top-left": Anchor.TOP_LEFT,
    "left-top": Anchor.TOP_LEFT,
    "top": Anchor.TOP,
    "top-center": Anchor.TOP,
    "center-top": Anchor.TOP,
    "top-right": Anchor.TOP_RIGHT,
    "right-top": Anchor.TOP_RIGHT,
    "left": Anchor.CENTER_LEFT,
    "center-left": Anchor.CENTER_LEFT,
    "left-center": Anchor.CENTER_LEFT,
    "center": Anchor.CENTER,
    "right": Anchor.CENTER_RIGHT,
    "center-right": Anchor.CENTER_RIGHT,
    "right-center": Anchor.CENTER_RIGHT,
    "bottom-left": Anchor.BOTTOM_LEFT,
    "left-bottom": Anchor.BOTTOM_LEFT,
    "bottom": Anchor.BOTTOM,
    "bottom-center": Anchor.BOTTOM,
    "center-bottom": Anchor.BOTTOM,
    "bottom-right": Anchor.BOTTOM_RIGHT,
    "right-bottom": Anchor.BOTTOM_RIGHT,
}


def parse_anchor(value: Anchor | str) -> Anchor:
    """Resolve an anchor name or alias (case-insensitive)."""
    if isinstance(value, Anchor):
        return value
    anchor = ANCHOR_ALIASES.get(str(value).strip().lower())
    if anchor is None:
        raise InvalidAnchor(value)
    return anchor


def _column_x(column: str, container_w: int, overlay_w: int, margin: int) -> Fraction:
    if column == "left":
        return Fraction(margin)
    if column == "right":
        return Fraction(container_w - overlay_w - margin)
    return Fraction(container_w, 2) - Fraction(overlay_w, 2)


def anchor_offset(
    container: Size,
    overlay: Size,
    anchor: Anchor | str = Anchor.CENTER,
    margin: int = 0,
) -> tuple[int, int]:
    """
    Top-left (x, y) of an overlay placed at anchor inside container.

    The margin pushes the overlay away from the edges it is aligned to;
    centered axes ignore it.
    """
    anchor = parse_anchor(anchor)
    cw, ch = container
    ow, oh = overlay

    x = _column_x(anchor.column, cw, ow, margin)
    if anchor.row == "top":
        y = Fraction(margin)
    elif anchor.row == "bottom":
        y = Fraction(ch - oh - margin)
    else:
        y = Fraction(ch, 2) - Fraction(oh, 2)

    return int(x), int(y)


def text_offset(
    container: Size,
    text_size: Size,
    font_size: int,
    anchor: Anchor | str = Anchor.CENTER,
    margin: int = 0,
) -> tuple[int, int]:
    """
    Left edge and baseline (x, y) for text placed at anchor.

    y is a baseline, not a top edge: the top row sits one font size below
    the margin, and the other rows are shifted down by the font size.
    """
    anchor = parse_anchor(anchor)
    cw, ch = container
    tw, th = text_size

    x = _column_x(anchor.column, cw, tw, margin)
    if anchor.row == "top":
        y = Fraction(font_size + margin)
    elif anchor.row == "bottom":
        y = Fraction(ch - th - margin + font_size)
    else:
        y = Fraction(ch, 2) - (Fraction(th, 2) - font_size)

    return int(x), int(y)
