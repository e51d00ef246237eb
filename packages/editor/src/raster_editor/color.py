"""Hex color parsing and pixel sampling."""

from __future__ import annotations

import string
from dataclasses import dataclass

from PIL import Image

from .errors import InvalidArgument, InvalidColor

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Color:
    """An RGB color with optional alpha (0 transparent, 255 opaque)."""
    r: int
    g: int
    b: int
    alpha: int | None = None

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, 255 if self.alpha is None else self.alpha)

    @property
    def hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(self.r, self.g, self.b)


def parse_color(value: str) -> Color:
    """
    Parse ``#RRGGBB`` or ``#RGB`` (hash optional, any case) into a Color.

    Raises InvalidColor for any other length or a non-hex digit.
    """
    if not isinstance(value, str):
        raise InvalidColor(value)

    digits = value[1:] if value.startswith("#") else value
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    elif len(digits) != 6:
        raise InvalidColor(value)

    if not _HEX_DIGITS.issuperset(digits):
        raise InvalidColor(value)

    return Color(
        r=int(digits[0:2], 16),
        g=int(digits[2:4], 16),
        b=int(digits[4:6], 16),
    )


def ensure_color(value: Color | str) -> Color:
    """Pass a Color through, parse anything else."""
    if isinstance(value, Color):
        return value
    return parse_color(value)


def color_at(image: Image.Image, x: int = 0, y: int = 0) -> Color:
    """Sample the pixel at (x, y)."""
    if not (0 <= x < image.width and 0 <= y < image.height):
        raise InvalidArgument(
            f"Position ({x}, {y}) outside {image.width}x{image.height} image"
        )
    r, g, b, a = image.convert("RGBA").getpixel((x, y))
    return Color(r, g, b, a)
