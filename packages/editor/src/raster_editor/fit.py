"""
Aspect-ratio preserving size calculations.

All arithmetic is done on exact fractions and truncated to whole pixels
only when a result is returned, so comparisons against the bounds see the
unrounded scaled size.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from .errors import InvalidDimensions


@dataclass(frozen=True)
class FitResult:
    """Target size, plus the paste offset when fitting into a fixed canvas."""
    width: int
    height: int
    offset_x: int = 0
    offset_y: int = 0

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def offset(self) -> tuple[int, int]:
        return (self.offset_x, self.offset_y)


def _check_original(orig_w: int, orig_h: int) -> None:
    if orig_w < 1 or orig_h < 1:
        raise InvalidDimensions(orig_w, orig_h)


def resize_to_width(orig_w: int, orig_h: int, new_width: int) -> int:
    """Height that keeps the aspect ratio at new_width."""
    _check_original(orig_w, orig_h)
    return int(Fraction(new_width * orig_h, orig_w))


def resize_to_height(orig_w: int, orig_h: int, new_height: int) -> int:
    """Width that keeps the aspect ratio at new_height."""
    _check_original(orig_w, orig_h)
    return int(Fraction(new_height * orig_w, orig_h))


def _shrink(orig_w: int, orig_h: int, max_w: int, max_h: int) -> tuple[Fraction, Fraction]:
    _check_original(orig_w, orig_h)
    aspect = Fraction(orig_h, orig_w)

    if orig_w > max_w:
        width = Fraction(max_w)
        height = width * aspect
    else:
        width, height = Fraction(orig_w), Fraction(orig_h)

    if height > max_h:
        height = Fraction(max_h)
        width = height / aspect

    return width, height


def shrink_to_fit(orig_w: int, orig_h: int, max_w: int, max_h: int) -> FitResult:
    """
    Proportionally shrink to fit within max_w x max_h.

    Width is clamped first, then height. Images already inside the bounds
    keep their size.
    """
    width, height = _shrink(orig_w, orig_h, max_w, max_h)
    return FitResult(int(width), int(height))


def shrink_to_square(orig_w: int, orig_h: int, size: int) -> FitResult:
    """
    Shrink to fit a size x size square and compute the paste offset.

    Only one axis is centered by the fitted size: vertical if the image is
    shorter than the square, otherwise horizontal. When the original is
    smaller than the square on both axes the horizontal offset is then
    recomputed from the original width.
    """
    width, height = _shrink(orig_w, orig_h, size, size)

    offset_x = offset_y = Fraction(0)
    if size > height:
        offset_y = (size - height) / 2
    elif size > width:
        offset_x = (size - width) / 2

    if orig_w < size and orig_h < size:
        offset_x = Fraction(size - orig_w, 2)

    return FitResult(int(width), int(height), int(offset_x), int(offset_y))


def fit_to_canvas(orig_w: int, orig_h: int, canvas_w: int, canvas_h: int) -> FitResult:
    """Shrink to fit canvas_w x canvas_h and center on both axes."""
    width, height = _shrink(orig_w, orig_h, canvas_w, canvas_h)
    new_w, new_h = int(width), int(height)
    return FitResult(new_w, new_h, (canvas_w - new_w) // 2, (canvas_h - new_h) // 2)
