"""
Detect the bounding box of non-background content.

Background matching is exact: a pixel is background only if all four RGBA
channels equal the background color. Anti-aliased or JPEG-compressed
borders are therefore rarely trimmed cleanly; use a lossless format.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

import numpy as np
from PIL import Image

from .color import Color, ensure_color
from .errors import InvalidDimensions

logger = logging.getLogger(__name__)


class TrimResult(IntEnum):
    NO_TRIM = 0
    PARTIAL_TRIM = 1
    ALL_TRIM = 2


@dataclass(frozen=True)
class TrimBox:
    """
    Content bounds in pixel edges: left/top inclusive, right/bottom exclusive.

    For ALL_TRIM (a uniform image) the box covers the whole image.
    """
    left: int
    top: int
    right: int
    bottom: int
    width: int
    height: int
    original_width: int
    original_height: int
    result: TrimResult

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.left, self.top, self.right, self.bottom)


def content_mask(image: Image.Image, background: Color | str | None = None) -> np.ndarray:
    """
    Boolean (height, width) array, True where a pixel differs from background.

    Without an explicit background the color at (0, 0) is used.
    """
    pixels = np.asarray(image.convert("RGBA"))
    if background is None:
        bg = pixels[0, 0]
    else:
        bg = np.array(ensure_color(background).rgba, dtype=np.uint8)
    return np.any(pixels != bg, axis=2)


def _scan(lines: np.ndarray) -> int:
    """Index of the first line holding content, len(lines) if none does."""
    hits = lines.any(axis=1)
    return int(hits.argmax()) if hits.any() else len(lines)


def trim_box(image: Image.Image, background: Color | str | None = None) -> TrimBox:
    """
    Find the smallest box containing every non-background pixel.

    Scans rows from the top, then rows from the bottom, then columns from
    the left and right within the remaining rows. A uniform image stops
    after the first scan and reports ALL_TRIM.
    """
    width, height = image.size
    if width < 1 or height < 1:
        raise InvalidDimensions(width, height)

    mask = content_mask(image, background)

    top = _scan(mask)
    if top == height:
        logger.debug("Trim box: uniform %dx%d image", width, height)
        return TrimBox(0, 0, width, height, width, height, width, height, TrimResult.ALL_TRIM)

    bottom = height - _scan(mask[top:][::-1])
    columns = mask[top:bottom].T
    left = _scan(columns)
    right = width - _scan(columns[::-1])

    new_width = right - left
    new_height = bottom - top
    if new_width < width or new_height < height:
        result = TrimResult.PARTIAL_TRIM
    else:
        result = TrimResult.NO_TRIM

    box = TrimBox(left, top, right, bottom, new_width, new_height, width, height, result)
    logger.debug("Trim box: %s (%s)", box.box, result.name)
    return box
