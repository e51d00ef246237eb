"""
Per-pixel filter effects.

Each filter is a single call into numpy or OpenCV on the RGB channels of
an RGBA image; alpha is carried over unchanged unless noted. Kernels and
level semantics follow the classic GD image filters.
"""

from __future__ import annotations

import math
from typing import Callable

import cv2
import numpy as np
from PIL import Image

from .errors import InvalidArgument

EDGE_DETECT_KERNEL = [[-1, 0, -1], [0, 4, 0], [-1, 0, -1]]
EMBOSS_KERNEL = [[1.5, 0, 0], [0, 0, 0], [0, 0, -1.5]]
MEAN_REMOVAL_KERNEL = [[-1, -1, -1], [-1, 9, -1], [-1, -1, -1]]
GAUSSIAN_KERNEL = [[1 / 16, 2 / 16, 1 / 16], [2 / 16, 4 / 16, 2 / 16], [1 / 16, 2 / 16, 1 / 16]]


def _number(value: object, name: str, kind: type = int):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from None


def _split(image: Image.Image) -> tuple[np.ndarray, np.ndarray]:
    pixels = np.asarray(image.convert("RGBA"))
    return np.ascontiguousarray(pixels[..., :3]), pixels[..., 3]


def _join(rgb: np.ndarray, alpha: np.ndarray) -> Image.Image:
    return Image.fromarray(np.dstack([rgb, alpha]).astype(np.uint8))


def _convolve(rgb: np.ndarray, kernel: list[list[float]], offset: float = 0.0) -> np.ndarray:
    return cv2.filter2D(
        rgb, -1, np.asarray(kernel, dtype=np.float32),
        delta=offset, borderType=cv2.BORDER_REPLICATE,
    )


def grayscale(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)
    return _join(cv2.cvtColor(gray, cv2.COLOR_GRAY2RGB), alpha)


def invert(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    return _join(cv2.bitwise_not(rgb), alpha)


def brightness(image: Image.Image, level: int) -> Image.Image:
    """Add level (-255 to 255) to every color channel."""
    level = max(-255, min(255, _number(level, "Brightness level")))
    rgb, alpha = _split(image)
    return _join(np.clip(rgb.astype(np.int16) + level, 0, 255), alpha)


def contrast(image: Image.Image, level: int) -> Image.Image:
    """
    Change contrast by level (-100 to 100).

    Negative levels increase contrast, 100 flattens to mid gray.
    """
    level = _number(level, "Contrast level", float)
    factor = ((100.0 - level) / 100.0) ** 2
    rgb, alpha = _split(image)
    scaled = ((rgb / 255.0 - 0.5) * factor + 0.5) * 255.0
    return _join(np.clip(np.rint(scaled), 0, 255), alpha)


def colorize(image: Image.Image, red: int, green: int, blue: int, alpha: int = 0) -> Image.Image:
    """
    Add an offset to each channel.

    alpha (0 to 127) makes the image that much more transparent, on the
    0-127 scale GD uses.
    """
    red, green, blue, alpha = (
        _number(value, "Colorize offset") for value in (red, green, blue, alpha)
    )
    rgb, opacity = _split(image)
    shift = np.array([red, green, blue], dtype=np.int16)
    rgb = np.clip(rgb.astype(np.int16) + shift, 0, 255)
    if alpha:
        drop = round(max(0, min(127, alpha)) * 255 / 127)
        opacity = np.clip(opacity.astype(np.int16) - drop, 0, 255)
    return _join(rgb, opacity)


def edge_detect(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    return _join(_convolve(rgb, EDGE_DETECT_KERNEL, 127), alpha)


def emboss(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    return _join(_convolve(rgb, EMBOSS_KERNEL, 127), alpha)


def blur(image: Image.Image, level: int = 1) -> Image.Image:
    """Apply a 3x3 Gaussian blur level times."""
    level = _number(level, "Blur level")
    rgb, alpha = _split(image)
    for _ in range(level):
        rgb = _convolve(rgb, GAUSSIAN_KERNEL)
    return _join(rgb, alpha)


def sketch(image: Image.Image, level: int = 1) -> Image.Image:
    """Apply mean removal level times."""
    level = _number(level, "Sketch level")
    rgb, alpha = _split(image)
    for _ in range(level):
        rgb = _convolve(rgb, MEAN_REMOVAL_KERNEL)
    return _join(rgb, alpha)


def smooth(image: Image.Image, level: float) -> Image.Image:
    """Weighted 3x3 mean; level is the weight of the center pixel."""
    level = _number(level, "Smooth level", float)
    divisor = level + 8
    if divisor == 0:
        raise InvalidArgument("Smooth level -8 has no defined result")
    kernel = [[1, 1, 1], [1, level, 1], [1, 1, 1]]
    kernel = [[value / divisor for value in row] for row in kernel]
    rgb, alpha = _split(image)
    return _join(_convolve(rgb, kernel), alpha)


def pixelate(image: Image.Image, block_size: int, advanced: bool = False) -> Image.Image:
    """
    Replace block_size squares with one color, alpha included.

    Basic mode takes each block's top-left pixel, advanced mode its mean.
    """
    block_size = _number(block_size, "Block size")
    if block_size < 1:
        raise InvalidArgument(f"Block size must be positive, got {block_size}")

    pixels = np.array(image.convert("RGBA"))
    h, w = pixels.shape[:2]

    if advanced:
        small_w, small_h = math.ceil(w / block_size), math.ceil(h / block_size)
        small = cv2.resize(pixels, (small_w, small_h), interpolation=cv2.INTER_AREA)
    else:
        small = pixels[::block_size, ::block_size]

    blocks = np.repeat(np.repeat(small, block_size, axis=0), block_size, axis=1)
    return Image.fromarray(np.ascontiguousarray(blocks[:h, :w]))


def sepia(image: Image.Image) -> Image.Image:
    return colorize(grayscale(image), 90, 60, 30)


FILTERS: dict[str, Callable[..., Image.Image]] = {
    "grayscale": grayscale,
    "invert": invert,
    "brightness": brightness,
    "contrast": contrast,
    "colorize": colorize,
    "edge_detect": edge_detect,
    "emboss": emboss,
    "blur": blur,
    "sketch": sketch,
    "smooth": smooth,
    "pixelate": pixelate,
    "sepia": sepia,
}


def get_filter(name: str) -> Callable[..., Image.Image]:
    """Look up a filter by name ("edge-detect" and "edge_detect" both work)."""
    func = FILTERS.get(name.strip().lower().replace("-", "_"))
    if func is None:
        raise InvalidArgument(f"Unknown filter: {name!r}")
    return func
