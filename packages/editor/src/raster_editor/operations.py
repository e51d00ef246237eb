"""
File-to-file editing operations.

Each operation reads one image, applies one transform and writes the
result atomically. Failures are reported through the returned
OperationResult instead of being raised:

    result = shrink_to_fit("in.png", "out.jpg", 800, 600, output_format="jpeg")
    if not result:
        print(result.error)

The destination may be the source file; it is only replaced once the new
image has been fully encoded and written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable

from PIL import Image, ImageFont

from . import codec, filters, transform
from .anchor import Anchor
from .codec import ImageFormat, ImageMetadata
from .color import Color, color_at
from .errors import ImagingError

logger = logging.getLogger(__name__)

PathLike = str | Path
Transform = Callable[[Image.Image], Image.Image]


@dataclass
class OperationResult:
    """Outcome of a file operation. Truthy when it succeeded."""
    ok: bool
    dest: Path | None = None
    metadata: ImageMetadata | None = None
    error: Exception | None = None

    def __bool__(self) -> bool:
        return self.ok


def _run(
    name: str,
    src: PathLike,
    dest: PathLike,
    func: Transform,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    matte: Color | str = transform.DEFAULT_BACKGROUND,
) -> OperationResult:
    """
    Load src, apply func, save to dest.

    Images with transparency are composited onto matte before being written
    as JPEG. Imaging, filesystem and bad-argument errors are caught.
    """
    dest = Path(dest)
    try:
        image, meta = codec.load(src)
        fmt = meta.format if output_format is None else ImageFormat.coerce(output_format)
        edited = func(image)
        if fmt is ImageFormat.JPEG:
            edited = transform.flatten(edited, matte)
        written = codec.save(edited, dest, fmt, quality)
    except (ImagingError, OSError, ValueError) as e:
        logger.warning("%s failed for %s: %s", name, src, e)
        return OperationResult(ok=False, dest=dest, error=e)

    logger.info(
        "%s: %s -> %s (%dx%d %s)",
        name, src, dest, written.width, written.height, written.format.value,
    )
    return OperationResult(ok=True, dest=dest, metadata=written)


def convert(src: PathLike, dest: PathLike, quality: int | None = None) -> OperationResult:
    """Re-encode src in the format named by dest's extension."""
    try:
        fmt = ImageFormat.from_path(dest)
    except ImagingError as e:
        logger.warning("convert failed for %s: %s", src, e)
        return OperationResult(ok=False, dest=Path(dest), error=e)
    return _run("convert", src, dest, lambda image: image, quality, fmt)


def flip(src: PathLike, dest: PathLike, direction: str, quality: int | None = None) -> OperationResult:
    return _run("flip", src, dest, partial(transform.flip, direction=direction), quality)


def rotate(
    src: PathLike,
    dest: PathLike,
    angle: int | float | str = 270,
    background: Color | str = transform.DEFAULT_BACKGROUND,
    quality: int | None = None,
) -> OperationResult:
    func = partial(transform.rotate, angle=angle, background=background)
    return _run("rotate", src, dest, func, quality)


def apply_filter(
    src: PathLike,
    dest: PathLike,
    name: str,
    *args: object,
    quality: int | None = None,
) -> OperationResult:
    """Run the filter called name (see filters.FILTERS) with extra args."""
    try:
        func = filters.get_filter(name)
    except ImagingError as e:
        logger.warning("filter failed for %s: %s", src, e)
        return OperationResult(ok=False, dest=Path(dest), error=e)
    return _run(f"filter {name}", src, dest, lambda image: func(image, *args), quality)


def grayscale(src: PathLike, dest: PathLike, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "grayscale", quality=quality)


def invert(src: PathLike, dest: PathLike, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "invert", quality=quality)


def brightness(src: PathLike, dest: PathLike, level: int, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "brightness", level, quality=quality)


def contrast(src: PathLike, dest: PathLike, level: int, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "contrast", level, quality=quality)


def colorize(
    src: PathLike,
    dest: PathLike,
    red: int,
    green: int,
    blue: int,
    alpha: int = 0,
    quality: int | None = None,
) -> OperationResult:
    return apply_filter(src, dest, "colorize", red, green, blue, alpha, quality=quality)


def edge_detect(src: PathLike, dest: PathLike, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "edge_detect", quality=quality)


def emboss(src: PathLike, dest: PathLike, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "emboss", quality=quality)


def blur(src: PathLike, dest: PathLike, level: int = 1, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "blur", level, quality=quality)


def sketch(src: PathLike, dest: PathLike, level: int = 1, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "sketch", level, quality=quality)


def smooth(src: PathLike, dest: PathLike, level: float, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "smooth", level, quality=quality)


def pixelate(
    src: PathLike,
    dest: PathLike,
    block_size: int,
    advanced: bool = False,
    quality: int | None = None,
) -> OperationResult:
    return apply_filter(src, dest, "pixelate", block_size, advanced, quality=quality)


def sepia(src: PathLike, dest: PathLike, quality: int | None = None) -> OperationResult:
    return apply_filter(src, dest, "sepia", quality=quality)


def resize(
    src: PathLike,
    dest: PathLike,
    width: int,
    height: int,
    resample: bool = True,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    background: Color | str | None = None,
) -> OperationResult:
    func = partial(transform.resize, width=width, height=height,
                   resample=resample, background=background)
    return _run("resize", src, dest, func, quality, output_format,
                background or transform.DEFAULT_BACKGROUND)


def resize_to_width(
    src: PathLike,
    dest: PathLike,
    width: int,
    resample: bool = True,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    background: Color | str | None = None,
) -> OperationResult:
    func = partial(transform.resize_to_width, width=width,
                   resample=resample, background=background)
    return _run("resize_to_width", src, dest, func, quality, output_format,
                background or transform.DEFAULT_BACKGROUND)


def resize_to_height(
    src: PathLike,
    dest: PathLike,
    height: int,
    resample: bool = True,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    background: Color | str | None = None,
) -> OperationResult:
    func = partial(transform.resize_to_height, height=height,
                   resample=resample, background=background)
    return _run("resize_to_height", src, dest, func, quality, output_format,
                background or transform.DEFAULT_BACKGROUND)


def shrink_to_fit(
    src: PathLike,
    dest: PathLike,
    max_width: int,
    max_height: int,
    resample: bool = True,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    background: Color | str | None = None,
) -> OperationResult:
    func = partial(transform.shrink_to_fit, max_width=max_width, max_height=max_height,
                   resample=resample, background=background)
    return _run("shrink_to_fit", src, dest, func, quality, output_format,
                background or transform.DEFAULT_BACKGROUND)


def shrink_to_square(
    src: PathLike,
    dest: PathLike,
    size: int,
    resample: bool = True,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    background: Color | str = transform.DEFAULT_BACKGROUND,
) -> OperationResult:
    func = partial(transform.shrink_to_square, size=size,
                   resample=resample, background=background)
    return _run("shrink_to_square", src, dest, func, quality, output_format)


def shrink_to_size(
    src: PathLike,
    dest: PathLike,
    width: int,
    height: int,
    resample: bool = True,
    quality: int | None = None,
    output_format: ImageFormat | str | None = None,
    background: Color | str = transform.DEFAULT_BACKGROUND,
) -> OperationResult:
    func = partial(transform.shrink_to_size, width=width, height=height,
                   resample=resample, background=background)
    return _run("shrink_to_size", src, dest, func, quality, output_format)


def shrink_to_non_background(
    src: PathLike,
    dest: PathLike | None = None,
    quality: int | None = 100,
    background: Color | str | None = None,
) -> OperationResult:
    """
    Trim the uniform border of src.

    Writes back to src unless dest is given.
    """
    def trim(image: Image.Image) -> Image.Image:
        trimmed, _ = transform.shrink_to_non_background(image, background)
        return trimmed

    return _run("shrink_to_non_background", src, src if dest is None else dest, trim, quality)


def shrink_to_square_non_background(
    src: PathLike,
    dest: PathLike,
    size: int,
    resample: bool = True,
    quality: int | None = None,
    background: Color | str | None = None,
    output_format: ImageFormat | str | None = None,
    canvas_background: Color | str = transform.DEFAULT_BACKGROUND,
) -> OperationResult:
    """
    Trim the uniform border, then shrink into a size x size square.

    background is the border color to trim (default: top-left pixel);
    canvas_background fills the square.
    """
    def trim_and_square(image: Image.Image) -> Image.Image:
        trimmed, _ = transform.shrink_to_non_background(image, background)
        return transform.shrink_to_square(trimmed, size, resample, canvas_background)

    return _run(
        "shrink_to_square_non_background", src, dest, trim_and_square, quality,
        output_format, canvas_background,
    )


def crop(
    src: PathLike,
    dest: PathLike,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    new_width: int | None = None,
    new_height: int | None = None,
    resample: bool = True,
    quality: int | None = None,
) -> OperationResult:
    func = partial(transform.crop, x1=x1, y1=y1, x2=x2, y2=y2,
                   new_width=new_width, new_height=new_height, resample=resample)
    return _run("crop", src, dest, func, quality)


def square_crop(
    src: PathLike,
    dest: PathLike,
    new_size: int | None = None,
    quality: int | None = None,
) -> OperationResult:
    return _run("square_crop", src, dest, partial(transform.square_crop, new_size=new_size), quality)


def watermark(
    src: PathLike,
    dest: PathLike,
    watermark_src: PathLike,
    position: Anchor | str = Anchor.CENTER,
    opacity: float = 50,
    margin: int = 0,
    quality: int | None = None,
) -> OperationResult:
    """Overlay the image at watermark_src onto src."""
    def overlay(image: Image.Image) -> Image.Image:
        mark, _ = codec.load(watermark_src)
        return transform.watermark(image, mark, position, opacity, margin)

    return _run("watermark", src, dest, overlay, quality)


def text(
    src: PathLike,
    dest: PathLike,
    text: str,
    font_file: PathLike | ImageFont.FreeTypeFont,
    size: int = 12,
    color: Color | str = "#000000",
    position: Anchor | str = Anchor.CENTER,
    margin: int = 0,
    shadow_color: Color | str | None = None,
    shadow_offset_x: int = 0,
    shadow_offset_y: int = 0,
    quality: int | None = None,
) -> OperationResult:
    func = partial(
        transform.draw_text, text=text, font=font_file, size=size, color=color,
        position=position, margin=margin, shadow_color=shadow_color,
        shadow_offset=(shadow_offset_x, shadow_offset_y),
    )
    return _run("text", src, dest, func, quality)


def get_color_at_position(src: PathLike, x: int = 0, y: int = 0) -> str:
    """
    Hex color (``#RRGGBB``) of one pixel of src.

    A read-only query, so errors are raised rather than wrapped.
    """
    image, _ = codec.load(src)
    return color_at(image, x, y).hex
