"""
Geometric transforms, overlays and text on RGBA images.

Every function takes an image and returns a new one; inputs are never
modified. Sizes come from ``fit``, positions from ``anchor``, content
bounds from ``trim`` and blending from ``composite``. Resampling,
rotation and glyph rendering are delegated to Pillow.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from . import fit
from .anchor import Anchor, anchor_offset, text_offset
from .color import Color, ensure_color
from .composite import composite
from .errors import InvalidArgument, InvalidDimensions
from .trim import TrimBox, trim_box

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = "#FFFFFF"

FLIP_DIRECTIONS: dict[str, Image.Transpose] = {
    "vertical": Image.Transpose.FLIP_TOP_BOTTOM,
    "v": Image.Transpose.FLIP_TOP_BOTTOM,
    "y": Image.Transpose.FLIP_TOP_BOTTOM,
    "horizontal": Image.Transpose.FLIP_LEFT_RIGHT,
    "h": Image.Transpose.FLIP_LEFT_RIGHT,
    "x": Image.Transpose.FLIP_LEFT_RIGHT,
}

ROTATE_ALIASES: dict[str, int] = {
    "cw": 270,
    "clockwise": 270,
    "ccw": 90,
    "counterclockwise": 90,
}


def _resampling(resample: bool) -> Image.Resampling:
    return Image.Resampling.LANCZOS if resample else Image.Resampling.NEAREST


def _check_size(width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise InvalidDimensions(width, height)


def _scale(image: Image.Image, width: int, height: int, resample: bool) -> Image.Image:
    _check_size(width, height)
    return image.convert("RGBA").resize((width, height), _resampling(resample))


def _on_canvas(
    image: Image.Image,
    size: tuple[int, int],
    offset: tuple[int, int],
    background: Color | str | None,
) -> Image.Image:
    """
    Place image on a new canvas.

    Without a background the canvas is transparent and pixels are copied
    as they are, alpha included. With one, the canvas is filled and the
    image is alpha-composited over it.
    """
    if background is None:
        canvas = Image.new("RGBA", size, (0, 0, 0, 0))
        canvas.paste(image, offset)
        return canvas

    canvas = Image.new("RGBA", size, ensure_color(background).rgba)
    return composite(canvas, image, offset)


def flatten(image: Image.Image, background: Color | str = DEFAULT_BACKGROUND) -> Image.Image:
    """
    Composite image onto a solid background if it has any transparency.

    Used before encoding to a format without an alpha channel.
    """
    image = image.convert("RGBA")
    if image.getchannel("A").getextrema()[0] == 255:
        return image
    return _on_canvas(image, image.size, (0, 0), background)


def resize(
    image: Image.Image,
    width: int,
    height: int,
    resample: bool = True,
    background: Color | str | None = None,
) -> Image.Image:
    """Scale to exactly width x height."""
    scaled = _scale(image, width, height, resample)
    if background is None:
        return scaled
    return _on_canvas(scaled, scaled.size, (0, 0), background)


def resize_to_width(
    image: Image.Image,
    width: int,
    resample: bool = True,
    background: Color | str | None = None,
) -> Image.Image:
    """Scale proportionally to width."""
    height = fit.resize_to_width(image.width, image.height, width)
    return resize(image, width, height, resample, background)


def resize_to_height(
    image: Image.Image,
    height: int,
    resample: bool = True,
    background: Color | str | None = None,
) -> Image.Image:
    """Scale proportionally to height."""
    width = fit.resize_to_height(image.width, image.height, height)
    return resize(image, width, height, resample, background)


def shrink_to_fit(
    image: Image.Image,
    max_width: int,
    max_height: int,
    resample: bool = True,
    background: Color | str | None = None,
) -> Image.Image:
    """Scale down proportionally to fit within max_width x max_height."""
    result = fit.shrink_to_fit(image.width, image.height, max_width, max_height)
    logger.debug("Shrink %s to fit %dx%d: %s", image.size, max_width, max_height, result.size)
    return resize(image, result.width, result.height, resample, background)


def shrink_to_square(
    image: Image.Image,
    size: int,
    resample: bool = True,
    background: Color | str = DEFAULT_BACKGROUND,
) -> Image.Image:
    """Shrink into a size x size canvas filled with background."""
    _check_size(size, size)
    result = fit.shrink_to_square(image.width, image.height, size)
    logger.debug("Shrink %s to square %d: %s", image.size, size, result)
    scaled = _scale(image, result.width, result.height, resample)
    return _on_canvas(scaled, (size, size), result.offset, background)


def shrink_to_size(
    image: Image.Image,
    width: int,
    height: int,
    resample: bool = True,
    background: Color | str = DEFAULT_BACKGROUND,
) -> Image.Image:
    """Shrink into a width x height canvas, centered, bands filled with background."""
    _check_size(width, height)
    result = fit.fit_to_canvas(image.width, image.height, width, height)
    logger.debug("Shrink %s to canvas %dx%d: %s", image.size, width, height, result)
    scaled = _scale(image, result.width, result.height, resample)
    return _on_canvas(scaled, (width, height), result.offset, background)


def crop(
    image: Image.Image,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    new_width: int | None = None,
    new_height: int | None = None,
    resample: bool = True,
) -> Image.Image:
    """
    Cut out the rectangle between two corners, optionally scaling it.

    Corners may be given in any order. Parts of the rectangle outside the
    image come out transparent.
    """
    if x2 < x1:
        x1, x2 = x2, x1
    if y2 < y1:
        y1, y2 = y2, y1

    crop_width = x2 - x1
    crop_height = y2 - y1
    _check_size(crop_width, crop_height)

    region = image.convert("RGBA").crop((x1, y1, x2, y2))
    width = crop_width if new_width is None else new_width
    height = crop_height if new_height is None else new_height
    if (width, height) == region.size:
        return region
    return _scale(region, width, height, resample)


def square_crop(image: Image.Image, new_size: int | None = None) -> Image.Image:
    """Crop the centered square of the shorter side, optionally scaling it."""
    w, h = image.size
    if w > h:
        x_offset, y_offset = (w - h) // 2, 0
        side = h
    else:
        x_offset, y_offset = 0, (h - w) // 2
        side = w

    return crop(
        image, x_offset, y_offset, x_offset + side, y_offset + side,
        new_size, new_size,
    )


def flip(image: Image.Image, direction: str) -> Image.Image:
    """Mirror rows ("vertical", "v", "y") or columns ("horizontal", "h", "x")."""
    method = FLIP_DIRECTIONS.get(str(direction).strip().lower())
    if method is None:
        raise InvalidArgument(f"Unknown flip direction: {direction!r}")
    return image.convert("RGBA").transpose(method)


def rotate(
    image: Image.Image,
    angle: int | float | str = 270,
    background: Color | str = DEFAULT_BACKGROUND,
) -> Image.Image:
    """
    Rotate counter-clockwise by angle degrees, growing the canvas to fit.

    "cw"/"clockwise" mean 270, "ccw"/"counterclockwise" mean 90. Corners
    uncovered by the rotation are filled with background.
    """
    if isinstance(angle, str):
        key = angle.strip().lower()
        if key in ROTATE_ALIASES:
            angle = ROTATE_ALIASES[key]
        else:
            try:
                angle = float(key)
            except ValueError:
                raise InvalidArgument(f"Invalid rotation angle: {angle!r}") from None

    fill = ensure_color(background).rgba
    return image.convert("RGBA").rotate(
        angle, resample=Image.Resampling.BICUBIC, expand=True, fillcolor=fill,
    )


def shrink_to_non_background(
    image: Image.Image,
    background: Color | str | None = None,
) -> tuple[Image.Image, TrimBox]:
    """
    Crop away the uniform border around the content.

    The border color is background, or the top-left pixel when None. A
    uniform image is returned unchanged in size.
    """
    box = trim_box(image, background)
    return image.convert("RGBA").crop(box.box), box


def watermark(
    image: Image.Image,
    overlay: Image.Image,
    position: Anchor | str = Anchor.CENTER,
    opacity: float = 50,
    margin: int = 0,
) -> Image.Image:
    """Blend overlay onto image at an anchor, keeping both alpha channels."""
    x, y = anchor_offset(image.size, overlay.size, position, margin)
    logger.debug("Watermark %s at (%d, %d) opacity=%s", overlay.size, x, y, opacity)
    return composite(image, overlay, (x, y), opacity)


def load_font(font: str | Path | ImageFont.FreeTypeFont, size: int) -> ImageFont.FreeTypeFont:
    """Open a TrueType file, or resize an already loaded FreeType font."""
    if size < 1:
        raise InvalidArgument(f"Font size must be positive, got {size}")
    if isinstance(font, ImageFont.FreeTypeFont):
        return font.font_variant(size=size)
    return ImageFont.truetype(str(font), size)


def text_size(font: ImageFont.FreeTypeFont, text: str) -> tuple[int, int]:
    """Width and height of the ink box of text."""
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    return right - left, bottom - top


def draw_text(
    image: Image.Image,
    text: str,
    font: str | Path | ImageFont.FreeTypeFont,
    size: int = 12,
    color: Color | str = "#000000",
    position: Anchor | str = Anchor.CENTER,
    margin: int = 0,
    shadow_color: Color | str | None = None,
    shadow_offset: tuple[int, int] = (0, 0),
) -> Image.Image:
    """
    Render a line of text at an anchor, with an optional drop shadow.

    The anchor places the text baseline; the shadow is drawn first at the
    same spot moved by shadow_offset.
    """
    fill = ensure_color(color)
    shadow = ensure_color(shadow_color) if shadow_color else None
    face = load_font(font, size)

    out = image.convert("RGBA")
    x, y = text_offset(out.size, text_size(face, text), size, position, margin)
    draw = ImageDraw.Draw(out)

    if shadow is not None:
        dx, dy = shadow_offset
        draw.text((x + dx, y + dy), text, fill=shadow.rgba, font=face, anchor="ls")
    draw.text((x, y), text, fill=fill.rgba, font=face, anchor="ls")

    logger.debug("Text %r at (%d, %d) size=%d", text, x, y, size)
    return out
