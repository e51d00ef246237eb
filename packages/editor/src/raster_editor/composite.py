"""
Opacity-blended overlay that keeps the destination's transparency.

A plain opacity merge treats the overlay as an opaque rectangle: its
transparent pixels get blended in as transparent black, darkening and
punching holes into the destination. ``composite`` avoids this by
merging a scratch copy of the destination region that already has the
overlay alpha-composited onto it, so transparent overlay pixels blend the
destination with itself.
"""

from __future__ import annotations

from PIL import Image


def _clamp_opacity(opacity: float) -> float:
    return max(0.0, min(100.0, float(opacity))) / 100.0


def merge(
    dst: Image.Image,
    src: Image.Image,
    position: tuple[int, int],
    opacity: float,
) -> Image.Image:
    """
    Blend all of src onto dst at position with opacity percent (0-100).

    Every channel, alpha included, is interpolated; src alpha is not used
    as a mask. Parts of src outside dst are dropped.
    """
    x, y = position
    src = src.convert("RGBA")
    # convert() always returns a new image, dst is never modified
    out = dst.convert("RGBA")

    region = out.crop((x, y, x + src.width, y + src.height))
    out.paste(Image.blend(region, src, _clamp_opacity(opacity)), (x, y))
    return out


def composite(
    dst: Image.Image,
    src: Image.Image,
    position: tuple[int, int],
    opacity: float = 100,
) -> Image.Image:
    """Overlay src onto dst at opacity percent, honouring both alpha channels."""
    x, y = position
    src = src.convert("RGBA")
    base = dst.convert("RGBA")

    scratch = base.crop((x, y, x + src.width, y + src.height))
    scratch.alpha_composite(src)

    return merge(base, scratch, (x, y), opacity)
