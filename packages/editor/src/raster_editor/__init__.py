"""
Raster Image Editing Engine.

This package is the core editing logic: format conversion, resizing,
cropping, trimming uniform borders, watermarks and text. Transforms work
on RGBA Pillow images; the ``operations`` module wraps them as
file-to-file calls that report an OperationResult.

Deployment:
    pip install raster-editor

This package has no networking dependencies. It's pure image processing.

"""

from . import filters, operations
from .anchor import ANCHOR_ALIASES, Anchor, anchor_offset, parse_anchor, text_offset
from .codec import (
    QUALITY_POLICIES,
    ImageFormat,
    ImageMetadata,
    decode,
    encode,
    load,
    resolve_quality,
    save,
)
from .color import Color, color_at, ensure_color, parse_color
from .composite import composite, merge
from .errors import (
    EncodeError,
    ImagingError,
    InvalidAnchor,
    InvalidArgument,
    InvalidColor,
    InvalidDimensions,
    UnsupportedFormat,
)
from .fit import FitResult, fit_to_canvas, resize_to_height, resize_to_width, shrink_to_fit, shrink_to_square
from .operations import OperationResult
from .trim import TrimBox, TrimResult, trim_box

__all__ = [
    # Modules
    "filters",
    "operations",
    # Errors
    "ImagingError",
    "UnsupportedFormat",
    "InvalidColor",
    "InvalidAnchor",
    "InvalidArgument",
    "InvalidDimensions",
    "EncodeError",
    # Codec
    "ImageFormat",
    "ImageMetadata",
    "QUALITY_POLICIES",
    "resolve_quality",
    "decode",
    "encode",
    "load",
    "save",
    # Color
    "Color",
    "parse_color",
    "ensure_color",
    "color_at",
    # Geometry
    "TrimBox",
    "TrimResult",
    "trim_box",
    "FitResult",
    "resize_to_width",
    "resize_to_height",
    "shrink_to_fit",
    "shrink_to_square",
    "fit_to_canvas",
    "Anchor",
    "ANCHOR_ALIASES",
    "parse_anchor",
    "anchor_offset",
    "text_offset",
    # Compositing
    "merge",
    "composite",
    # Files
    "OperationResult",
]
