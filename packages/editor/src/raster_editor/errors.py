"""
Exception types raised by the editing engine.

Buffer-level functions raise these; the path-level functions in
``operations`` catch them and report a failed OperationResult.
Filesystem problems are left as the builtin OSError.
"""

from __future__ import annotations


class ImagingError(Exception):
    """Base exception for image editing failures."""
    pass


class UnsupportedFormat(ImagingError):
    """Raised when input can't be decoded or a format isn't GIF/JPEG/PNG."""

    def __init__(self, source: object, reason: str = "unsupported image format"):
        self.source = source
        self.reason = reason
        super().__init__(f"{reason}: {source}")


class InvalidColor(ImagingError, ValueError):
    """Raised when a hex color string is malformed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid hex color: {value!r}")


class InvalidAnchor(ImagingError, ValueError):
    """Raised when a position name doesn't match any anchor."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown position: {value!r}")


class InvalidArgument(ImagingError, ValueError):
    """Raised for a bad direction, angle, filter name or coordinate."""
    pass


class InvalidDimensions(InvalidArgument):
    """Raised when a computed or requested size is below one pixel."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(f"Invalid image dimensions: {width}x{height}")


class EncodeError(ImagingError):
    """Raised when the codec fails to write an image."""

    def __init__(self, format: str, cause: BaseException):
        self.format = format
        self.cause = cause
        super().__init__(f"{format} encode failed: {cause}")
