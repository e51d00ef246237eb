"""
Decode and encode GIF, JPEG and PNG images through Pillow.

Decoded images are always returned in RGBA mode together with an
ImageMetadata record. Saving encodes fully in memory first, then writes a
temporary file next to the destination and renames it into place, so a
failed save never leaves a partially written destination behind.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import EncodeError, UnsupportedFormat

logger = logging.getLogger(__name__)


class ImageFormat(str, Enum):
    GIF = "GIF"
    JPEG = "JPEG"
    PNG = "PNG"

    @property
    def mime(self) -> str:
        return f"image/{self.value.lower()}"

    @property
    def extension(self) -> str:
        return ".jpg" if self is ImageFormat.JPEG else f".{self.value.lower()}"

    @classmethod
    def coerce(cls, value: ImageFormat | str) -> ImageFormat:
        """Accept an ImageFormat, a name, an extension or a MIME type."""
        if isinstance(value, cls):
            return value
        fmt = _FORMAT_ALIASES.get(str(value).strip().lower())
        if fmt is None:
            raise UnsupportedFormat(value, "unsupported output format")
        return fmt

    @classmethod
    def from_mime(cls, mime: str) -> ImageFormat:
        for fmt in cls:
            if fmt.mime == mime.lower():
                return fmt
        raise UnsupportedFormat(mime, "unsupported MIME type")

    @classmethod
    def from_extension(cls, extension: str) -> ImageFormat:
        """``.jpg`` and ``.jpeg`` are both JPEG; the dot is optional."""
        ext = extension.strip().lower()
        fmt = _FORMAT_ALIASES.get(ext if ext.startswith(".") else f".{ext}")
        if fmt is None:
            raise UnsupportedFormat(extension, "unsupported file extension")
        return fmt

    @classmethod
    def from_path(cls, path: str | Path) -> ImageFormat:
        return cls.from_extension(Path(path).suffix)


_FORMAT_ALIASES: dict[str, ImageFormat] = {}
for _fmt in ImageFormat:
    _FORMAT_ALIASES[_fmt.value.lower()] = _fmt
    _FORMAT_ALIASES[_fmt.mime] = _fmt
    _FORMAT_ALIASES[f".{_fmt.value.lower()}"] = _fmt
_FORMAT_ALIASES["jpg"] = ImageFormat.JPEG
_FORMAT_ALIASES[".jpg"] = ImageFormat.JPEG


@dataclass(frozen=True)
class ImageMetadata:
    """Dimensions and format of a decoded or written image."""
    width: int
    height: int
    format: ImageFormat


@dataclass(frozen=True)
class QualityPolicy:
    """Default and clamp range of a format's quality parameter."""
    default: int
    low: int
    high: int

    def clamp(self, quality: int | None) -> int:
        if quality is None:
            return self.default
        return max(self.low, min(self.high, int(quality)))


# JPEG quality is 0-100, PNG quality is the zlib compression level 0-9.
# GIF has no quality parameter.
QUALITY_POLICIES: dict[ImageFormat, QualityPolicy] = {
    ImageFormat.JPEG: QualityPolicy(default=85, low=0, high=100),
    ImageFormat.PNG: QualityPolicy(default=9, low=0, high=9),
}


def resolve_quality(fmt: ImageFormat | str, quality: int | None = None) -> int | None:
    """
    Return the effective quality for an encode call.

    Out-of-range values are clamped, never rejected. Returns None for
    formats that ignore quality.
    """
    policy = QUALITY_POLICIES.get(ImageFormat.coerce(fmt))
    if policy is None:
        return None
    return policy.clamp(quality)


def decode(data: bytes, source: object = "<bytes>") -> tuple[Image.Image, ImageMetadata]:
    """
    Decode image bytes into an RGBA image and its metadata.

    The format is sniffed from the data, not taken from a file name.

    Raises UnsupportedFormat: If the data isn't a decodable GIF, JPEG or PNG
    """
    try:
        with Image.open(BytesIO(data)) as img:
            # Pillow reports multi-picture camera JPEGs as MPO
            detected = "JPEG" if img.format == "MPO" else img.format
            if detected not in ImageFormat.__members__:
                raise UnsupportedFormat(source, f"unsupported image format {detected}")
            img.load()
            image = ImageOps.exif_transpose(img).convert("RGBA")
    except UnidentifiedImageError as e:
        raise UnsupportedFormat(source, "unrecognized image data") from e
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise UnsupportedFormat(source, f"undecodable image ({e})") from e

    meta = ImageMetadata(image.width, image.height, ImageFormat(detected))
    logger.debug("Decoded %s: %dx%d %s", source, meta.width, meta.height, meta.format.value)
    return image, meta


def load(path: str | Path) -> tuple[Image.Image, ImageMetadata]:
    """Read and decode an image file. OSError propagates."""
    path = Path(path)
    return decode(path.read_bytes(), source=path)


def encode(image: Image.Image, fmt: ImageFormat | str, quality: int | None = None) -> bytes:
    """
    Encode an image to bytes.

    JPEG drops the alpha channel. PNG keeps it. GIF is palettized by Pillow.

    Raises EncodeError: If the codec fails
    """
    fmt = ImageFormat.coerce(fmt)
    effective = resolve_quality(fmt, quality)
    params: dict[str, int] = {}

    if fmt is ImageFormat.JPEG:
        image = image.convert("RGB")
        params["quality"] = effective
    elif fmt is ImageFormat.PNG:
        params["compress_level"] = effective

    buffer = BytesIO()
    try:
        image.save(buffer, format=fmt.value, **params)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(fmt.value, e) from e

    logger.debug("Encoded %s quality=%s (%d bytes)", fmt.value, effective, buffer.tell())
    return buffer.getvalue()


def _umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save(
    image: Image.Image,
    path: str | Path,
    fmt: ImageFormat | str,
    quality: int | None = None,
) -> ImageMetadata:
    """
    Encode and atomically write an image to path.

    The destination is replaced only after the whole file has been written,
    so it may safely be the file the image was read from.

    Raises:
        EncodeError: If the codec fails (destination untouched)
        OSError: If the temporary file can't be written or renamed
    """
    path = Path(path)
    fmt = ImageFormat.coerce(fmt)
    data = encode(image, fmt, quality)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        if path.exists():
            shutil.copymode(path, tmp_path)
        else:
            os.chmod(tmp_path, 0o666 & ~_umask())
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise

    return ImageMetadata(image.width, image.height, fmt)
