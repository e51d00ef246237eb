import os
import stat
from io import BytesIO

import pytest
from PIL import Image

from raster_editor import codec
from raster_editor.codec import ImageFormat, resolve_quality
from raster_editor.errors import EncodeError, UnsupportedFormat


@pytest.mark.parametrize(
    "fmt, quality, expected",
    [
        (ImageFormat.JPEG, None, 85),
        (ImageFormat.JPEG, 50, 50),
        (ImageFormat.JPEG, -100, 0),
        (ImageFormat.JPEG, 200, 100),
        (ImageFormat.PNG, None, 9),
        (ImageFormat.PNG, 0, 0),
        (ImageFormat.PNG, -5, 0),
        (ImageFormat.PNG, 12, 9),
        (ImageFormat.GIF, None, None),
        (ImageFormat.GIF, 50, None),
    ],
)
def test_resolve_quality(fmt, quality, expected):
    assert resolve_quality(fmt, quality) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("photo.JPG", ImageFormat.JPEG),
        ("photo.jpeg", ImageFormat.JPEG),
        ("icon.png", ImageFormat.PNG),
        ("anim.gif", ImageFormat.GIF),
    ],
)
def test_format_from_path(value, expected):
    assert ImageFormat.from_path(value) is expected


def test_format_from_path_rejects_other_extensions():
    with pytest.raises(UnsupportedFormat):
        ImageFormat.from_path("picture.bmp")


def test_format_lookups():
    assert ImageFormat.from_extension("JPEG") is ImageFormat.JPEG
    assert ImageFormat.from_extension(".gif") is ImageFormat.GIF
    assert ImageFormat.coerce("image/png") is ImageFormat.PNG
    assert ImageFormat.coerce("jpg") is ImageFormat.JPEG
    assert ImageFormat.from_mime("image/gif") is ImageFormat.GIF
    assert ImageFormat.JPEG.mime == "image/jpeg"
    assert ImageFormat.JPEG.extension == ".jpg"
    with pytest.raises(UnsupportedFormat):
        ImageFormat.coerce("webp")


def test_png_round_trip_keeps_alpha():
    image = Image.new("RGBA", (5, 4), (10, 20, 30, 40))
    decoded, meta = codec.decode(codec.encode(image, "png"))
    assert meta == codec.ImageMetadata(5, 4, ImageFormat.PNG)
    assert decoded.mode == "RGBA"
    assert decoded.getpixel((0, 0)) == (10, 20, 30, 40)


def test_jpeg_drops_alpha_and_decodes_to_rgba():
    image = Image.new("RGBA", (8, 8), (200, 0, 0, 0))
    decoded, meta = codec.decode(codec.encode(image, ImageFormat.JPEG))
    assert meta.format is ImageFormat.JPEG
    assert decoded.mode == "RGBA"
    assert decoded.getpixel((0, 0))[3] == 255


def test_gif_round_trip():
    image = Image.new("RGBA", (6, 3), (255, 0, 0, 255))
    decoded, meta = codec.decode(codec.encode(image, ImageFormat.GIF))
    assert meta.format is ImageFormat.GIF
    assert decoded.size == (6, 3)


def test_jpeg_quality_is_clamped_when_encoding():
    image = Image.new("RGBA", (16, 16), (90, 140, 200, 255))
    assert codec.encode(image, "jpeg", -100) == codec.encode(image, "jpeg", 0)
    assert codec.encode(image, "jpeg", 200) == codec.encode(image, "jpeg", 100)


def test_decode_rejects_garbage():
    with pytest.raises(UnsupportedFormat):
        codec.decode(b"definitely not an image")


def test_decode_rejects_unsupported_format():
    buffer = BytesIO()
    Image.new("RGB", (2, 2)).save(buffer, format="BMP")
    with pytest.raises(UnsupportedFormat) as excinfo:
        codec.decode(buffer.getvalue(), source="x.bmp")
    assert excinfo.value.source == "x.bmp"


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        codec.load(tmp_path / "missing.png")


def test_save_writes_file(tmp_path):
    path = tmp_path / "out.png"
    meta = codec.save(Image.new("RGBA", (3, 2)), path, "png")
    assert (meta.width, meta.height) == (3, 2)
    assert path.exists()
    assert [p.name for p in tmp_path.iterdir()] == ["out.png"]


def test_save_encode_failure_leaves_destination(tmp_path, monkeypatch):
    path = tmp_path / "out.png"
    path.write_bytes(b"original")

    def broken(*args, **kwargs):
        raise EncodeError("PNG", OSError("disk codec exploded"))

    monkeypatch.setattr(codec, "encode", broken)
    with pytest.raises(EncodeError):
        codec.save(Image.new("RGBA", (3, 2)), path, "png")

    assert path.read_bytes() == b"original"
    assert [p.name for p in tmp_path.iterdir()] == ["out.png"]


def test_save_rename_failure_cleans_up(tmp_path, monkeypatch):
    path = tmp_path / "out.png"
    path.write_bytes(b"original")

    def no_replace(src, dst):
        raise PermissionError("read-only")

    monkeypatch.setattr(codec.os, "replace", no_replace)
    with pytest.raises(OSError):
        codec.save(Image.new("RGBA", (3, 2)), path, "png")

    assert path.read_bytes() == b"original"
    assert [p.name for p in tmp_path.iterdir()] == ["out.png"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_save_new_file_honours_umask(tmp_path):
    old = os.umask(0o027)
    try:
        path = tmp_path / "out.png"
        codec.save(Image.new("RGBA", (3, 2)), path, "png")
    finally:
        os.umask(old)
    assert stat.S_IMODE(path.stat().st_mode) == 0o640
