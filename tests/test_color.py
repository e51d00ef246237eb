import pytest
from PIL import Image

from raster_editor.color import Color, color_at, ensure_color, parse_color
from raster_editor.errors import InvalidArgument, InvalidColor


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#FFFFFF", (255, 255, 255)),
        ("FFFFFF", (255, 255, 255)),
        ("#fff", (255, 255, 255)),
        ("000", (0, 0, 0)),
        ("#1a2B3c", (26, 43, 60)),
        ("#f80", (255, 136, 0)),
    ],
)
def test_parse_color(value, expected):
    color = parse_color(value)
    assert color.rgb == expected
    assert color.alpha is None


@pytest.mark.parametrize("value", ["", "#", "#ab", "#abcd", "#abcde", "#1234567", "#GGGGGG", "#12 456"])
def test_parse_color_rejects_malformed(value):
    with pytest.raises(InvalidColor) as excinfo:
        parse_color(value)
    assert excinfo.value.value == value


def test_invalid_color_is_value_error():
    with pytest.raises(ValueError):
        parse_color("nope")


def test_color_accessors():
    color = Color(10, 11, 12)
    assert color.hex == "#0A0B0C"
    assert color.rgba == (10, 11, 12, 255)
    assert Color(1, 2, 3, 0).rgba == (1, 2, 3, 0)


def test_ensure_color_passes_color_through():
    color = Color(1, 2, 3)
    assert ensure_color(color) is color
    assert ensure_color("#010203") == color


def test_color_at():
    image = Image.new("RGBA", (4, 4), (255, 255, 255, 255))
    image.putpixel((2, 3), (0, 0, 0, 128))
    assert color_at(image, 0, 0).hex == "#FFFFFF"
    assert color_at(image, 2, 3) == Color(0, 0, 0, 128)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_color_at_out_of_range(x, y):
    image = Image.new("RGBA", (4, 4))
    with pytest.raises(InvalidArgument):
        color_at(image, x, y)
