import pytest
from PIL import Image

from raster_editor.errors import InvalidDimensions
from raster_editor.trim import TrimResult, content_mask, trim_box

from conftest import BLACK, RED, WHITE


def test_uniform_image_is_all_trim(solid):
    box = trim_box(solid((40, 30), RED))
    assert box.result is TrimResult.ALL_TRIM
    assert box.box == (0, 0, 40, 30)
    assert (box.width, box.height) == (40, 30)


def test_centered_content(framed):
    box = trim_box(framed((100, 100), (50, 50)))
    assert box.result is TrimResult.PARTIAL_TRIM
    assert box.box == (25, 25, 75, 75)
    assert (box.width, box.height) == (50, 50)
    assert (box.original_width, box.original_height) == (100, 100)


def test_content_touching_every_edge(solid):
    image = solid((20, 10), BLACK)
    image.putpixel((0, 0), WHITE)
    box = trim_box(image)
    assert box.result is TrimResult.NO_TRIM
    assert box.box == (0, 0, 20, 10)


def test_single_pixel(solid):
    image = solid((10, 10))
    image.putpixel((3, 7), BLACK)
    box = trim_box(image)
    assert box.box == (3, 7, 4, 8)
    assert (box.width, box.height) == (1, 1)


def test_explicit_background(solid):
    image = solid((20, 20))
    image.paste(BLACK, (5, 5, 15, 15))
    image.putpixel((0, 0), RED)

    # the red corner is taken as background, so all the white counts
    assert trim_box(image).result is TrimResult.NO_TRIM

    box = trim_box(image, "#FFFFFF")
    assert box.box == (0, 0, 15, 15)
    assert box.result is TrimResult.PARTIAL_TRIM


def test_alpha_is_compared(solid):
    image = solid((10, 10), (255, 255, 255, 0))
    image.putpixel((4, 4), (255, 255, 255, 255))
    assert trim_box(image).box == (4, 4, 5, 5)


def test_content_mask_shape(framed):
    mask = content_mask(framed((30, 20), (10, 4)))
    assert mask.shape == (20, 30)
    assert mask.sum() == 40


def test_empty_image_rejected():
    with pytest.raises(InvalidDimensions):
        trim_box(Image.new("RGBA", (0, 5)))
