from pathlib import Path

import pytest
from click.testing import CliRunner

from raster_cli.cli import cli
from raster_cli.config import CliConfig
from raster_editor import codec


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source(framed, write_image):
    return write_image(framed((100, 100), (50, 50)))


def test_convert(runner, source, tmp_path):
    dest = tmp_path / "out.jpg"
    result = runner.invoke(cli, ["convert", str(source), str(dest)])
    assert result.exit_code == 0, result.output
    assert "100x100 JPEG" in result.output
    assert codec.load(dest)[1].format.value == "JPEG"


def test_fit_with_format(runner, source, tmp_path):
    dest = tmp_path / "out.img"
    result = runner.invoke(cli, ["fit", str(source), str(dest), "40", "30", "-f", "png"])
    assert result.exit_code == 0, result.output
    assert "30x30 PNG" in result.output


def test_trim_in_place(runner, source):
    result = runner.invoke(cli, ["trim", str(source)])
    assert result.exit_code == 0, result.output
    assert codec.load(source)[0].size == (50, 50)


def test_square_trim(runner, source, tmp_path):
    dest = tmp_path / "sq.png"
    result = runner.invoke(cli, ["square", str(source), str(dest), "100", "--trim"])
    assert result.exit_code == 0, result.output
    assert codec.load(dest)[0].getpixel((25, 25))[:3] == (0, 0, 0)


def test_color_at(runner, source):
    result = runner.invoke(cli, ["color-at", str(source), "50", "50"])
    assert result.exit_code == 0
    assert result.output.strip() == "#000000"


def test_color_at_out_of_range(runner, source):
    result = runner.invoke(cli, ["color-at", str(source), "500", "0"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_failed_operation_exits_1(runner, tmp_path):
    result = runner.invoke(cli, ["convert", str(tmp_path / "missing.png"), str(tmp_path / "o.png")])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_resize_needs_a_dimension(runner, source, tmp_path):
    result = runner.invoke(cli, ["resize", str(source), str(tmp_path / "o.png")])
    assert result.exit_code == 2


def test_resize_width_only(runner, source, tmp_path):
    result = runner.invoke(cli, ["resize", str(source), str(tmp_path / "o.png"), "-w", "20"])
    assert result.exit_code == 0, result.output
    assert "20x20 PNG" in result.output


def test_filter_with_negative_argument(runner, tmp_path, solid, write_image):
    src = write_image(solid((4, 4), (100, 100, 100, 255)))
    dest = tmp_path / "o.png"
    result = runner.invoke(cli, ["filter", str(src), str(dest), "--", "brightness", "-40"])
    assert result.exit_code == 0, result.output
    assert codec.load(dest)[0].getpixel((0, 0)) == (60, 60, 60, 255)


def test_text_requires_font(runner, source, tmp_path, monkeypatch):
    monkeypatch.delenv("RASTER_EDITOR_FONT", raising=False)
    result = runner.invoke(cli, ["text", str(source), str(tmp_path / "o.png"), "hi"])
    assert result.exit_code == 2


def test_config_defaults(monkeypatch):
    for name in ("RASTER_EDITOR_RESAMPLE", "RASTER_EDITOR_BACKGROUND", "RASTER_EDITOR_FONT"):
        monkeypatch.delenv(name, raising=False)
    assert CliConfig.load() == CliConfig()


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("RASTER_EDITOR_RESAMPLE", "Off")
    monkeypatch.setenv("RASTER_EDITOR_BACKGROUND", "#000")
    monkeypatch.setenv("RASTER_EDITOR_FONT", "/fonts/sans.ttf")
    config = CliConfig.load()
    assert config.resample is False
    assert config.background == "#000"
    assert config.font == Path("/fonts/sans.ttf")


def test_square_trim_uses_background_and_format(runner, source, tmp_path):
    dest = tmp_path / "sq.out"
    result = runner.invoke(
        cli, ["square", str(source), str(dest), "100", "--trim", "-b", "#000000", "-f", "jpeg"],
    )
    assert result.exit_code == 0, result.output
    assert "100x100 JPEG" in result.output
    image, meta = codec.load(dest)
    assert meta.format.value == "JPEG"
    assert max(image.getpixel((0, 0))[:3]) < 40


def test_fit_background_option(runner, tmp_path, solid, write_image):
    src = write_image(solid((40, 40), (0, 0, 0, 0)))
    dest = tmp_path / "o.png"
    result = runner.invoke(cli, ["fit", str(src), str(dest), "20", "20", "-b", "#00FF00"])
    assert result.exit_code == 0, result.output
    assert codec.load(dest)[0].getpixel((5, 5)) == (0, 255, 0, 255)


def test_unknown_position_rejected(runner, source, tmp_path, solid, write_image):
    mark = write_image(solid((10, 10)), "mark.png")
    result = runner.invoke(cli, ["watermark", str(source), str(tmp_path / "o.png"), str(mark), "-p", "middle"])
    assert result.exit_code == 1
    assert "Unknown position" in result.output
