"""CLI for the raster-editor engine."""

from __future__ import annotations

import logging
import sys

import click

from raster_editor import operations
from raster_editor.errors import ImagingError
from raster_editor.operations import OperationResult

from .config import CliConfig

FORMAT_CHOICES = click.Choice(["gif", "jpeg", "jpg", "png"], case_sensitive=False)
POSITION_HELP = "Anchor, e.g. top-left, bottom, center (unknown names are rejected)"
BACKGROUND_HELP = "Fill color for transparent areas (JPEG output always gets one)"

quality_option = click.option(
    "-q", "--quality", type=int, default=None,
    help="JPEG quality 0-100 or PNG compression 0-9 (clamped)",
)
nearest_option = click.option(
    "--nearest", is_flag=True, help="Nearest-neighbour scaling instead of resampling",
)
format_option = click.option(
    "-f", "--format", "output_format", type=FORMAT_CHOICES, default=None,
    help="Output format (default: same as source)",
)


def _config() -> CliConfig:
    return click.get_current_context().find_object(CliConfig) or CliConfig.load()


def _resample(nearest: bool) -> bool:
    return _config().resample and not nearest


def _report(result: OperationResult) -> None:
    if not result:
        click.echo(f"Error: {result.error}", err=True)
        click.get_current_context().exit(1)
    meta = result.metadata
    click.echo(f"Wrote {result.dest} ({meta.width}x{meta.height} {meta.format.value})")


def _parse_filter_arg(value: str) -> object:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for kind in (int, float):
        try:
            return kind(value)
        except ValueError:
            continue
    raise click.BadParameter(f"Not a number or boolean: {value}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Edit GIF, JPEG and PNG images."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    ctx.obj = CliConfig.load()


@cli.command()
@click.argument("src")
@click.argument("dest")
@quality_option
def convert(src: str, dest: str, quality: int | None) -> None:
    """Convert SRC to the format named by DEST's extension."""
    _report(operations.convert(src, dest, quality))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("direction", type=click.Choice(["vertical", "v", "y", "horizontal", "h", "x"],
                                               case_sensitive=False))
@quality_option
def flip(src: str, dest: str, direction: str, quality: int | None) -> None:
    """Mirror SRC vertically or horizontally."""
    _report(operations.flip(src, dest, direction, quality))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.option("-a", "--angle", default="270", help="Degrees counter-clockwise, or cw/ccw")
@click.option("-b", "--background", default=None, help="Fill color for uncovered corners")
@quality_option
def rotate(src: str, dest: str, angle: str, background: str | None, quality: int | None) -> None:
    """Rotate SRC, growing the canvas to fit."""
    background = background or _config().background
    _report(operations.rotate(src, dest, angle, background, quality))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.option("-w", "--width", type=int, default=None, help="Target width")
@click.option("-h", "--height", type=int, default=None, help="Target height")
@click.option("-b", "--background", default=None, help=BACKGROUND_HELP)
@nearest_option
@quality_option
@format_option
def resize(src: str, dest: str, width: int | None, height: int | None, nearest: bool,
           quality: int | None, output_format: str | None, background: str | None) -> None:
    """Resize SRC. Giving only one of width/height keeps the aspect ratio."""
    resample = _resample(nearest)
    if width is not None and height is not None:
        result = operations.resize(
            src, dest, width, height, resample, quality, output_format, background,
        )
    elif width is not None:
        result = operations.resize_to_width(
            src, dest, width, resample, quality, output_format, background,
        )
    elif height is not None:
        result = operations.resize_to_height(
            src, dest, height, resample, quality, output_format, background,
        )
    else:
        raise click.UsageError("Give --width, --height or both")
    _report(result)


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("max_width", type=int)
@click.argument("max_height", type=int)
@click.option("-b", "--background", default=None, help=BACKGROUND_HELP)
@nearest_option
@quality_option
@format_option
def fit(src: str, dest: str, max_width: int, max_height: int, nearest: bool,
        quality: int | None, output_format: str | None,
        background: str | None) -> None:
    """Shrink SRC to fit within MAX_WIDTH x MAX_HEIGHT."""
    _report(operations.shrink_to_fit(
        src, dest, max_width, max_height, _resample(nearest), quality, output_format, background,
    ))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("size", type=int)
@click.option("-b", "--background", default=None, help="Canvas color")
@click.option("--trim", is_flag=True, help="Trim the uniform border first")
@nearest_option
@quality_option
@format_option
def square(src: str, dest: str, size: int, background: str | None, trim: bool,
           nearest: bool, quality: int | None, output_format: str | None) -> None:
    """Shrink SRC onto a SIZE x SIZE canvas."""
    resample = _resample(nearest)
    canvas_color = background or _config().background
    if trim:
        result = operations.shrink_to_square_non_background(
            src, dest, size, resample, quality,
            output_format=output_format, canvas_background=canvas_color,
        )
    else:
        result = operations.shrink_to_square(
            src, dest, size, resample, quality, output_format, canvas_color,
        )
    _report(result)


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("width", type=int)
@click.argument("height", type=int)
@click.option("-b", "--background", default=None, help="Color of the bands")
@nearest_option
@quality_option
@format_option
def canvas(src: str, dest: str, width: int, height: int, background: str | None,
           nearest: bool, quality: int | None, output_format: str | None) -> None:
    """Shrink SRC onto a centered WIDTH x HEIGHT canvas."""
    _report(operations.shrink_to_size(
        src, dest, width, height, _resample(nearest), quality, output_format,
        background or _config().background,
    ))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("x1", type=int)
@click.argument("y1", type=int)
@click.argument("x2", type=int)
@click.argument("y2", type=int)
@click.option("-w", "--width", type=int, default=None, help="Scale the piece to this width")
@click.option("-h", "--height", type=int, default=None, help="Scale the piece to this height")
@nearest_option
@quality_option
def crop(src: str, dest: str, x1: int, y1: int, x2: int, y2: int, width: int | None,
         height: int | None, nearest: bool, quality: int | None) -> None:
    """Cut the rectangle (X1, Y1)-(X2, Y2) out of SRC."""
    _report(operations.crop(
        src, dest, x1, y1, x2, y2, width, height, _resample(nearest), quality,
    ))


@cli.command("square-crop")
@click.argument("src")
@click.argument("dest")
@click.option("-s", "--size", type=int, default=None, help="Scale the square to this size")
@quality_option
def square_crop(src: str, dest: str, size: int | None, quality: int | None) -> None:
    """Crop the centered square of SRC."""
    _report(operations.square_crop(src, dest, size, quality))


@cli.command()
@click.argument("src")
@click.argument("dest", required=False)
@click.option("-b", "--background", default=None,
              help="Border color (default: top-left pixel)")
@quality_option
def trim(src: str, dest: str | None, background: str | None, quality: int | None) -> None:
    """Remove the uniform border of SRC, in place unless DEST is given."""
    _report(operations.shrink_to_non_background(
        src, dest, 100 if quality is None else quality, background,
    ))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("mark")
@click.option("-p", "--position", default="center", help=POSITION_HELP)
@click.option("-o", "--opacity", type=click.IntRange(0, 100), default=50, help="Percent")
@click.option("-m", "--margin", type=int, default=0, help="Distance from the edges")
@quality_option
def watermark(src: str, dest: str, mark: str, position: str, opacity: int, margin: int,
              quality: int | None) -> None:
    """Overlay the image MARK onto SRC."""
    _report(operations.watermark(src, dest, mark, position, opacity, margin, quality))


@cli.command()
@click.argument("src")
@click.argument("dest")
@click.argument("content")
@click.option("--font", "font_file", default=None, help="TrueType font file")
@click.option("-s", "--size", type=int, default=12, help="Font size")
@click.option("-c", "--color", default="#000000", help="Text color")
@click.option("-p", "--position", default="center", help=POSITION_HELP)
@click.option("-m", "--margin", type=int, default=0, help="Distance from the edges")
@click.option("--shadow-color", default=None, help="Draw a shadow in this color")
@click.option("--shadow-offset", type=(int, int), default=(0, 0), help="Shadow shift X Y")
@quality_option
def text(src: str, dest: str, content: str, font_file: str | None, size: int, color: str,
         position: str, margin: int, shadow_color: str | None,
         shadow_offset: tuple[int, int], quality: int | None) -> None:
    """Write CONTENT onto SRC."""
    font = font_file or _config().font
    if font is None:
        raise click.UsageError("Give --font or set RASTER_EDITOR_FONT")
    _report(operations.text(
        src, dest, content, font, size, color, position, margin,
        shadow_color, shadow_offset[0], shadow_offset[1], quality,
    ))


@cli.command("filter")
@click.argument("src")
@click.argument("dest")
@click.argument("name")
@click.argument("args", nargs=-1)
@quality_option
def filter_(src: str, dest: str, name: str, args: tuple[str, ...], quality: int | None) -> None:
    """Apply filter NAME to SRC, e.g. `filter in.png out.png -- brightness -40`."""
    parsed = [_parse_filter_arg(arg) for arg in args]
    _report(operations.apply_filter(src, dest, name, *parsed, quality=quality))


@cli.command("color-at")
@click.argument("src")
@click.argument("x", type=int, default=0)
@click.argument("y", type=int, default=0)
def color_at(src: str, x: int, y: int) -> None:
    """Print the hex color of pixel (X, Y) of SRC."""
    try:
        click.echo(operations.get_color_at_position(src, x, y))
    except (ImagingError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
