"""
Command-line frontend for the raster-editor engine. It:
1. Parses one editing command and its options
2. Runs the matching raster_editor.operations call
3. Reports the written file, or the error and a non-zero exit status

Deployment:
    pip install raster-editor
    raster-editor fit photo.png thumb.jpg 320 240 --format jpeg
"""

from .cli import cli, main
from .config import CliConfig

__all__ = ["cli", "main", "CliConfig"]
