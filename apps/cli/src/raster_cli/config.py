"""Configuration for the raster-editor CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class CliConfig:
    """CLI defaults. Command options override these."""

    resample: bool = True
    background: str = "#FFFFFF"
    font: Path | None = None

    @classmethod
    def load(cls) -> CliConfig:
        """Load from environment variables."""
        font = os.getenv("RASTER_EDITOR_FONT")
        return cls(
            resample=os.getenv("RASTER_EDITOR_RESAMPLE", "1").strip().lower() not in _FALSE_VALUES,
            background=os.getenv("RASTER_EDITOR_BACKGROUND", "#FFFFFF"),
            font=Path(font) if font else None,
        )
