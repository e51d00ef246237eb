from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest
from PIL import Image

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


@pytest.fixture
def solid() -> Callable[..., Image.Image]:
    def _solid(size: tuple[int, int], color: tuple[int, ...] = WHITE) -> Image.Image:
        return Image.new("RGBA", size, color)
    return _solid


@pytest.fixture
def framed() -> Callable[..., Image.Image]:
    """White image with a centered black rectangle."""
    def _framed(size: tuple[int, int] = (100, 100), inner: tuple[int, int] = (50, 50)) -> Image.Image:
        w, h = size
        iw, ih = inner
        image = Image.new("RGBA", size, WHITE)
        x1 = int(w / 2 - iw / 2)
        y1 = int(h / 2 - ih / 2)
        image.paste(BLACK, (x1, y1, x1 + iw, y1 + ih))
        return image
    return _framed


@pytest.fixture
def noisy() -> Callable[..., Image.Image]:
    """Deterministic random opaque image."""
    def _noisy(size: tuple[int, int] = (64, 48), seed: int = 7) -> Image.Image:
        w, h = size
        rng = np.random.default_rng(seed)
        rgb = rng.integers(0, 256, size=(h, w, 3), dtype=np.uint8)
        alpha = np.full((h, w, 1), 255, dtype=np.uint8)
        return Image.fromarray(np.concatenate([rgb, alpha], axis=2))
    return _noisy


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., Path]:
    """Save an image under tmp_path; the extension picks the format."""
    def _write(image: Image.Image, name: str = "source.png") -> Path:
        path = tmp_path / name
        if path.suffix.lower() in (".jpg", ".jpeg"):
            image.convert("RGB").save(path, quality=95)
        else:
            image.save(path)
        return path
    return _write
