from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from models.image import Image


@pytest.fixture
def make_image():
    """Build an Image from a nested list / array of RGB triples laid out [row][col]."""
    def _make(rows, path=None):
        return Image(pixels=np.array(rows, dtype=np.uint8), path=path)
    return _make


@pytest.fixture
def write_png(tmp_path):
    """Write an (H, W, 3) uint8 array to a PNG under tmp_path with Pillow."""
    def _write(pixels, name="input.png") -> Path:
        path = tmp_path / name
        PILImage.fromarray(np.asarray(pixels, dtype=np.uint8)).save(path)
        return path
    return _write


@pytest.fixture
def primaries():
    # 2 rows x 3 cols: red, green, blue / black, white, gray(128)
    return [
        [(255, 0, 0), (0, 255, 0), (0, 0, 255)],
        [(0, 0, 0), (255, 255, 255), (128, 128, 128)],
    ]
