from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class Image:
    """
    Simple data object: RGB pixels (+ optional path for bookkeeping).
    No file I/O outside ImageRepository.
    """
    pixels: np.ndarray # Shape (H, W, 3), dtype uint8, RGB order. (H, W, 4) when alpha was requested.
    path: Path | None = None # Where the image was read from / will be written to.

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]
