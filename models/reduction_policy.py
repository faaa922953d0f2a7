from __future__ import annotations
from enum import Enum
import numpy as np

# ITU-R BT.709 luma weights for R, G, B.
BT709_COEFFICIENTS = (0.2126, 0.7152, 0.0722)

# Fixed-point form of the weights: floor(sum(w * c)) == (sum(W * c)) // SCALE,
# exact for every 8-bit input (no float drift below integer boundaries).
_LUMA_SCALE = 10_000
_LUMA_WEIGHTS = tuple(int(round(c * _LUMA_SCALE)) for c in BT709_COEFFICIENTS)


class ReductionPolicy(Enum):
    """
    How an RGB triple collapses into one intensity.

    AVERAGE     Method A: (r + g + b) // 3
    LUMINOSITY  Method B: floor(0.2126*r + 0.7152*g + 0.0722*b)
    """
    AVERAGE = "average"
    LUMINOSITY = "luminosity"

    @property
    def label(self) -> str:
        """Short method letter used in output names."""
        return "A" if self is ReductionPolicy.AVERAGE else "B"

    def apply(self, r: int, g: int, b: int) -> int:
        r, g, b = int(r), int(g), int(b)
        for name, component in (("r", r), ("g", g), ("b", b)):
            if not 0 <= component <= 255:
                raise ValueError(f"{name}={component} is not an 8-bit component")

        if self is ReductionPolicy.AVERAGE:
            return (r + g + b) // 3
        wr, wg, wb = _LUMA_WEIGHTS
        return (wr * r + wg * g + wb * b) // _LUMA_SCALE

    def apply_array(self, pixels: np.ndarray) -> np.ndarray:
        """
        Reduce a whole (H, W, 3|4) uint8 grid. Any alpha channel is ignored.

        Returns:
            (H, W) int64 array of intensities in [0, 255].
        """
        rgb = pixels[:, :, :3].astype(np.int64)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]

        if self is ReductionPolicy.AVERAGE:
            return (r + g + b) // 3
        wr, wg, wb = _LUMA_WEIGHTS
        return (wr * r + wg * g + wb * b) // _LUMA_SCALE
