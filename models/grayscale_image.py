from __future__ import annotations
import operator
import numpy as np

from models.errors import InvalidDimension, IndexOutOfBounds, IntensityOutOfRange


class GrayscaleImage:
    """
    Dense width x height grid of intensity samples, addressed by (x, y).

    Samples live in a 16-bit unsigned cell and are stored as-is: nothing is
    clamped to 0-255 here. Packing into 8-bit channels is the job of the
    expansion step (see PackPolicy).
    """
    SAMPLE_DTYPE = np.uint16
    SAMPLE_MAX = int(np.iinfo(np.uint16).max)

    def __init__(self, width: int, height: int):
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidDimension(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidDimension(f"{name} must be positive, got {value}")

        self._width = int(width)
        self._height = int(height)
        # Row-major (H, W) like every other pixel array in the project.
        self._samples = np.zeros((self._height, self._width), dtype=self.SAMPLE_DTYPE)

    @classmethod
    def from_array(cls, samples: np.ndarray) -> GrayscaleImage:
        """
        Build an image from a 2D (H, W) array of integer samples.

        Raises:
            InvalidDimension: array is not 2D or has an empty axis.
            IntensityOutOfRange: a sample does not fit the 16-bit cell.
        """
        samples = np.asarray(samples)
        if samples.ndim != 2:
            raise InvalidDimension(f"Expected a 2D sample grid, got shape {samples.shape}")

        height, width = samples.shape
        image = cls(width, height)
        if samples.size and (samples.min() < 0 or samples.max() > cls.SAMPLE_MAX):
            raise IntensityOutOfRange(
                f"Samples must lie in [0, {cls.SAMPLE_MAX}], "
                f"got [{samples.min()}, {samples.max()}]"
            )
        image._samples[:, :] = samples
        return image

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> tuple[int, int]:
        return self._height, self._width

    def _check_bounds(self, x, y) -> tuple[int, int]:
        try:
            if isinstance(x, bool) or isinstance(y, bool):
                raise TypeError
            x, y = operator.index(x), operator.index(y)
        except TypeError:
            raise IndexOutOfBounds(f"Coordinates must be integers, got ({x!r}, {y!r})") from None
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexOutOfBounds(
                f"({x}, {y}) outside {self._width}x{self._height} grid"
            )
        return x, y

    def set_pixel(self, x: int, y: int, value: int) -> None:
        x, y = self._check_bounds(x, y)
        value = int(value)
        if not 0 <= value <= self.SAMPLE_MAX:
            raise IntensityOutOfRange(f"Sample {value} at ({x}, {y}) outside [0, {self.SAMPLE_MAX}]")
        self._samples[y, x] = value

    def get_pixel(self, x: int, y: int) -> int:
        x, y = self._check_bounds(x, y)
        return int(self._samples[y, x])

    def to_array(self) -> np.ndarray:
        """Copy of the samples as an (H, W) uint16 array."""
        return self._samples.copy()

    def __repr__(self) -> str:
        return f"GrayscaleImage(width={self._width}, height={self._height})"
