class GrayscaleError(Exception):
    """Base class for conversion failures."""


class InvalidDimension(GrayscaleError, ValueError):
    """Width or height is not a positive integer."""


class IndexOutOfBounds(GrayscaleError, IndexError):
    """Pixel coordinate outside the grid."""


class UnsupportedMode(GrayscaleError, ValueError):
    """Expansion mode other than 0 (normalize) or 1 (direct)."""


class IntensityOutOfRange(GrayscaleError, ValueError):
    """Sample does not fit in the 16-bit intensity cell."""
