from __future__ import annotations
from enum import Enum, IntEnum
import re
import numpy as np

from models.errors import UnsupportedMode

_INT_STRING = re.compile(r"^\s*-?\d+\s*$")


class ExpansionMode(IntEnum):
    """
    How a stored sample becomes a gray level.

    NORMALIZE (0) multiplies the sample by 255: it expects samples already
    scaled to [0, 1]. Neither reduction policy produces such samples, so on
    their output this mode saturates (or wraps) almost every pixel.
    DIRECT (1) uses the sample unchanged.
    """
    NORMALIZE = 0
    DIRECT = 1

    @classmethod
    def parse(cls, value) -> ExpansionMode:
        """Accept an ExpansionMode, an integer or an integer string; nothing else."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and _INT_STRING.match(value):
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise UnsupportedMode(f"Unsupported expansion mode: {value!r} (expected 0 or 1)")
        try:
            return cls(int(value))
        except ValueError:
            raise UnsupportedMode(f"Unsupported expansion mode: {value!r} (expected 0 or 1)") from None


class PackPolicy(Enum):
    """
    What happens to gray levels above 255 when packed into an 8-bit channel.

    TRUNCATE keeps the low 8 bits, CLAMP saturates to [0, 255].
    """
    TRUNCATE = "truncate"
    CLAMP = "clamp"

    @classmethod
    def parse(cls, value) -> PackPolicy:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown pack policy {value!r} (choose from: {choices})") from None

    def pack(self, levels: np.ndarray) -> np.ndarray:
        levels = np.asarray(levels, dtype=np.int64)
        if self is PackPolicy.CLAMP:
            return np.clip(levels, 0, 255).astype(np.uint8)
        return (levels & 0xFF).astype(np.uint8)

    def pack_value(self, level: int) -> int:
        return int(self.pack(np.array([level]))[0])
