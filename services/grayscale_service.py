from __future__ import annotations

from pathlib import Path
from typing import Union
import os
import logging

import numpy as np
from dotenv import load_dotenv

from models.image import Image
from models.grayscale_image import GrayscaleImage
from models.reduction_policy import ReductionPolicy
from models.expansion import ExpansionMode, PackPolicy
from services.image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

OPAQUE = 255


class GrayscaleService:
    """
    Color → grayscale reduction and grayscale → RGB expansion.
    *   No I/O here: works only with Image / GrayscaleImage objects.
    *   Pack policy and alpha output come from environment variables
        unless given explicitly.
    """

    def __init__(self, pack_policy: Union[PackPolicy, str] = None, with_alpha: bool = None):
        self.pack_policy = PackPolicy.parse(pack_policy or os.getenv("PACK_POLICY", "truncate"))
        if with_alpha is None:
            with_alpha = os.getenv("OUTPUT_ALPHA", "false").strip().lower() in ("1", "true", "yes")
        self.with_alpha = with_alpha
        self.image_service = ImageService()

    # ─── Reduction ────────────────────────────────────────────────
    def convert(self, img: Image, policy: ReductionPolicy) -> GrayscaleImage:
        """
        Reduce every pixel of *img* with *policy*. The input is not modified.

        Returns:
            GrayscaleImage with the same width and height as *img*.
        """
        self.image_service.validate_rgb(img)
        samples = policy.apply_array(img.pixels)
        gray = GrayscaleImage.from_array(samples)
        logger.debug(f"{policy.value} reduction: {gray.width}x{gray.height}")
        return gray

    def convert_method_a(self, img: Image) -> GrayscaleImage:
        """Simple average: (r + g + b) // 3."""
        return self.convert(img, ReductionPolicy.AVERAGE)

    def convert_method_b(self, img: Image) -> GrayscaleImage:
        """Weighted BT.709 luminosity: floor(0.2126*r + 0.7152*g + 0.0722*b)."""
        return self.convert(img, ReductionPolicy.LUMINOSITY)

    # ─── Expansion ────────────────────────────────────────────────
    def gray_levels(self, gray: GrayscaleImage, mode) -> np.ndarray:
        """
        Gray level per pixel before packing, as an (H, W) int64 array.
        Mode 0 multiplies by 255, mode 1 passes samples through.
        """
        mode = ExpansionMode.parse(mode)
        levels = gray.to_array().astype(np.int64)
        if mode is ExpansionMode.NORMALIZE:
            if levels.max() > 1:
                logger.warning(
                    f"Normalize mode expects samples in [0, 1], got max {levels.max()}; "
                    f"levels above 255 will not fit an 8-bit channel"
                )
            levels = levels * 255
        return levels

    def expand_to_rgb(
            self,
            gray: GrayscaleImage,
            mode=ExpansionMode.DIRECT,
            *,
            pack_policy: Union[PackPolicy, str] = None,
            with_alpha: bool = None,
            path: Union[str, Path] = None,
    ) -> Image:
        """
        Replicate each gray level into R, G and B and return a *new* Image.

        Args:
            gray: grayscale samples
            mode: 0 (normalize, ×255) or 1 (direct)
            pack_policy: overrides the service default for levels > 255
            with_alpha: add a fourth channel fixed to 255
            path: destination path stored on the returned Image

        Raises:
            UnsupportedMode: mode is not 0 or 1. No Image is produced.
        """
        levels = self.gray_levels(gray, mode)
        policy = PackPolicy.parse(pack_policy) if pack_policy is not None else self.pack_policy
        channel = policy.pack(levels)

        channels = [channel, channel, channel]
        if self.with_alpha if with_alpha is None else with_alpha:
            channels.append(np.full_like(channel, OPAQUE))
        pixels = np.stack(channels, axis=-1)

        return self.image_service.create_image(pixels, path)
