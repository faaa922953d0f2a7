from pathlib import Path
from typing import Iterable, Union
import numpy as np
from models.image import Image
from repositories.image_repository import ImageRepository


class ImageService:
    """I/O helpers and RGB grid checks.  No grayscale logic."""
    def __init__(self):
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk into an Image object (RGB order)."""
        return self.image_repository.load(path)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path.
        """
        self.image_repository.save(image)

    def save_gallery(self, gallery: Iterable[Image]):
        """All-or-nothing save: no file is written unless every image can be."""
        self.image_repository.save_all(gallery)

    def check_path(self, path: Union[str, Path]) -> None:
        """Raise ValueError when *path* has an extension we cannot read or write."""
        self.image_repository.check_extension(Path(path))

    def get_image_dimensions(self, img: Image):
        return self.image_repository.retrieve_image_dimensions(img)

    @staticmethod
    def validate_rgb(img: Image) -> None:
        """
        Make sure *img* holds a dense (H, W, 3|4) uint8 grid.

        Raises:
            ValueError: wrong type, shape or dtype.
        """
        pixels = img.pixels
        if not isinstance(pixels, np.ndarray):
            raise ValueError(f"Expected numpy pixels, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError(f"Expected RGB image (H, W, 3), got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 dtype, got {pixels.dtype}")
