from pathlib import Path
from typing import Iterable, List, Union
import logging
import os
import signal
import threading

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from models.image import Image

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_EXTS = ".png,.jpg,.jpeg,.bmp,.tif,.tiff"


class ImageRepository:
    """
    Handles file I/O for Image entities.
    Reading goes through OpenCV, writing through Pillow.
    """
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", DEFAULT_EXTS).split(",")
            if ext.strip()
        }
        self.load_timeout = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        """Return (height, width)."""
        return img.pixels.shape[:2]

    def check_extension(self, path: Path) -> None:
        if path.suffix.lower() not in self.VALID_EXTS:
            raise ValueError(
                f"Unsupported image extension '{path.suffix}' for {path} "
                f"(allowed: {', '.join(sorted(self.VALID_EXTS))})"
            )

    def load(self, path: Union[str, Path], rgb: bool = True) -> Image:
        path = Path(path)
        self.check_extension(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")

        # ─── timeout wrapper (SIGALRM: Unix, main thread only) ──────
        timeout = self.load_timeout
        use_alarm = (
            hasattr(signal, "SIGALRM")
            and timeout > 0
            and threading.current_thread() is threading.main_thread()
        )

        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        if use_alarm:
            previous = signal.signal(signal.SIGALRM, _handler)
            signal.alarm(timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        finally:
            if use_alarm:
                signal.alarm(0)  # always disarm
                signal.signal(signal.SIGALRM, previous)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise FileNotFoundError(f"Image unreadable: {path}")

        arr = arr_bgr[:, :, ::-1] if rgb else arr_bgr
        logger.debug(f"Loaded {path} ({arr.shape[1]}x{arr.shape[0]})")
        return Image(pixels=np.ascontiguousarray(arr), path=path)

    def _prepare(self, image: Image) -> Path:
        if image.path is None:
            raise ValueError("Image has no path to save to")
        path = Path(image.path)
        self.check_extension(path)
        return path

    @staticmethod
    def _write(pixels: np.ndarray, path: Path) -> None:
        if not pixels.flags['C_CONTIGUOUS']:
            pixels = np.ascontiguousarray(pixels)
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(pixels).save(path)

    def save(self, image: Image) -> None:
        path = self._prepare(image)
        self._write(image.pixels, path)
        logger.debug(f"Saved {path}")

    def save_all(self, images: Iterable[Image]) -> None:
        """
        Save every image or none of them.

        Each image is first written to a hidden sibling temp file (same
        suffix, so Pillow picks the same format); the temps are moved into
        place only after every write succeeded. Temps are removed on failure.
        """
        images = list(images)
        paths = [self._prepare(img) for img in images]
        staged: List[tuple] = []
        try:
            for img, path in zip(images, paths):
                tmp = path.with_name(f".{path.stem}.tmp{path.suffix}")
                staged.append((tmp, path))
                self._write(img.pixels, tmp)
            for tmp, path in staged:
                os.replace(tmp, path)
                logger.debug(f"Saved {path}")
        finally:
            for tmp, _ in staged:
                tmp.unlink(missing_ok=True)
