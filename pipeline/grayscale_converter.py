# pipeline/grayscale_converter.py
from pathlib import Path
import os
import logging
from typing import Dict, List, Union

from dotenv import load_dotenv

from models.image import Image
from models.expansion import ExpansionMode
from models.reduction_policy import ReductionPolicy
from services.grayscale_service import GrayscaleService
from services.image_service import ImageService

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
INPUT_PATH          = os.getenv("INPUT_IMAGE_PATH", "input.png")
EXPANSION_MODE      = os.getenv("EXPANSION_MODE", "1")

logger = logging.getLogger(__name__)


def default_outputs() -> Dict[ReductionPolicy, Union[str, Path]]:
    """Output path per policy, read from the environment at call time."""
    return {
        ReductionPolicy.AVERAGE: os.getenv("OUTPUT_AVERAGE_PATH", "grayscale_A.png"),
        ReductionPolicy.LUMINOSITY: os.getenv("OUTPUT_LUMINOSITY_PATH", "grayscale_B.png"),
    }


# ------------------------------------------------------------------
def convert_to_grayscale(
    input_path: Union[str, Path] = INPUT_PATH,
    *,
    outputs: Dict[ReductionPolicy, Union[str, Path]] = None,
    mode=EXPANSION_MODE,
    image_service: ImageService = None,
    grayscale_service: GrayscaleService = None,
) -> List[Image]:
    """
    Load *input_path* and write one grayscale file per reduction policy:
        • reduce RGB → GrayscaleImage (Method A / Method B)
        • expand back to an equal-channel RGB Image with *mode*
        • save, only once every output has been computed
    Returns the saved Image objects in *outputs* order.
    """
    image_service = image_service or ImageService()
    grayscale_service = grayscale_service or GrayscaleService()
    outputs = outputs or default_outputs()
    mode = ExpansionMode.parse(mode)
    for out_path in outputs.values():
        image_service.check_path(out_path)

    # 1. load (a failure here aborts before any computation)
    color_img = image_service.load(input_path)
    height, width = image_service.get_image_dimensions(color_img)
    logger.info(f"Loaded {input_path} ({width}x{height})")

    # 2. reduce + expand in memory
    results = []
    for policy, out_path in outputs.items():
        gray = grayscale_service.convert(color_img, policy)
        results.append(grayscale_service.expand_to_rgb(gray, mode, path=out_path))
        logger.info(f"Method {policy.label} ({policy.value}) done, mode {mode.value}")

    # 3. persist
    image_service.save_gallery(results)
    for img in results:
        logger.info(f"Saved {img.path}")
    return results
