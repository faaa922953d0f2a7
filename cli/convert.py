import os
import sys
import logging
from dotenv import load_dotenv

from models.errors import GrayscaleError
from pipeline.grayscale_converter import convert_to_grayscale, default_outputs

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def main() -> int:
    load_dotenv()
    _configure_logging()

    input_path = os.getenv("INPUT_IMAGE_PATH", "input.png")
    mode = os.getenv("EXPANSION_MODE", "1")

    print(f"\nConverting {input_path} to grayscale...")
    try:
        results = convert_to_grayscale(input_path, outputs=default_outputs(), mode=mode)
    except (OSError, GrayscaleError, ValueError) as err:
        logger.error(f"Error processing image: {err}")
        return 1

    for img in results:
        print(f"  wrote {img.path}")
    print("Grayscale images saved")
    return 0


if __name__ == "__main__":
    sys.exit(main())
