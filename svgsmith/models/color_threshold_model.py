import logging
from collections import Counter

import numpy as np
from PIL import Image

from ..config import BACKGROUND_QUANTUM, BACKGROUND_TOLERANCE
from .base import BackgroundRemover

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def _quantize(value: int, quantum: int = BACKGROUND_QUANTUM) -> int:
    # Round half up, so 5 -> 10 and 245 -> 250
    return int((value + quantum / 2) // quantum) * quantum


def detect_background_color(image: Image.Image) -> tuple:
    """
    Detect the background color from the image border.

    Samples the four corners plus the top-center and bottom-center pixels,
    buckets each sample to the nearest multiple of 10 per channel and
    returns the first original sample of the most frequent bucket.

    Args:
        image: PIL Image

    Returns:
        Tuple of (R, G, B) background color
    """
    rgb = np.asarray(image.convert("RGB"))
    h, w = rgb.shape[:2]

    if h == 0 or w == 0:
        return WHITE

    positions = [
        (0, 0),  # Top-left
        (w - 1, 0),  # Top-right
        (0, h - 1),  # Bottom-left
        (w - 1, h - 1),  # Bottom-right
        (w // 2, 0),  # Top-middle
        (w // 2, h - 1),  # Bottom-middle
    ]
    samples = [tuple(int(c) for c in rgb[y, x]) for x, y in positions]

    buckets = Counter()
    first_seen = {}
    for color in samples:
        key = tuple(_quantize(c) for c in color)
        buckets[key] += 1
        first_seen.setdefault(key, color)

    # Counter.most_common keeps insertion order among equal counts
    best, count = buckets.most_common(1)[0]
    bg_color = first_seen[best]
    logger.debug("Detected background color RGB%s (%d/%d samples)", bg_color, count, len(samples))
    return bg_color


class ColorThresholdRemover(BackgroundRemover):
    """
    Background remover using a per-channel color threshold.

    Best for: Logos and icons on solid backgrounds.
    Every pixel whose channels are all within ``tolerance`` of the background
    color becomes fully transparent; other pixels keep their alpha. This is a
    hard cut with no feathering, and it also clears matching pixels inside
    the artwork.
    """

    def __init__(self, tolerance: int = BACKGROUND_TOLERANCE, target_color: tuple | None = None):
        """
        Initialize the threshold remover.

        Args:
            tolerance: Maximum per-channel difference still treated as background
            target_color: RGB background color, detected from the border when None
        """
        self.tolerance = tolerance
        self.target_color = target_color

    def remove(self, image: Image.Image) -> Image.Image:
        """Remove background using the color threshold; never raises."""
        try:
            bg_color = self.target_color or detect_background_color(image)
            arr = np.array(image.convert("RGBA"))

            diff = np.abs(arr[:, :, :3].astype(np.int16) - np.array(bg_color[:3], dtype=np.int16))
            mask = np.all(diff <= self.tolerance, axis=2)
            arr[:, :, 3][mask] = 0

            logger.info(
                "Local background removal: RGB%s cleared %d/%d pixels",
                tuple(bg_color[:3]), int(mask.sum()), mask.size,
            )
            return Image.fromarray(arr)
        except Exception:
            logger.exception("Local background removal failed, keeping original image")
            return image
