"""
Dominant color extraction.

Pixels are sampled from a downscaled copy of the image (transparent and
near-white pixels are ignored) and grouped with a small, deterministic
k-means: evenly spaced initial centroids and a fixed number of iterations,
so the same image always yields the same palette.
"""

import logging

import numpy as np
from PIL import Image, ImageColor, ImageOps

from ..config import (
    CENTER_MARGIN,
    FALLBACK_PALETTE,
    KMEANS_ITERATIONS,
    MIN_SAMPLE_ALPHA,
    NEAR_WHITE_CHANNEL,
    SAMPLE_SIZE,
)

logger = logging.getLogger(__name__)

Pixel = tuple[int, int, int]

# Fill values that do not name a concrete color
_NON_COLORS = {"none", "transparent", "currentcolor", "inherit"}


def perceived_brightness(color) -> float:
    """Luma-weighted brightness (0-255) of a hex string or an RGB tuple."""
    r, g, b = hex_to_rgb(color) if isinstance(color, str) else color[:3]
    return (r * 299 + g * 587 + b * 114) / 1000


def rgb_to_hex(rgb) -> str:
    """Convert an RGB triple to an uppercase ``#RRGGBB`` string."""
    r, g, b = (int(round(float(c))) for c in rgb[:3])
    return "#{:02X}{:02X}{:02X}".format(r, g, b)


def hex_to_rgb(hex_color: str) -> Pixel:
    """Convert ``#RGB`` or ``#RRGGBB`` to an RGB tuple."""
    value = hex_color.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Invalid HEX color format: {hex_color}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def parse_color(value: str | None) -> Pixel | None:
    """
    Parse any CSS color Pillow understands.

    Returns None for missing values, paint servers (``url(#...)``) and
    keywords that do not name a concrete color.
    """
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() in _NON_COLORS or value.startswith("url("):
        return None
    try:
        return ImageColor.getrgb(value)[:3]
    except ValueError:
        return None


def fallback_palette(k: int) -> list[str]:
    """The fixed accent palette fitted to ``k`` entries."""
    return [FALLBACK_PALETTE[i % len(FALLBACK_PALETTE)] for i in range(k)]


def sample_pixels(
    image: Image.Image,
    size: tuple[int, int] = SAMPLE_SIZE,
    center_only: bool = False,
) -> list[Pixel]:
    """
    Collect representative pixels from an image.

    Args:
        image: PIL Image (any mode)
        size: Box the image is resized into before sampling
        center_only: Only sample the central 60% of each axis

    Returns:
        Row-major list of (r, g, b) tuples, possibly empty
    """
    has_alpha = image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info
    im = image.convert("RGBA" if has_alpha else "RGB")
    im = ImageOps.contain(im, size, method=Image.Resampling.NEAREST)
    arr = np.asarray(im)
    h, w = arr.shape[:2]

    keep = np.ones((h, w), dtype=bool)

    if center_only:
        min_x, max_x = int(w * CENTER_MARGIN), int(w * (1 - CENTER_MARGIN))
        min_y, max_y = int(h * CENTER_MARGIN), int(h * (1 - CENTER_MARGIN))
        ys, xs = np.mgrid[0:h, 0:w]
        keep &= (xs >= min_x) & (xs <= max_x) & (ys >= min_y) & (ys <= max_y)

    if has_alpha:
        keep &= arr[:, :, 3] >= MIN_SAMPLE_ALPHA

    rgb = arr[:, :, :3]
    keep &= ~np.all(rgb > NEAR_WHITE_CHANNEL, axis=2)

    return [tuple(int(c) for c in px) for px in rgb[keep]]


def cluster_colors(pixels: list[Pixel], k: int) -> list[str]:
    """
    Cluster pixels into ``k`` colors with a fixed-iteration k-means.

    Args:
        pixels: Sequence of (r, g, b) tuples
        k: Number of clusters (>= 1)

    Returns:
        ``k`` uppercase hex colors sorted darkest first. An empty pixel
        sequence yields the fallback palette.
    """
    if k < 1:
        raise ValueError(f"Cluster count must be at least 1, got {k}")

    if len(pixels) == 0:
        logger.info("No usable pixels for color extraction, using fallback palette")
        return fallback_palette(k)

    data = np.asarray(pixels, dtype=np.float64).reshape(-1, 3)
    n = len(data)
    step = n // k
    centers = np.array([data[min(i * step, n - 1)] for i in range(k)])

    for _ in range(KMEANS_ITERATIONS):
        # (n, k) squared distances; argmin keeps the first centroid on ties
        distances = ((data[:, None, :] - centers[None, :, :]) ** 2).sum(axis=2)
        labels = distances.argmin(axis=1)

        for i in range(k):
            members = data[labels == i]
            if len(members):
                centers[i] = members.mean(axis=0)

    colors = [rgb_to_hex(c) for c in centers]
    colors.sort(key=perceived_brightness)
    return colors


def extract_dominant_colors(
    image: Image.Image,
    color_count: int,
    center_only: bool = False,
) -> list[str]:
    """Sample an image and cluster it into a darkest-first palette."""
    pixels = sample_pixels(image, center_only=center_only)
    colors = cluster_colors(pixels, color_count)
    logger.info("Detected colors: %s", ", ".join(colors))
    return colors
