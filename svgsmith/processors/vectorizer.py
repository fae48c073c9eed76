"""
Bitmap to SVG vectorization.

The tracing engine is a pluggable backend: a subclass of Vectorizer only has
to turn a boolean mask into path data (``trace_mask``). Everything around
it is shared, so every backend is fed the same thresholds, layers and
colors:

- trace: monochrome threshold trace, one fill (icons)
- posterize: stacked luminance layers, each filled with its dominant color
- segment: one layer per palette color (logos with a known palette)
"""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import cv2
import numpy as np
from PIL import Image

from ..config import (
    SEGMENTATION_TOLERANCE,
    TRACE_ALPHA_MAX,
    TRACE_OPT_TOLERANCE,
    TRACE_THRESHOLD,
    TRACE_TURD_SIZE,
)
from ..errors import VectorizationFailure
from ..models.svg_document import SVG_NS, VectorDocument, local_name
from .cleanup import composite_on_white
from .colors import hex_to_rgb, rgb_to_hex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceParams:
    """
    Tracer settings shared by every backend.

    Args:
        threshold: Gray level below which a pixel is traced (mono trace only)
        turd_size: Minimum feature size in pixels; smaller specks are dropped
        opt_tolerance: Curve-fit tolerance (potrace -O)
        alpha_max: Corner smoothness, 0 = sharp polygons (potrace -a)
        color: Fill written on traced paths
        corner_threshold: Minimum corner angle in degrees (vtracer)
        path_precision: Decimal places in path data (vtracer)
    """

    threshold: int = TRACE_THRESHOLD
    turd_size: int = TRACE_TURD_SIZE
    opt_tolerance: float = TRACE_OPT_TOLERANCE
    alpha_max: float = TRACE_ALPHA_MAX
    color: str = "currentColor"
    corner_threshold: int = 60
    path_precision: int = 3


@dataclass(frozen=True)
class PosterizeParams:
    """
    Settings for multi-layer tracing.

    Args:
        trace: Settings used for each layer
        fill_strategy: "dominant" (most frequent color of the band) or "mean"
        range_distribution: "auto" spreads thresholds over the image's own
            luminance range, "equal" over 0-255
        tolerance: Per-channel tolerance when masking palette colors (segment)
    """

    trace: TraceParams = field(default_factory=TraceParams)
    fill_strategy: str = "dominant"
    range_distribution: str = "auto"
    tolerance: int = SEGMENTATION_TOLERANCE


@dataclass(frozen=True)
class TracedPath:
    d: str
    transform: str | None = None


def extract_paths(svg_markup: str) -> list[TracedPath]:
    """
    Pull path data out of a tracer's SVG output.

    Transforms of enclosing groups are folded into each path, so the paths
    can be re-parented at the top level of a new document.
    """
    doc = VectorDocument.from_string(svg_markup)
    paths = []

    def walk(node, transforms):
        for child in node:
            if not isinstance(child.tag, str):
                continue
            chain = transforms + ([child.get("transform")] if child.get("transform") else [])
            if local_name(child.tag) == "path" and child.get("d"):
                paths.append(TracedPath(d=child.get("d"), transform=" ".join(chain) or None))
            else:
                walk(child, chain)

    walk(doc.root, [])
    return paths


def build_svg(width: int, height: int, layers: list[tuple[str, list[TracedPath]]]) -> str:
    """Assemble traced layers into one SVG, bottom layer first."""
    root = ET.Element(
        f"{{{SVG_NS}}}svg",
        {"viewBox": f"0 0 {width} {height}", "width": str(width), "height": str(height)},
    )
    for fill, paths in layers:
        for path in paths:
            attrib = {"d": path.d, "fill": fill}
            if path.transform:
                attrib["transform"] = path.transform
            ET.SubElement(root, f"{{{SVG_NS}}}path", attrib)
    return ET.tostring(root, encoding="unicode")


def _gray(rgb: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(np.ascontiguousarray(rgb, dtype=np.uint8), cv2.COLOR_RGB2GRAY)


def _band_color(pixels: np.ndarray, strategy: str) -> str:
    if strategy == "mean":
        return rgb_to_hex(pixels.mean(axis=0))
    colors, counts = np.unique(pixels.reshape(-1, 3), axis=0, return_counts=True)
    return rgb_to_hex(colors[counts.argmax()])


class Vectorizer(ABC):
    """Abstract base class for tracing backends."""

    name = "vectorizer"

    @abstractmethod
    def trace_mask(self, mask: np.ndarray, params: TraceParams) -> list[TracedPath]:
        """
        Trace a boolean mask.

        Args:
            mask: (H, W) bool array, True where the shape is
            params: Tracer settings

        Returns:
            Paths in pixel coordinates of the mask (y pointing down)
        """
        pass

    def _trace(self, mask: np.ndarray, params: TraceParams) -> list[TracedPath]:
        if not mask.any():
            return []
        try:
            return self.trace_mask(mask, params)
        except VectorizationFailure:
            raise
        except Exception as e:
            raise VectorizationFailure(f"{self.name} tracing failed: {e}") from e

    def trace(self, image: Image.Image, params: TraceParams | None = None) -> str:
        """
        Monochrome trace: every pixel darker than the threshold is one shape.

        Args:
            image: PIL Image (transparency is composited onto white)
            params: Tracer settings

        Returns:
            SVG markup with a single fill
        """
        params = params or TraceParams()
        gray = _gray(np.asarray(composite_on_white(image)))
        mask = gray < params.threshold

        paths = self._trace(mask, params)
        logger.info("%s trace: %d paths", self.name, len(paths))
        return build_svg(image.width, image.height, [(params.color, paths)])

    def posterize(self, image: Image.Image, steps: int, params: PosterizeParams | None = None) -> str:
        """
        Multi-level posterize over the opaque pixels of an image.

        Layer ``i`` covers every opaque pixel at or below the ``i``-th
        luminance threshold; layers are stacked lightest (largest) first so
        darker layers paint on top.

        Args:
            image: PIL Image, transparent pixels are never traced
            steps: Number of luminance levels
            params: Posterize settings

        Returns:
            SVG markup with one fill per layer
        """
        params = params or PosterizeParams()
        steps = max(1, steps)
        arr = np.asarray(image.convert("RGBA"))
        rgb = arr[:, :, :3]
        opaque = arr[:, :, 3] >= 128
        h, w = opaque.shape

        if not opaque.any():
            return build_svg(w, h, [])

        gray = _gray(rgb).astype(np.int16)
        levels = gray[opaque]

        if params.range_distribution == "equal":
            lo, hi = 0, 255
        else:
            lo, hi = int(levels.min()), int(levels.max())
        thresholds = np.unique(np.round(np.linspace(lo, hi, steps + 1)[1:]).astype(int))

        layers = []
        lower = -1
        for threshold in thresholds:
            band = opaque & (gray > lower) & (gray <= threshold)
            lower = threshold
            if not band.any():
                continue
            fill = _band_color(rgb[band], params.fill_strategy)
            layer_mask = opaque & (gray <= threshold)
            layers.append((fill, self._trace(layer_mask, params.trace)))

        layers.reverse()
        logger.info("%s posterize: %d layers (%s)", self.name, len(layers), ", ".join(f for f, _ in layers))
        return build_svg(w, h, layers)

    def segment(self, image: Image.Image, palette: list[str], params: PosterizeParams | None = None) -> str:
        """
        Trace one layer per palette color.

        Args:
            image: PIL Image
            palette: Hex colors, each becomes a layer filled with that color
            params: Posterize settings (``tolerance`` selects matching pixels)

        Returns:
            SVG markup with one fill per palette color
        """
        params = params or PosterizeParams()
        arr = np.asarray(image.convert("RGBA"))
        rgb = arr[:, :, :3].astype(np.int16)
        opaque = arr[:, :, 3] >= 128
        h, w = opaque.shape

        layers = []
        for color in dict.fromkeys(palette):
            target = np.array(hex_to_rgb(color), dtype=np.int16)
            mask = opaque & np.all(np.abs(rgb - target) <= params.tolerance, axis=2)
            logger.debug("Mask for %s: %d/%d pixels", color, int(mask.sum()), mask.size)
            paths = self._trace(mask, params.trace)
            if paths:
                layers.append((color, paths))

        logger.info("%s segmentation: %d color layers", self.name, len(layers))
        return build_svg(w, h, layers)
