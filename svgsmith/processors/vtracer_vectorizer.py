"""
VTracer-based tracing backend.

VTracer is an O(n) tracer that runs in-process, which makes it the default
backend: no external binaries and no temporary files. Masks are traced in
binary mode, so the shared layering in Vectorizer decides every color.
"""

import io

import numpy as np
import vtracer
from PIL import Image

from .vectorizer import TracedPath, TraceParams, Vectorizer, extract_paths


class VtracerVectorizer(Vectorizer):
    """Vectorizer backed by the ``vtracer`` Python bindings."""

    name = "vtracer"

    def __init__(self, mode: str = "spline"):
        """
        Args:
            mode: "spline" for smooth curves, "polygon" for hard edges
        """
        self.mode = mode

    def trace_mask(self, mask: np.ndarray, params: TraceParams) -> list[TracedPath]:
        # Binary mode traces dark pixels: black shapes on white
        bw = np.where(mask, 0, 255).astype(np.uint8)
        buffer = io.BytesIO()
        Image.fromarray(bw).convert("RGB").save(buffer, "PNG")

        svg = vtracer.convert_raw_image_to_svg(
            buffer.getvalue(),
            img_format="png",
            colormode="binary",
            mode=self.mode,
            filter_speckle=params.turd_size,
            corner_threshold=params.corner_threshold,
            path_precision=params.path_precision,
        )
        return extract_paths(svg)
