"""
End-to-end image to SVG pipeline.

Raster flow (PNG/JPEG):
1. Flatten (icon) / keep alpha (logo)
2. Optional background removal, re-centered and trimmed
3. Dominant palette (logo)
4. Silhouette on a square canvas (icon) / fit inside the canvas (logo)
5. Trace (icon), palette segmentation or posterize (logo)
6. Background path removal, palette remap, optimization, attribute
   normalization and viewBox fitting

SVG uploads skip straight to step 6 with the palette read from their fills.
"""

import io
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field

from PIL import Image, UnidentifiedImageError

from .config import LATENCY_WARNING_MS, MAX_POSTERIZE_STEPS, SEGMENTATION_MIN_BYTES, VECTORIZE_TIMEOUT
from .errors import SvgsmithError, UnsupportedFormat, VectorizationFailure
from .models import BackgroundRemover, VectorDocument, build_remover, detect_background_color
from .modes import ModeConfig, get_mode_config
from .naming import generate_component_name
from .processors.cleanup import (
    composite_on_white,
    fit_inside,
    make_silhouette,
    restore_canvas,
    square_silhouette,
    trim_transparent,
)
from .processors.colors import extract_dominant_colors, parse_color, perceived_brightness, rgb_to_hex
from .processors.component import generate_react_component
from .processors.exporter import optimize_svg
from .processors.postprocess import apply_palette, fit_view_box, normalize_attributes, remove_background_path
from .processors.vectorizer import TraceParams, Vectorizer

logger = logging.getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"
SUPPORTED_CONTENT_TYPES = {"image/png", "image/jpeg", "image/jpg", SVG_CONTENT_TYPE}
RASTER_FORMATS = {"PNG": "png", "JPEG": "jpeg"}


@dataclass
class ProcessingResult:
    svg: str
    detected_colors: list[str]
    component_name: str
    component: str
    mode: str
    processing_time_ms: int
    background_color: str | None = None
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "svg": self.svg,
            "detectedColors": self.detected_colors,
            "componentName": self.component_name,
            "component": self.component,
            "mode": self.mode,
            "backgroundColor": self.background_color,
            "processingTimeMs": self.processing_time_ms,
            "metadata": self.metadata,
        }


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _looks_like_svg(data: bytes) -> bool:
    head = data[:4096].lstrip().lower()
    return (head.startswith(b"<?xml") or head.startswith(b"<svg") or head.startswith(b"<!doctype svg")) and b"<svg" in head


def detect_format(image_data: bytes, filename: str = "", content_type: str | None = None) -> str:
    """
    Identify the upload as "svg", "png" or "jpeg".

    Raises:
        UnsupportedFormat: For empty data, other image types or unreadable bytes
    """
    if not image_data:
        raise UnsupportedFormat("Empty upload")

    if content_type and content_type.lower() not in SUPPORTED_CONTENT_TYPES:
        raise UnsupportedFormat(f"Unsupported content type: {content_type}")

    if (content_type or "").lower() == SVG_CONTENT_TYPE or (filename or "").lower().endswith(".svg"):
        return "svg"
    if _looks_like_svg(image_data):
        return "svg"

    try:
        with Image.open(io.BytesIO(image_data)) as im:
            fmt = im.format
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedFormat(f"Unreadable image: {filename or 'upload'}") from e

    if fmt not in RASTER_FORMATS:
        raise UnsupportedFormat(f"Unsupported image format: {fmt}")
    return RASTER_FORMATS[fmt]


def _svg_palette(doc: VectorDocument, color_count: int) -> list[str]:
    colors = []
    for fill in doc.colors():
        rgb = parse_color(fill)
        if rgb is not None and rgb_to_hex(rgb) not in colors:
            colors.append(rgb_to_hex(rgb))
    return sorted(colors, key=perceived_brightness)[:color_count]


def _run_with_timeout(func, *args, timeout: float | None = None):
    # The native tracer cannot be interrupted: on timeout we stop waiting
    # and let the worker thread finish in the background.
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(func, *args)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout as e:
        raise VectorizationFailure(f"Vectorization timed out after {timeout}s") from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _vectorize(
    vectorizer: Vectorizer,
    work: Image.Image,
    config: ModeConfig,
    palette: list[str],
    upload_size: int,
) -> tuple[str, str]:
    if config.use_current_color:
        return "trace", vectorizer.trace(work, TraceParams(color="currentColor"))
    if palette and upload_size > SEGMENTATION_MIN_BYTES:
        return "segment", vectorizer.segment(work, palette)
    steps = min(config.color_count, MAX_POSTERIZE_STEPS)
    return "posterize", vectorizer.posterize(work, steps)


def _load_raster(image_data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(image_data))
        image.load()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        raise UnsupportedFormat(f"Could not decode image: {e}") from e
    return image


def _trace_raster(
    image_data: bytes,
    mode: str,
    config: ModeConfig,
    remove_background: bool,
    vectorizer: Vectorizer,
    remover: BackgroundRemover | None,
    metadata: dict,
) -> tuple[str, str, list[str], str | None]:
    image = _load_raster(image_data)
    logger.info("Raster input %sx%s (%s)", image.width, image.height, image.mode)

    # Step 1: Icons are judged on white, logos keep their transparency
    image = composite_on_white(image) if config.use_current_color else image.convert("RGBA")

    # Step 2: Background removal
    background_color = None
    if remove_background:
        background_color = rgb_to_hex(detect_background_color(image))
        remover = remover or build_remover(mode)
        original_size = image.size
        image = remover.remove(image)
        if image.size != original_size:
            image = restore_canvas(image, original_size)
        if not config.use_current_color:
            image = trim_transparent(image)
        logger.info("Background %s removed with %s", background_color, type(remover).__name__)

    # Step 3: Palette
    palette = []
    if not config.use_current_color:
        palette = extract_dominant_colors(image, config.color_count)

    # Step 4: Working canvas
    if config.use_current_color:
        work = square_silhouette(make_silhouette(image))
    else:
        work = fit_inside(image)

    # Step 5: Trace
    try:
        strategy, svg = _run_with_timeout(
            _vectorize, vectorizer, work, config, palette, len(image_data), timeout=VECTORIZE_TIMEOUT
        )
    except VectorizationFailure:
        raise
    except Exception as e:
        raise VectorizationFailure(f"{vectorizer.name} failed: {e}") from e

    metadata.update({"strategy": strategy, "vectorizer": vectorizer.name, "canvas": list(work.size)})
    logger.info("Vectorized with %s (%s) on a %sx%s canvas", vectorizer.name, strategy, *work.size)
    return strategy, svg, palette, background_color


def _finish_svg(
    doc: VectorDocument,
    config: ModeConfig,
    palette: list[str],
    remove_background: bool,
    recolor: bool,
    optimize: bool,
) -> str:
    if remove_background:
        remove_background_path(doc)

    if recolor and palette:
        apply_palette(doc, palette)

    if optimize:
        doc = VectorDocument.from_string(optimize_svg(doc.to_string()))

    normalize_attributes(doc, config)
    fit_view_box(doc, config.view_box_policy)
    return doc.to_string()


def process_image(
    image_data: bytes,
    filename: str,
    mode: str = "icon",
    remove_background: bool = False,
    component_name: str | None = None,
    content_type: str | None = None,
    *,
    vectorizer: Vectorizer | None = None,
    remover: BackgroundRemover | None = None,
    optimize: bool = True,
) -> ProcessingResult:
    """
    Turn an uploaded image into a clean SVG and a React component.

    Args:
        image_data: Raw upload bytes (PNG, JPEG or SVG)
        filename: Original filename, used for format hints and naming
        mode: "icon" (single color, themeable) or "logo" (multi-color)
        remove_background: Remove the detected background before tracing
        component_name: Optional user supplied component name
        content_type: Optional MIME type of the upload
        vectorizer: Tracing backend (default: VtracerVectorizer)
        remover: Background remover (default: build_remover(mode))
        optimize: Run the SVG through scour

    Returns:
        ProcessingResult

    Raises:
        UnsupportedMode: Unknown mode
        UnsupportedFormat: Not a PNG, JPEG or SVG upload
        VectorizationFailure: The tracer failed or timed out
    """
    start = time.perf_counter()

    try:
        config = get_mode_config(mode)
        name = generate_component_name(filename, component_name, mode)
        fmt = detect_format(image_data, filename, content_type)
        logger.info("Processing %s as %s (%s, %d bytes)", filename, mode, fmt, len(image_data))

        metadata = {"format": fmt}
        if fmt == "svg":
            try:
                doc = VectorDocument.from_string(image_data)
            except ValueError as e:
                raise UnsupportedFormat(f"Invalid SVG: {e}") from e
            palette = _svg_palette(doc, config.color_count)
            background_color = None
            recolor = False
        else:
            if vectorizer is None:
                from .processors.vtracer_vectorizer import VtracerVectorizer

                vectorizer = VtracerVectorizer()
            strategy, svg, palette, background_color = _trace_raster(
                image_data, mode, config, remove_background, vectorizer, remover, metadata
            )
            doc = VectorDocument.from_string(svg)
            logger.info("Traced %d paths", len(doc.paths()))
            # Segmented layers already carry palette colors
            recolor = strategy == "posterize"

        final_svg = _finish_svg(doc, config, palette, remove_background, recolor, optimize)
        component = generate_react_component(final_svg, name, mode)
    except SvgsmithError as e:
        e.elapsed_ms = _elapsed_ms(start)
        logger.warning("Processing %s failed: %s", filename, e)
        raise

    elapsed = _elapsed_ms(start)
    if elapsed > LATENCY_WARNING_MS:
        logger.warning("Processing %s took %dms (budget %dms)", filename, elapsed, LATENCY_WARNING_MS)
    else:
        logger.info("Processing complete in %dms, SVG is %d chars", elapsed, len(final_svg))

    return ProcessingResult(
        svg=final_svg,
        detected_colors=palette,
        component_name=name,
        component=component,
        mode=mode,
        processing_time_ms=elapsed,
        background_color=background_color,
        metadata=metadata,
    )
