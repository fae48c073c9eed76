"""
Structural rewriting of traced SVG documents.

All operations work on a VectorDocument in place:

1. remove_background_path: drop a full-canvas shape the tracer picked up
   from the (removed) background
2. apply_palette: move traced fills onto the brand palette, keeping the
   light/dark order of the trace and leaving text-like fills alone
3. normalize_attributes / fit_view_box: strip pixel sizing, force
   ``currentColor`` for single-color output, settle the final viewBox
4. to_jsx_attributes: camelCase attribute names for React output
"""

import logging
import re

from ..config import (
    BACKGROUND_PATH_MAX_COMMANDS,
    ICON_VIEWBOX_SIZE,
    LOGO_VIEWBOX_MAX,
    TEXT_BRIGHTNESS_HIGH,
    TEXT_BRIGHTNESS_LOW,
)
from ..models.svg_document import (
    DRAWABLE_TAGS,
    NON_RENDERED_TAGS,
    XLINK_NS,
    VectorDocument,
    format_number,
    local_name,
)
from ..modes import FIXED_VIEWBOX, ModeConfig
from .colors import parse_color, perceived_brightness

logger = logging.getLogger(__name__)

_PATH_COMMAND = re.compile(r"[MLHVCSQTAZmlhvcsqtaz]")
_STARTS_AT_ORIGIN = re.compile(r"^\s*[Mm]\s*0(?:\.0*)?[\s,]+0(?:\.0*)?(?![\d.])")
_STYLE_FILL = re.compile(r"(?<![-\w])fill\s*:(?!\s*(?:none|transparent)\b)[^;]+", re.IGNORECASE)
_STYLE_STROKE = re.compile(r"(?<![-\w])stroke\s*:(?!\s*(?:none|transparent)\b)[^;]+", re.IGNORECASE)
_STYLE_FILL_OFF = re.compile(r"(?<![-\w])fill\s*:\s*(?:none|transparent)\b", re.IGNORECASE)
_TRANSLATE = re.compile(r"translate\(\s*([^\s,()]+)(?:[\s,]+([^\s,()]+))?\s*\)")

_PAINT_OFF = {"none", "transparent"}

JSX_ATTRIBUTES = {
    "fill-opacity": "fillOpacity",
    "fill-rule": "fillRule",
    "stroke-opacity": "strokeOpacity",
    "stroke-width": "strokeWidth",
    "stroke-linecap": "strokeLinecap",
    "stroke-linejoin": "strokeLinejoin",
    "stroke-dasharray": "strokeDasharray",
    "stroke-dashoffset": "strokeDashoffset",
    "stroke-miterlimit": "strokeMiterlimit",
    "clip-path": "clipPath",
    "clip-rule": "clipRule",
    "font-family": "fontFamily",
    "font-size": "fontSize",
    "font-style": "fontStyle",
    "font-weight": "fontWeight",
    "text-anchor": "textAnchor",
    "text-decoration": "textDecoration",
    "dominant-baseline": "dominantBaseline",
    "alignment-baseline": "alignmentBaseline",
    "baseline-shift": "baselineShift",
    "stop-color": "stopColor",
    "stop-opacity": "stopOpacity",
    "flood-color": "floodColor",
    "flood-opacity": "floodOpacity",
    "color-interpolation": "colorInterpolation",
    "color-interpolation-filters": "colorInterpolationFilters",
    "enable-background": "enableBackground",
    "marker-start": "markerStart",
    "marker-mid": "markerMid",
    "marker-end": "markerEnd",
    "paint-order": "paintOrder",
    "shape-rendering": "shapeRendering",
    "vector-effect": "vectorEffect",
    "pointer-events": "pointerEvents",
    f"{{{XLINK_NS}}}href": "xlinkHref",
}


def _parse_float(value: str) -> float | None:
    try:
        return float(value.strip().removesuffix("px"))
    except (AttributeError, ValueError):
        return None


def _number_variants(value: float) -> list[str]:
    return [format_number(value), format_number(value - 1)]


def _is_untranslated(transform: str | None) -> bool:
    if not transform or not transform.strip():
        return True
    match = _TRANSLATE.fullmatch(transform.strip())
    if match is None:
        return False
    return all(_parse_float(v) == 0 for v in match.groups("0"))


def is_background_path(
    d: str,
    width: float,
    height: float,
    max_commands: int = BACKGROUND_PATH_MAX_COMMANDS,
    transform: str | None = None,
) -> bool:
    """
    Heuristic for a traced full-canvas background.

    The path must start at the origin with no translate offset (vtracer
    emits ``m0 0`` paths placed by ``transform="translate(x,y)"``), mention
    the full width and height (off by one allowed) and be a simple outline;
    compound shapes with many commands are real artwork even when they span
    the canvas.
    """
    if not _STARTS_AT_ORIGIN.match(d) or not _is_untranslated(transform):
        return False
    if len(_PATH_COMMAND.findall(d)) > max_commands:
        return False
    has_width = any(v in d for v in _number_variants(width))
    has_height = any(v in d for v in _number_variants(height))
    return has_width and has_height


def _is_background_rect(element, width: float, height: float) -> bool:
    for axis in ("x", "y"):
        if _parse_float(element.get(axis, "0")) != 0:
            return False
    w, h = element.get("width", ""), element.get("height", "")
    full_w = w == "100%" or _parse_float(w) == width
    full_h = h == "100%" or _parse_float(h) == height
    return full_w and full_h


def remove_background_path(doc: VectorDocument, max_commands: int = BACKGROUND_PATH_MAX_COMMANDS) -> bool:
    """
    Remove the first full-canvas background shape, if any.

    Args:
        doc: Document to edit in place
        max_commands: Upper bound on commands for a background outline

    Returns:
        True if a shape was removed; False leaves the document untouched
    """
    size = doc.size
    if size is None:
        logger.info("No viewBox, skipping background path removal")
        return False
    width, height = size

    for element in doc.drawables():
        tag = local_name(element.tag)
        if tag == "path":
            matched = is_background_path(
                doc.path_data(element), width, height, max_commands, transform=element.get("transform")
            )
        elif tag == "rect":
            matched = _is_background_rect(element, width, height)
        else:
            matched = False

        if matched:
            doc.remove(element)
            logger.info("Removed background <%s> covering the %sx%s viewBox", tag, format_number(width), format_number(height))
            return True

    logger.info("No background path found, leaving SVG unchanged")
    return False


def is_text_like(brightness: float) -> bool:
    """Near-white or near-black fills are treated as text and never recolored."""
    return brightness > TEXT_BRIGHTNESS_HIGH or brightness < TEXT_BRIGHTNESS_LOW


def apply_palette(doc: VectorDocument, palette: list[str]) -> int:
    """
    Reassign traced fills to palette colors by brightness bucket.

    A fill of brightness ``b`` maps to ``palette[int(b / 255 * len(palette))]``
    (clamped), so the light/dark order of the trace survives on a
    darkest-first palette. Text-like fills are preserved.

    Args:
        doc: Document to edit in place
        palette: Hex colors sorted darkest first

    Returns:
        Number of recolored elements
    """
    if not palette:
        return 0

    recolored = 0
    for element in doc.drawables():
        rgb = parse_color(doc.get_fill(element))
        if rgb is None:
            continue

        brightness = perceived_brightness(rgb)
        if is_text_like(brightness):
            continue

        index = min(int(brightness / 255 * len(palette)), len(palette) - 1)
        doc.set_fill(element, palette[index])
        recolored += 1

    logger.info("Applied palette %s to %d elements", ", ".join(palette), recolored)
    return recolored


def replace_colors(doc: VectorDocument, mapping: dict[str, str]) -> int:
    """
    Swap specific colors for new ones (palette editing).

    Matching is by color value, so ``#abc``, ``#AABBCC`` and ``rgb(170,187,204)``
    are the same color.

    Returns:
        Number of attributes changed
    """
    targets = {}
    for old, new in mapping.items():
        rgb = parse_color(old)
        if rgb is not None:
            targets[rgb] = new

    changed = 0
    for element in [doc.root, *doc.iter_elements(rendered_only=False)]:
        for attr in ("fill", "stroke", "stop-color"):
            rgb = parse_color(element.get(attr))
            if rgb in targets:
                element.set(attr, targets[rgb])
                changed += 1
    return changed


def force_current_color(doc: VectorDocument) -> None:
    """Make every painted fill and stroke inherit the surrounding text color."""
    for element in doc.find_all("style"):
        doc.remove(element)

    doc.root.set("fill", "currentColor")

    def walk(node, inherited_fill):
        for child in node:
            if not isinstance(child.tag, str) or local_name(child.tag) in NON_RENDERED_TAGS:
                continue
            fill = child.get("fill")
            if fill is not None and fill.strip().lower() not in _PAINT_OFF:
                child.set("fill", "currentColor")
            stroke = child.get("stroke")
            if stroke is not None and stroke.strip().lower() not in _PAINT_OFF:
                child.set("stroke", "currentColor")
            style = child.get("style")
            if style:
                style = _STYLE_FILL.sub("fill:currentColor", style)
                child.set("style", _STYLE_STROKE.sub("stroke:currentColor", style))

            effective = child.get("fill", inherited_fill)
            if style and _STYLE_FILL_OFF.search(style):
                effective = "none"
            if local_name(child.tag) in DRAWABLE_TAGS:
                if effective.strip().lower() not in _PAINT_OFF:
                    child.set("fill", "currentColor")
            walk(child, effective)

    walk(doc.root, "currentColor")


def normalize_attributes(doc: VectorDocument, mode_config: ModeConfig) -> None:
    """
    Prepare a document for embedding.

    Pixel sizing is dropped in favour of the viewBox; single-color modes
    also get their paint forced to ``currentColor``.
    """
    if doc.root.get("viewBox") is None and doc.view_box is not None:
        doc.view_box = doc.view_box

    for attr in ("width", "height"):
        doc.root.attrib.pop(attr, None)

    if mode_config.use_current_color:
        force_current_color(doc)


def fit_view_box(doc: VectorDocument, policy: str) -> None:
    """
    Scale the content into the target viewBox.

    ``fixed-24x24`` centers the drawing in a 24x24 box; ``preserve-aspect``
    maps the longer side to 100 units and keeps the aspect ratio.
    """
    box = doc.view_box
    if box is None:
        logger.info("No viewBox found in SVG, skipping scale")
        return

    min_x, min_y, width, height = box
    if width <= 0 or height <= 0:
        return

    if policy == FIXED_VIEWBOX:
        target_w = target_h = ICON_VIEWBOX_SIZE
        scale = ICON_VIEWBOX_SIZE / max(width, height)
    else:
        scale = LOGO_VIEWBOX_MAX / max(width, height)
        target_w, target_h = round(width * scale), round(height * scale)

    offset_x = (target_w - width * scale) / 2 - min_x * scale
    offset_y = (target_h - height * scale) / 2 - min_y * scale

    transforms = []
    if abs(offset_x) > 1e-9 or abs(offset_y) > 1e-9:
        transforms.append(f"translate({format_number(offset_x)} {format_number(offset_y)})")
    if abs(scale - 1) > 1e-9:
        transforms.append(f"scale({format_number(scale)})")

    if transforms:
        doc.wrap_content({"transform": " ".join(transforms)})
    doc.view_box = (0, 0, target_w, target_h)
    logger.debug("Fitted %sx%s content into viewBox 0 0 %s %s", width, height, target_w, target_h)


def to_jsx_attributes(doc: VectorDocument) -> VectorDocument:
    """Rename hyphenated SVG attributes to their React (camelCase) names."""
    for element in [doc.root, *doc.iter_elements(rendered_only=False)]:
        for name in list(element.attrib):
            if name in JSX_ATTRIBUTES:
                element.set(JSX_ATTRIBUTES[name], element.attrib.pop(name))
    return doc
