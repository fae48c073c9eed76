import copy
import logging

from scour import scour

from ..config import WORKING_SIZE
from ..models.svg_document import VectorDocument, format_number

logger = logging.getLogger(__name__)

BACKGROUND_FILLS = {"black": "#000000", "white": "#ffffff"}

# Paint set on the root that wrapped content must keep
INHERITED_ROOT_ATTRIBUTES = ("fill", "stroke", "color", "fill-rule", "stroke-width")


def optimize_svg(svg: str, digits: int = 5) -> str:
    """
    Optimize SVG markup using scour.

    Args:
        svg: SVG markup
        digits: Significant digits kept in coordinates

    Returns:
        Optimized SVG markup
    """
    options = scour.sanitizeOptions()
    options.enable_viewboxing = True
    options.strip_ids = True
    options.shorten_ids = True
    options.strip_comments = True
    options.strip_xml_prolog = True
    options.remove_metadata = True
    options.simple_colors = False
    options.indent_type = "none"
    options.newlines = False
    options.digits = digits
    options.quiet = True

    optimized = scour.scourString(svg, options)
    logger.debug("Optimized SVG from %d to %d chars", len(svg), len(optimized))
    return optimized


def wrap_with_background(svg: str, background: str = "black", size: int = WORKING_SIZE) -> str:
    """
    Place an SVG on a solid square background for previews.

    The content is scaled to 70% of the canvas and centered.

    Args:
        svg: SVG markup
        background: "black", "white" or any CSS color
        size: Edge length of the output canvas

    Returns:
        SVG markup with a ``size`` x ``size`` viewBox
    """
    source = VectorDocument.from_string(svg)
    min_x, min_y, vb_width, vb_height = source.view_box or (0, 0, 24, 24)

    available = size * 0.7
    scale = min(available / vb_width, available / vb_height)
    offset_x = (size - vb_width * scale) / 2 - min_x * scale
    offset_y = (size - vb_height * scale) / 2 - min_y * scale

    fill = BACKGROUND_FILLS.get(background, background)
    wrapped = VectorDocument.from_string(f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {size} {size}"/>')
    wrapped.root.append(wrapped.make_element("rect", {"width": str(size), "height": str(size), "fill": fill}))

    group_attrib = {
        "transform": f"translate({format_number(offset_x)} {format_number(offset_y)}) scale({format_number(scale)})"
    }
    for attr in INHERITED_ROOT_ATTRIBUTES:
        if source.root.get(attr):
            group_attrib[attr] = source.root.get(attr)
    # currentColor content stays visible against the background
    if background in BACKGROUND_FILLS and "color" not in group_attrib:
        group_attrib["color"] = BACKGROUND_FILLS["white" if background == "black" else "black"]

    group = wrapped.make_element("g", group_attrib)
    for child in source.root:
        group.append(copy.deepcopy(child))
    wrapped.root.append(group)
    return wrapped.to_string()
