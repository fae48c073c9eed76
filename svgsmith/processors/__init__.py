from .cleanup import composite_on_white, make_silhouette, square_silhouette, trim_transparent
from .colors import cluster_colors, extract_dominant_colors, sample_pixels
from .component import generate_react_component
from .exporter import optimize_svg, wrap_with_background
from .postprocess import (
    apply_palette,
    fit_view_box,
    normalize_attributes,
    remove_background_path,
    replace_colors,
    to_jsx_attributes,
)
from .vectorizer import PosterizeParams, TraceParams, Vectorizer

__all__ = [
    "apply_palette",
    "cluster_colors",
    "composite_on_white",
    "extract_dominant_colors",
    "fit_view_box",
    "generate_react_component",
    "make_silhouette",
    "normalize_attributes",
    "optimize_svg",
    "PosterizeParams",
    "remove_background_path",
    "replace_colors",
    "sample_pixels",
    "square_silhouette",
    "to_jsx_attributes",
    "TraceParams",
    "trim_transparent",
    "Vectorizer",
    "wrap_with_background",
]
