from .base import BackgroundRemover
from .color_threshold_model import ColorThresholdRemover, detect_background_color
from .fallback_model import FallbackRemover, build_remover
from .svg_document import VectorDocument

# Lazy import keeps `requests` off the import path until remote removal is used
def __getattr__(name):
    if name == "RemoveBgRemover":
        from .removebg_model import RemoveBgRemover
        return RemoveBgRemover
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "BackgroundRemover",
    "ColorThresholdRemover",
    "FallbackRemover",
    "RemoveBgRemover",
    "VectorDocument",
    "build_remover",
    "detect_background_color",
]
