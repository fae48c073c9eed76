import logging

from PIL import Image

from ..config import REMOVE_BG_API_KEY
from .base import BackgroundRemover
from .color_threshold_model import ColorThresholdRemover

logger = logging.getLogger(__name__)


class FallbackRemover(BackgroundRemover):
    """
    Try a primary remover and fall back to a secondary one on any failure.

    The failure of the primary remover is logged, never raised.
    """

    def __init__(self, primary: BackgroundRemover, fallback: BackgroundRemover):
        self.primary = primary
        self.fallback = fallback

    def remove(self, image: Image.Image) -> Image.Image:
        try:
            return self.primary.remove(image)
        except Exception:
            logger.warning(
                "%s failed, falling back to %s",
                type(self.primary).__name__,
                type(self.fallback).__name__,
                exc_info=True,
            )
            return self.fallback.remove(image)


def build_remover(mode: str, api_key: str | None = REMOVE_BG_API_KEY) -> BackgroundRemover:
    """
    Pick the background remover for a mode.

    Logo mode delegates to remove.bg when an API key is configured, with
    the local threshold remover as fallback. Icon mode only needs a
    silhouette, so it always uses the local remover.
    """
    local = ColorThresholdRemover()
    if mode == "logo" and api_key:
        from .removebg_model import RemoveBgRemover

        return FallbackRemover(RemoveBgRemover(api_key=api_key), local)
    return local
