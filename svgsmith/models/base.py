from abc import ABC, abstractmethod
from PIL import Image


class BackgroundRemover(ABC):
    """Abstract base class for background removal strategies."""

    @abstractmethod
    def remove(self, image: Image.Image) -> Image.Image:
        """
        Remove the background from an image.

        Args:
            image: PIL Image to process (left untouched)

        Returns:
            New RGBA PIL Image with a transparent background
        """
        pass
