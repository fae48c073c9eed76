import numpy as np
from PIL import Image, ImageOps

from ..config import SILHOUETTE_WHITE_LEVEL, TRIM_PADDING, WORKING_SIZE


def composite_on_white(im: Image.Image) -> Image.Image:
    """
    Composite an image onto a pure white background.

    Args:
        im: PIL Image (any mode)

    Returns:
        RGB PIL Image
    """
    rgba = im.convert("RGBA")
    background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
    return Image.alpha_composite(background, rgba).convert("RGB")


def trim_transparent(im: Image.Image, pad: int = TRIM_PADDING) -> Image.Image:
    """
    Crop transparent areas around the image content.

    The content is re-framed with a transparent margin of ``pad`` pixels,
    so it never touches the canvas edge.

    Args:
        im: PIL Image with transparency
        pad: Margin to keep around the content

    Returns:
        Cropped RGBA PIL Image
    """
    im = im.convert("RGBA")
    arr = np.array(im)
    alpha = arr[:, :, 3]
    ys, xs = np.where(alpha > 0)

    if len(xs) == 0:
        return im

    cropped = im.crop((xs.min(), ys.min(), xs.max() + 1, ys.max() + 1))
    return ImageOps.expand(cropped, border=pad, fill=(0, 0, 0, 0))


def make_silhouette(im: Image.Image, white_level: int = SILHOUETTE_WHITE_LEVEL) -> Image.Image:
    """
    Turn an image into a black shape on white.

    Any pixel that is not near-white (all channels above ``white_level``)
    after compositing on white becomes black.

    Args:
        im: PIL Image (any mode)
        white_level: Channel value above which a pixel counts as white

    Returns:
        Grayscale ("L") PIL Image containing only 0 and 255
    """
    rgb = np.asarray(composite_on_white(im))
    is_white = np.all(rgb > white_level, axis=2)
    return Image.fromarray(np.where(is_white, 255, 0).astype(np.uint8))


def square_silhouette(
    silhouette: Image.Image,
    size: int = WORKING_SIZE,
    pad: int = TRIM_PADDING,
) -> Image.Image:
    """
    Trim the white around a silhouette and center it on a white square.

    Args:
        silhouette: Black on white "L" image from make_silhouette
        size: Edge length of the output square
        pad: White margin kept around the shape before scaling

    Returns:
        ``size`` x ``size`` grayscale PIL Image
    """
    arr = np.asarray(silhouette)
    ys, xs = np.where(arr < 128)

    if len(xs) == 0:
        return Image.new("L", (size, size), 255)

    shape = silhouette.crop((xs.min(), ys.min(), xs.max() + 1, ys.max() + 1))
    shape = ImageOps.expand(shape, border=pad, fill=255)
    # Nearest keeps the silhouette strictly two-toned
    return ImageOps.pad(shape, (size, size), method=Image.Resampling.NEAREST, color=255)


def fit_inside(im: Image.Image, size: int = WORKING_SIZE) -> Image.Image:
    """Downscale an image to fit a ``size`` square, never enlarging it."""
    im = im.convert("RGBA")
    im.thumbnail((size, size), Image.Resampling.LANCZOS)
    return im


def restore_canvas(im: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Center an image on a transparent canvas of ``size`` (e.g. after a remote crop)."""
    im = im.convert("RGBA")
    if im.size == size:
        return im
    fitted = ImageOps.contain(im, size) if im.width > size[0] or im.height > size[1] else im
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    offset = ((size[0] - fitted.width) // 2, (size[1] - fitted.height) // 2)
    canvas.paste(fitted, offset, fitted)
    return canvas
