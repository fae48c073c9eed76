import io
import time

import numpy as np
import pytest
from PIL import Image

from svgsmith.processors.vectorizer import TracedPath, Vectorizer


class BoxVectorizer(Vectorizer):
    """Traces every mask as its bounding box."""

    name = "box"

    def __init__(self):
        self.calls = 0

    def trace_mask(self, mask, params):
        self.calls += 1
        ys, xs = np.where(mask)
        x0, y0, x1, y1 = xs.min(), ys.min(), xs.max() + 1, ys.max() + 1
        return [TracedPath(d=f"M{x0} {y0}H{x1}V{y1}H{x0}Z")]


class FailingVectorizer(Vectorizer):
    name = "failing"

    def trace_mask(self, mask, params):
        raise RuntimeError("bitmap is malformed")


class SlowVectorizer(BoxVectorizer):
    name = "slow"

    def trace_mask(self, mask, params):
        time.sleep(0.5)
        return super().trace_mask(mask, params)


@pytest.fixture
def box_vectorizer():
    return BoxVectorizer()


@pytest.fixture
def failing_vectorizer():
    return FailingVectorizer()


@pytest.fixture
def slow_vectorizer():
    return SlowVectorizer()


@pytest.fixture
def to_png():
    def encode(image: Image.Image, fmt: str = "PNG") -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, fmt)
        return buffer.getvalue()

    return encode


@pytest.fixture
def bordered_red():
    """100x100 red square with a 10px white border."""
    arr = np.full((100, 100, 3), 255, dtype=np.uint8)
    arr[10:90, 10:90] = (255, 0, 0)
    return Image.fromarray(arr)


@pytest.fixture
def black_square_on_white():
    arr = np.full((64, 64, 3), 255, dtype=np.uint8)
    arr[16:48, 16:48] = 0
    return Image.fromarray(arr)


@pytest.fixture
def transparent_image():
    return Image.new("RGBA", (32, 32), (0, 0, 0, 0))
