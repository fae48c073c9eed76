import logging

import numpy as np
import pytest
from PIL import Image

from svgsmith import ProcessingResult, UnsupportedFormat, UnsupportedMode, VectorizationFailure, process_image
from svgsmith import pipeline
from svgsmith.models import ColorThresholdRemover, FallbackRemover
from svgsmith.models.base import BackgroundRemover
from svgsmith.models.svg_document import VectorDocument
from svgsmith.processors.colors import parse_color, perceived_brightness


class UnreachableRemover(BackgroundRemover):
    def remove(self, image):
        raise TimeoutError("remote service timed out")


def _all_fills(svg):
    doc = VectorDocument.from_string(svg)
    return [el.get("fill") for el in doc.root.iter() if el.get("fill")]


def test_icon_round_trip_uses_current_color(to_png, box_vectorizer):
    image = Image.new("RGB", (40, 30), (200, 30, 30))

    result = process_image(to_png(image), "solid.png", mode="icon", vectorizer=box_vectorizer)
    doc = VectorDocument.from_string(result.svg)

    assert isinstance(result, ProcessingResult)
    assert doc.root.get("viewBox") == "0 0 24 24"
    assert doc.root.get("width") is None
    paths = doc.paths()
    assert len(paths) == 1
    assert paths[0].get("fill") == "currentColor"
    assert all(fill == "currentColor" for fill in _all_fills(result.svg))
    assert result.detected_colors == []
    assert result.component_name == "Solid"
    assert result.mode == "icon"


def test_icon_background_removal(to_png, box_vectorizer, black_square_on_white):
    result = process_image(
        to_png(black_square_on_white), "square.png", mode="icon", remove_background=True, vectorizer=box_vectorizer
    )

    assert result.background_color == "#FFFFFF"
    assert len(VectorDocument.from_string(result.svg).paths()) == 1


def test_logo_end_to_end(to_png, box_vectorizer, bordered_red):
    result = process_image(
        to_png(bordered_red),
        "red-square.png",
        mode="logo",
        remove_background=True,
        remover=ColorThresholdRemover(),
        vectorizer=box_vectorizer,
    )

    assert result.background_color == "#FFFFFF"
    assert result.detected_colors
    for color in result.detected_colors:
        r, g, b = parse_color(color)
        assert r > 200 and g < 60 and b < 60

    fills = [parse_color(fill) for fill in _all_fills(result.svg)]
    assert (255, 0, 0) in fills
    for rgb in fills:
        assert 30 <= perceived_brightness(rgb) <= 200

    doc = VectorDocument.from_string(result.svg)
    assert doc.root.get("viewBox") == "0 0 100 100"
    assert result.metadata["strategy"] == "posterize"
    assert result.component_name == "RedSquare"


def test_logo_preserves_aspect_ratio(to_png, box_vectorizer):
    arr = np.full((50, 200, 3), 255, dtype=np.uint8)
    arr[5:45, 5:195] = (20, 120, 200)

    result = process_image(to_png(Image.fromarray(arr)), "wide.png", mode="logo", vectorizer=box_vectorizer)

    assert VectorDocument.from_string(result.svg).root.get("viewBox") == "0 0 100 25"


def test_logo_segmentation_for_large_uploads(monkeypatch, to_png, box_vectorizer, bordered_red):
    monkeypatch.setattr(pipeline, "SEGMENTATION_MIN_BYTES", 0)

    result = process_image(
        to_png(bordered_red), "red.png", mode="logo", remove_background=True,
        remover=ColorThresholdRemover(), vectorizer=box_vectorizer,
    )

    assert result.metadata["strategy"] == "segment"
    assert (255, 0, 0) in [parse_color(f) for f in _all_fills(result.svg)]


def test_segmented_logo_keeps_every_palette_color(monkeypatch, to_png, box_vectorizer):
    monkeypatch.setattr(pipeline, "SEGMENTATION_MIN_BYTES", 0)
    # Stripe rows line up with the evenly spaced k-means seeds
    stripes = [
        (0, 10, (60, 30, 30)),
        (10, 25, (30, 30, 200)),
        (25, 40, (30, 80, 30)),
        (40, 60, (120, 60, 20)),
        (60, 75, (150, 40, 150)),
        (75, 100, (20, 120, 120)),
    ]
    arr = np.zeros((100, 100, 3), dtype=np.uint8)
    for top, bottom, color in stripes:
        arr[top:bottom] = color

    result = process_image(to_png(Image.fromarray(arr)), "stripes.png", mode="logo", vectorizer=box_vectorizer)

    assert result.metadata["strategy"] == "segment"
    assert sorted(parse_color(c) for c in result.detected_colors) == sorted(color for _, _, color in stripes)
    fills = {parse_color(fill) for fill in _all_fills(result.svg)}
    assert fills == {color for _, _, color in stripes}


def test_remote_failure_does_not_fail_request(caplog, to_png, box_vectorizer, bordered_red):
    remover = FallbackRemover(UnreachableRemover(), ColorThresholdRemover())

    with caplog.at_level(logging.WARNING):
        result = process_image(
            to_png(bordered_red), "logo.png", mode="logo", remove_background=True,
            remover=remover, vectorizer=box_vectorizer,
        )

    assert result.svg
    assert "falling back" in caplog.text


def test_jpeg_input(to_png, box_vectorizer, black_square_on_white):
    result = process_image(to_png(black_square_on_white, "JPEG"), "photo.jpg", vectorizer=box_vectorizer)

    assert len(VectorDocument.from_string(result.svg).paths()) == 1


def test_svg_input_logo():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100">'
        '<path d="M10 10H20V20Z" fill="#FF0000"/>'
        '<path d="M30 30H40V40Z" fill="#000080"/>'
        '<path d="M50 50H60V60Z" fill="#f00"/>'
        "</svg>"
    ).encode()

    result = process_image(svg, "brand.svg", mode="logo")
    doc = VectorDocument.from_string(result.svg)

    assert result.detected_colors == ["#000080", "#FF0000"]
    assert doc.root.get("viewBox") == "0 0 100 50"
    assert len(doc.paths()) == 3


def test_svg_input_icon_is_recolored_to_current_color():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 48 48">'
        '<path d="M10 10H20V20Z" fill="#FF0000"/></svg>'
    ).encode()

    result = process_image(svg, "upload", mode="icon", content_type="image/svg+xml")

    assert all(fill == "currentColor" for fill in _all_fills(result.svg))
    assert 'fill="currentColor"' in result.component
    assert result.component_name == "Upload"


def test_svg_input_without_optimization():
    svg = b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path id="keep" d="M1 1H2Z"/></svg>'

    result = process_image(svg, "plain.svg", mode="icon", optimize=False)

    assert 'id="keep"' in result.svg


def test_invalid_svg_is_unsupported():
    with pytest.raises(UnsupportedFormat) as excinfo:
        process_image(b"<svg><path></svg>", "broken.svg")

    assert excinfo.value.elapsed_ms is not None


@pytest.mark.parametrize("payload", [b"", b"plain text, not an image"])
def test_garbage_is_unsupported(payload):
    with pytest.raises(UnsupportedFormat):
        process_image(payload, "notes.png")


def test_other_image_formats_are_unsupported(to_png, box_vectorizer):
    gif = to_png(Image.new("RGB", (8, 8), "red"), "GIF")

    with pytest.raises(UnsupportedFormat):
        process_image(gif, "anim.gif", vectorizer=box_vectorizer)
    assert box_vectorizer.calls == 0


def test_unsupported_content_type(to_png, black_square_on_white):
    with pytest.raises(UnsupportedFormat):
        process_image(to_png(black_square_on_white), "doc.png", content_type="application/pdf")


def test_unknown_mode(to_png, black_square_on_white):
    with pytest.raises(UnsupportedMode):
        process_image(to_png(black_square_on_white), "x.png", mode="banner")


def test_tracer_failure(to_png, failing_vectorizer, black_square_on_white):
    with pytest.raises(VectorizationFailure) as excinfo:
        process_image(to_png(black_square_on_white), "x.png", vectorizer=failing_vectorizer)

    assert "malformed" in excinfo.value.reason
    assert excinfo.value.elapsed_ms is not None


def test_tracer_timeout(monkeypatch, to_png, slow_vectorizer, black_square_on_white):
    monkeypatch.setattr(pipeline, "VECTORIZE_TIMEOUT", 0.05)

    with pytest.raises(VectorizationFailure) as excinfo:
        process_image(to_png(black_square_on_white), "x.png", vectorizer=slow_vectorizer)

    assert "timed out" in excinfo.value.reason


def test_latency_warning(monkeypatch, caplog, to_png, box_vectorizer, black_square_on_white):
    monkeypatch.setattr(pipeline, "LATENCY_WARNING_MS", -1)

    with caplog.at_level(logging.WARNING, logger="svgsmith.pipeline"):
        process_image(to_png(black_square_on_white), "x.png", vectorizer=box_vectorizer)

    assert "budget" in caplog.text


def test_result_to_dict(to_png, box_vectorizer, black_square_on_white):
    result = process_image(
        to_png(black_square_on_white), "x.png", component_name="checkbox", vectorizer=box_vectorizer
    )
    data = result.to_dict()

    assert data["componentName"] == "Checkbox"
    assert data["detectedColors"] == []
    assert data["mode"] == "icon"
    assert data["processingTimeMs"] >= 0
    assert data["svg"] == result.svg
    assert "export default function Checkbox" in data["component"]
