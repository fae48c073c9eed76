import pytest

from svgsmith.models.svg_document import VectorDocument, format_number, local_name

SAMPLE = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 20">
  <title>sample</title>
  <defs><path id="hidden" d="M0 0H1" fill="#000"/></defs>
  <g fill="#00ff00">
    <rect width="1" height="1" fill="#FF0000"/>
    <circle r="1" fill="#00F"/>
  </g>
  <path d="M1 1H2" fill="#FF0000"/>
</svg>"""


def test_rejects_malformed_and_non_svg():
    with pytest.raises(ValueError):
        VectorDocument.from_string("<svg><path></svg>")
    with pytest.raises(ValueError):
        VectorDocument.from_string("<html/>")


def test_drawables_in_document_order_skip_defs():
    doc = VectorDocument.from_string(SAMPLE)

    assert [local_name(el.tag) for el in doc.drawables()] == ["rect", "circle", "path"]
    assert len(doc.find_all("path")) == 2


def test_view_box():
    doc = VectorDocument.from_string(SAMPLE)
    assert doc.view_box == (0, 0, 10, 20)
    assert doc.size == (10, 20)

    doc.view_box = (0, 0, 24, 24.5)
    assert doc.root.get("viewBox") == "0 0 24 24.5"


def test_view_box_falls_back_to_dimensions():
    sized = VectorDocument.from_string('<svg xmlns="http://www.w3.org/2000/svg" width="30px" height="40"/>')
    bare = VectorDocument.from_string('<svg xmlns="http://www.w3.org/2000/svg" width="100%"/>')

    assert sized.view_box == (0, 0, 30, 40)
    assert bare.view_box is None


def test_colors_are_distinct_drawable_fills():
    doc = VectorDocument.from_string(SAMPLE)

    assert doc.colors() == ["#FF0000", "#00F"]


def test_remove_and_serialize():
    doc = VectorDocument.from_string(SAMPLE)
    doc.remove(doc.drawables()[0])

    reparsed = VectorDocument.from_string(doc.to_string())
    assert [local_name(el.tag) for el in reparsed.drawables()] == ["circle", "path"]


def test_wrap_content_keeps_definitions_at_root():
    doc = VectorDocument.from_string(SAMPLE)
    group = doc.wrap_content({"transform": "scale(2)"})

    children = [local_name(el.tag) for el in doc.root]
    assert children == ["title", "defs", "g"]
    assert doc.root[-1] is group
    assert [local_name(el.tag) for el in group] == ["g", "path"]


@pytest.mark.parametrize("value, text", [(24.0, "24"), (0.5, "0.5"), (-0.0, "0"), (1 / 3, "0.333333")])
def test_format_number(value, text):
    assert format_number(value) == text
