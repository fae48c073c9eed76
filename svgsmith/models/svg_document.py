"""Parsed SVG document model."""

import re
import xml.etree.ElementTree as ET

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

DRAWABLE_TAGS = {"path", "rect", "circle", "polygon", "ellipse"}

# Containers whose children are never rendered directly
NON_RENDERED_TAGS = {"defs", "clipPath", "mask", "symbol", "pattern", "marker"}

_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags and attributes."""
    return tag.rsplit("}", 1)[-1]


def _parse_length(value: str | None) -> float | None:
    if not value:
        return None
    match = _NUMBER.match(value.strip())
    if not match or value.strip().endswith("%"):
        return None
    return float(match.group(0))


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0``."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


class VectorDocument:
    """
    Structured view of an SVG document.

    Wraps an ElementTree root and offers the handful of operations the
    post-processor needs: drawable elements in document order, fill and
    ``d`` access, viewBox access, removal and re-serialization.
    """

    def __init__(self, root: ET.Element):
        if local_name(root.tag) != "svg":
            raise ValueError(f"Root element is <{local_name(root.tag)}>, expected <svg>")
        self.root = root
        self._ns = root.tag[1:].split("}", 1)[0] if root.tag.startswith("{") else ""

    @classmethod
    def from_string(cls, markup: str | bytes) -> "VectorDocument":
        """Parse SVG markup; raises ``ValueError`` for malformed or non-SVG input."""
        try:
            root = ET.fromstring(markup)
        except ET.ParseError as e:
            raise ValueError(f"Malformed SVG: {e}") from e
        return cls(root)

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def qualify(self, tag: str) -> str:
        """Tag name in this document's namespace."""
        return f"{{{self._ns}}}{tag}" if self._ns else tag

    def make_element(self, tag: str, attrib: dict[str, str] | None = None) -> ET.Element:
        return ET.Element(self.qualify(tag), attrib or {})

    # -- traversal -------------------------------------------------------

    def iter_elements(self, rendered_only: bool = True):
        """Yield every element below the root in document order."""

        def walk(node):
            for child in node:
                if not isinstance(child.tag, str):
                    continue
                if rendered_only and local_name(child.tag) in NON_RENDERED_TAGS:
                    continue
                yield child
                yield from walk(child)

        yield from walk(self.root)

    def drawables(self) -> list[ET.Element]:
        return [el for el in self.iter_elements() if local_name(el.tag) in DRAWABLE_TAGS]

    def paths(self) -> list[ET.Element]:
        return [el for el in self.iter_elements() if local_name(el.tag) == "path"]

    def find_all(self, tag: str) -> list[ET.Element]:
        return [el for el in self.iter_elements(rendered_only=False) if local_name(el.tag) == tag]

    def parent_of(self, element: ET.Element) -> ET.Element | None:
        for node in self.root.iter():
            for child in node:
                if child is element:
                    return node
        return None

    def remove(self, element: ET.Element) -> None:
        parent = self.parent_of(element)
        if parent is None:
            raise ValueError("Element is not part of this document")
        parent.remove(element)

    # -- attributes ------------------------------------------------------

    @staticmethod
    def get_fill(element: ET.Element) -> str | None:
        return element.get("fill")

    @staticmethod
    def set_fill(element: ET.Element, value: str) -> None:
        element.set("fill", value)

    @staticmethod
    def path_data(element: ET.Element) -> str:
        return element.get("d", "")

    @property
    def view_box(self) -> tuple[float, float, float, float] | None:
        """The viewBox as (min_x, min_y, width, height), from width/height if absent."""
        raw = self.root.get("viewBox")
        if raw:
            numbers = [float(n) for n in _NUMBER.findall(raw)]
            if len(numbers) == 4:
                return tuple(numbers)
        width = _parse_length(self.root.get("width"))
        height = _parse_length(self.root.get("height"))
        if width and height:
            return 0.0, 0.0, width, height
        return None

    @view_box.setter
    def view_box(self, value: tuple[float, float, float, float]) -> None:
        self.root.set("viewBox", " ".join(format_number(v) for v in value))

    @property
    def size(self) -> tuple[float, float] | None:
        box = self.view_box
        return (box[2], box[3]) if box else None

    def wrap_content(self, attrib: dict[str, str]) -> ET.Element:
        """Move every rendered child of the root into a new ``<g>``."""
        group = self.make_element("g", attrib)
        keep = []
        for child in list(self.root):
            if isinstance(child.tag, str) and local_name(child.tag) in NON_RENDERED_TAGS | {"title", "desc", "metadata", "style"}:
                keep.append(child)
            else:
                group.append(child)
            self.root.remove(child)
        for child in keep:
            self.root.append(child)
        self.root.append(group)
        return group

    def colors(self) -> list[str]:
        """Distinct ``fill`` values of drawable elements in document order."""
        seen = []
        for element in self.drawables():
            fill = element.get("fill")
            if fill and fill not in seen:
                seen.append(fill)
        return seen
