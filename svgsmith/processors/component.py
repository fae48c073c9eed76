import copy
import xml.etree.ElementTree as ET

from ..models.svg_document import VectorDocument, local_name
from ..modes import ICON_VIEWBOX
from .postprocess import to_jsx_attributes

COMPONENT_TEMPLATE = """import React from "react"

export default function {name}({{ size = 24, className, ...props }}) {{
  return (
    <svg
      xmlns="http://www.w3.org/2000/svg"
      viewBox="{view_box}"
      width={{size}}
      height={{size}}{fill_prop}
      className={{className}}
      {{...props}}
    >
      {content}
    </svg>
  )
}}
"""


def _strip_namespaces(element: ET.Element) -> None:
    for node in element.iter():
        if isinstance(node.tag, str):
            node.tag = local_name(node.tag)
        for name in [n for n in node.attrib if n.startswith("{")]:
            node.set(local_name(name), node.attrib.pop(name))
        if "class" in node.attrib:
            node.set("className", node.attrib.pop("class"))


def generate_react_component(svg: str, component_name: str, mode: str) -> str:
    """
    Wrap an SVG in a React function component.

    The component takes ``size`` (default 24), ``className`` and any extra
    props; icon components paint with ``currentColor`` so they follow the
    surrounding text color.

    Args:
        svg: Final SVG markup
        component_name: Identifier from generate_component_name
        mode: "icon" or "logo"

    Returns:
        TSX source of the component
    """
    doc = to_jsx_attributes(VectorDocument.from_string(svg))
    view_box = doc.root.get("viewBox") or ICON_VIEWBOX

    children = []
    for child in doc.root:
        child = copy.deepcopy(child)
        _strip_namespaces(child)
        child.tail = None
        children.append(ET.tostring(child, encoding="unicode"))

    return COMPONENT_TEMPLATE.format(
        name=component_name,
        view_box=view_box,
        fill_prop='\n      fill="currentColor"' if mode == "icon" else "",
        content="\n      ".join(children),
    )
