"""SVG backend helpers built on :mod:`xml.etree.ElementTree`."""

from __future__ import annotations

import numbers
import re
import xml.etree.ElementTree as ET
from typing import Any, Mapping, Optional

SVG_NS = "http://www.w3.org/2000/svg"

ET.register_namespace("", SVG_NS)

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

# attribute names that keep their camelCase spelling in SVG
_CASE_SENSITIVE = {"viewBox", "preserveAspectRatio", "gradientUnits", "gradientTransform"}


def svg_tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


def local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def is_svg_root(element: object) -> bool:
    return isinstance(element, ET.Element) and local_name(element.tag).lower() == "svg"


def attribute_name(key: str) -> str:
    if key in _CASE_SENSITIVE:
        return key
    return _CAMEL_RE.sub(r"-\1", key).replace("_", "-").lower()


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Real):
        number = float(value)
        if number.is_integer():
            return str(int(number))
        return f"{number:.6f}".rstrip("0").rstrip(".")
    return str(value)


def apply_attributes(element: ET.Element, attributes: Mapping[str, Any]) -> ET.Element:
    """Set ``attributes`` on ``element``, skipping ``None`` values."""

    for key, value in attributes.items():
        if value is None:
            continue
        element.set(attribute_name(key), format_value(value))
    return element


def create_svg_element(
    tag: str, attributes: Optional[Mapping[str, Any]] = None, parent: Optional[ET.Element] = None
) -> ET.Element:
    name = svg_tag(tag)
    element = ET.SubElement(parent, name) if parent is not None else ET.Element(name)
    if attributes:
        apply_attributes(element, attributes)
    return element


def create_svg_root(width: Any = "100%", height: Any = "100%") -> ET.Element:
    return create_svg_element("svg", {"width": width, "height": height})


def ensure_svg(container: ET.Element) -> ET.Element:
    """Return the first ``<svg>`` child of ``container``, creating a full-size one if absent."""

    if is_svg_root(container):
        return container
    for child in container:
        if is_svg_root(child):
            return child
    svg = create_svg_root()
    container.append(svg)
    return svg


def to_svg_string(element: ET.Element) -> str:
    return ET.tostring(element, encoding="unicode")


__all__ = [
    "SVG_NS",
    "apply_attributes",
    "attribute_name",
    "create_svg_element",
    "create_svg_root",
    "ensure_svg",
    "format_value",
    "is_svg_root",
    "local_name",
    "svg_tag",
    "to_svg_string",
]
