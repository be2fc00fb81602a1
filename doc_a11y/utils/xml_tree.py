"""
Namespace-agnostic XML trees for OOXML parts.

ElementTree elements are converted once into ``XmlNode`` objects whose tag
and attribute names are plain local names (``w:style`` -> ``style``,
``w:val`` -> ``val``) and whose children are always a list. Check logic only
ever sees ``XmlNode``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union


@dataclass
class XmlNode:
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["XmlNode"] = field(default_factory=list)
    text: str = ""

    def find(self, tag: str) -> Optional["XmlNode"]:
        """Return the first direct child with the given local name."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_all(self, tag: str) -> List["XmlNode"]:
        return [child for child in self.children if child.tag == tag]

    def iter(self, tag: Optional[str] = None) -> Iterator["XmlNode"]:
        """Depth-first, document-order iteration over this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            if tag is None or node.tag == tag:
                yield node
            stack.extend(reversed(node.children))

    def child_text(self, tag: str) -> str:
        child = self.find(tag)
        return child.text if child is not None else ""

    def child_attr(self, tag: str, attr: str = "val") -> Optional[str]:
        """Return ``attr`` of the first ``tag`` child, e.g. ``<w:name w:val="..."/>``."""
        child = self.find(tag)
        if child is None:
            return None
        return child.attributes.get(attr)


def _local_name(name: str) -> str:
    if name.startswith("{"):
        return name.split("}", 1)[1]
    if ":" in name:
        return name.split(":", 1)[1]
    return name


def _convert(element: ET.Element) -> XmlNode:
    return XmlNode(
        tag=_local_name(element.tag),
        attributes={_local_name(key): value for key, value in element.attrib.items()},
        children=[_convert(child) for child in element],
        text=(element.text or "").strip(),
    )


def parse_xml(data: Union[str, bytes]) -> XmlNode:
    """Parse an XML part into an XmlNode tree. Raises ``ET.ParseError`` on malformed input."""
    return _convert(ET.fromstring(data))


__all__ = ["XmlNode", "parse_xml"]
