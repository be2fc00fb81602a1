"""
Normalized view of a tagged PDF's logical structure tree.

The raw tree is made of pikepdf dictionaries whose ``/K`` entry may be a
single element, an array, an MCID integer or a marked-content reference.
``build_struct_tree`` converts it once into ``StructNode`` objects with
RoleMap-resolved roles and an always-list ``children`` field, so the figure
checks can run on plain Python data.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import pikepdf

logger = logging.getLogger(__name__)

# Standard structure types (ISO 32000-1, 14.8.4). RoleMap resolution stops here.
STANDARD_STRUCTURE_TYPES = {
    'Document', 'Part', 'Art', 'Sect', 'Div', 'BlockQuote', 'Caption',
    'TOC', 'TOCI', 'Index', 'NonStruct', 'Private', 'P', 'H', 'H1', 'H2',
    'H3', 'H4', 'H5', 'H6', 'L', 'LI', 'Lbl', 'LBody', 'Table', 'TR',
    'TH', 'TD', 'THead', 'TBody', 'TFoot', 'Span', 'Quote', 'Note',
    'Reference', 'BibEntry', 'Code', 'Link', 'Annot', 'Ruby', 'RB', 'RT',
    'RP', 'Warichu', 'WT', 'WP', 'Figure', 'Formula', 'Form'
}

FIGURE_ROLE = "Figure"

# Entries that link an element into the tree rather than describe it.
_STRUCTURAL_KEYS = {"/K", "/P", "/Pg", "/S", "/Type", "/ID", "/C", "/R", "/A"}


@dataclass
class StructNode:
    role: str
    alt: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["StructNode"] = field(default_factory=list)


def _resolve_pdf_object(value: Any) -> Any:
    """Dereference indirect objects safely; return the original if not possible."""
    if value is None:
        return None

    try:
        get_obj = getattr(value, "get_object", None)
        if callable(get_obj):
            return get_obj()
    except Exception:
        return value

    return value


def _normalize_structure_type(struct_type: Any) -> str:
    """Normalize structure types by stripping leading slashes."""
    if struct_type is None:
        return ""
    return str(struct_type).lstrip('/')


def _object_key(obj: Any) -> Optional[Tuple[int, int]]:
    """Object number/generation for indirect objects; None for direct ones."""
    objgen = getattr(obj, "objgen", None)
    if objgen and tuple(objgen) != (0, 0):
        return int(objgen[0]), int(objgen[1])
    return None


def _scalar_text(value: Any) -> Optional[str]:
    """Return a text rendering for string/name/number PDF values, None otherwise."""
    if isinstance(value, pikepdf.String):
        return str(value)
    if isinstance(value, pikepdf.Name):
        return _normalize_structure_type(value)
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


def read_role_map(struct_tree_root: Any) -> Dict[str, str]:
    """Return the /RoleMap entries as ``{custom_type: mapped_type}`` without slashes."""
    role_map = _resolve_pdf_object(struct_tree_root.get("/RoleMap"))
    if not isinstance(role_map, pikepdf.Dictionary):
        return {}

    mapping: Dict[str, str] = {}
    for key, value in role_map.items():
        mapped = _normalize_structure_type(_resolve_pdf_object(value))
        if mapped:
            mapping[_normalize_structure_type(key)] = mapped
    return mapping


def resolve_role(struct_type: Any, role_map: Dict[str, str]) -> str:
    """Return the effective structure type after applying RoleMap mappings."""
    current = _normalize_structure_type(struct_type)
    visited: Set[str] = set()
    while current and current not in STANDARD_STRUCTURE_TYPES and current not in visited:
        visited.add(current)
        mapped = role_map.get(current)
        if not mapped:
            break
        current = mapped
    return current


def _iter_structure_children(entry: Any) -> List[Any]:
    """Return child structure elements contained within /K."""
    entry = _resolve_pdf_object(entry)
    if entry is None:
        return []

    if isinstance(entry, pikepdf.Array):
        return [_resolve_pdf_object(item) for item in entry]

    if isinstance(entry, pikepdf.Dictionary):
        return [entry]

    # Bare MCIDs reference page content, not structure elements.
    return []


def _is_structure_element(value: Any) -> bool:
    if not isinstance(value, pikepdf.Dictionary):
        return False
    # Marked-content and object references carry no /S.
    return "/S" in value


def _build_node(
    element: pikepdf.Dictionary,
    role_map: Dict[str, str],
    max_depth: int,
    depth: int,
    visited: Set[Tuple[int, int]],
) -> StructNode:
    attributes: Dict[str, str] = {}
    for key, value in element.items():
        if key in _STRUCTURAL_KEYS:
            continue
        text = _scalar_text(_resolve_pdf_object(value))
        if text is not None:
            attributes[key.lstrip("/")] = text

    alt_value = _resolve_pdf_object(element.get("/Alt"))
    node = StructNode(
        role=resolve_role(element.get("/S"), role_map),
        alt=str(alt_value) if isinstance(alt_value, pikepdf.String) else None,
        attributes=attributes,
    )

    if depth >= max_depth:
        logger.warning("[StructTree] Maximum depth %s reached; truncating traversal", max_depth)
        return node

    for child in _iter_structure_children(element.get("/K")):
        if not _is_structure_element(child):
            continue
        key = _object_key(child)
        if key is not None:
            if key in visited:
                logger.debug("[StructTree] Skipping already visited element %s", key)
                continue
            visited.add(key)
        node.children.append(_build_node(child, role_map, max_depth, depth + 1, visited))
    return node


def build_struct_tree(struct_tree_root: Any, max_depth: int = 50) -> StructNode:
    """Convert a /StructTreeRoot dictionary into a StructNode tree rooted at ``StructTreeRoot``."""
    struct_tree_root = _resolve_pdf_object(struct_tree_root)
    if not isinstance(struct_tree_root, pikepdf.Dictionary):
        raise TypeError("StructTreeRoot is not a dictionary")

    role_map = read_role_map(struct_tree_root)
    root = StructNode(role="StructTreeRoot")
    visited: Set[Tuple[int, int]] = set()
    root_key = _object_key(struct_tree_root)
    if root_key is not None:
        visited.add(root_key)

    for child in _iter_structure_children(struct_tree_root.get("/K")):
        if not _is_structure_element(child):
            continue
        key = _object_key(child)
        if key is not None:
            if key in visited:
                continue
            visited.add(key)
        root.children.append(_build_node(child, role_map, max_depth, 1, visited))
    return root


def iter_struct_nodes(node: StructNode) -> Iterator[StructNode]:
    """Depth-first, pre-order traversal."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def has_alt_text(node: StructNode) -> bool:
    """A node has alt text if ``alt`` or its ``Alt`` attribute is a non-empty string."""
    if isinstance(node.alt, str) and node.alt.strip():
        return True
    attribute_alt = node.attributes.get("Alt")
    return isinstance(attribute_alt, str) and bool(attribute_alt.strip())


def count_figures(root: StructNode) -> Tuple[int, int]:
    """Return ``(figures_found, figures_missing_alt)`` for the tree under ``root``."""
    figures = 0
    missing = 0
    for node in iter_struct_nodes(root):
        if node.role != FIGURE_ROLE:
            continue
        figures += 1
        if not has_alt_text(node):
            missing += 1
    return figures, missing


__all__ = [
    "FIGURE_ROLE",
    "StructNode",
    "build_struct_tree",
    "count_figures",
    "has_alt_text",
    "iter_struct_nodes",
    "resolve_role",
]
