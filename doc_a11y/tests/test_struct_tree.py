import pytest

pikepdf = pytest.importorskip("pikepdf")

from doc_a11y.utils.struct_tree import (
    StructNode,
    build_struct_tree,
    count_figures,
    has_alt_text,
    iter_struct_nodes,
    resolve_role,
)


def _element(pdf, role, kids=None, **entries):
    element = pikepdf.Dictionary({"/Type": pikepdf.Name("/StructElem"), "/S": pikepdf.Name(role)})
    for key, value in entries.items():
        element[f"/{key}"] = value
    if kids is not None:
        element["/K"] = kids
    return pdf.make_indirect(element)


def _root(pdf, kids, role_map=None):
    root = pikepdf.Dictionary({"/Type": pikepdf.Name("/StructTreeRoot"), "/K": kids})
    if role_map:
        root["/RoleMap"] = pikepdf.Dictionary(role_map)
    return pdf.make_indirect(root)


def test_children_are_always_lists():
    pdf = pikepdf.new()
    figure = _element(pdf, "/Figure", kids=0, Alt=pikepdf.String("Chart"))
    document = _element(pdf, "/Document", kids=figure)

    tree = build_struct_tree(_root(pdf, document))

    assert tree.role == "StructTreeRoot"
    assert [child.role for child in tree.children] == ["Document"]
    document_node = tree.children[0]
    assert [child.role for child in document_node.children] == ["Figure"]
    assert document_node.children[0].children == []
    assert document_node.children[0].alt == "Chart"


def test_marked_content_references_are_skipped():
    pdf = pikepdf.new()
    mcr = pikepdf.Dictionary({"/Type": pikepdf.Name("/MCR"), "/MCID": 3})
    paragraph = _element(pdf, "/P", kids=pikepdf.Array([0, mcr, 7]))

    tree = build_struct_tree(_root(pdf, pikepdf.Array([paragraph])))

    assert tree.children[0].role == "P"
    assert tree.children[0].children == []


def test_role_map_chains_are_resolved():
    pdf = pikepdf.new()
    artwork = _element(pdf, "/Artwork")
    role_map = {"/Artwork": pikepdf.Name("/Picture"), "/Picture": pikepdf.Name("/Figure")}

    tree = build_struct_tree(_root(pdf, pikepdf.Array([artwork]), role_map=role_map))

    assert tree.children[0].role == "Figure"
    assert count_figures(tree) == (1, 1)


def test_resolve_role_stops_at_standard_types_and_cycles():
    assert resolve_role("/Figure", {"Figure": "P"}) == "Figure"
    assert resolve_role("/Custom", {}) == "Custom"
    assert resolve_role("/A", {"A": "B", "B": "A"}) == "A"
    assert resolve_role(None, {}) == ""


def test_scalar_entries_become_attributes():
    pdf = pikepdf.new()
    figure = _element(
        pdf,
        "/Figure",
        Alt=pikepdf.String("Logo"),
        ActualText=pikepdf.String("ACME"),
        Lang=pikepdf.String("en"),
    )

    node = build_struct_tree(_root(pdf, figure)).children[0]

    assert node.attributes == {"Alt": "Logo", "ActualText": "ACME", "Lang": "en"}


def test_cyclic_kids_are_visited_once():
    pdf = pikepdf.new()
    section = _element(pdf, "/Sect")
    figure = _element(pdf, "/Figure", kids=pikepdf.Array([section]))
    section["/K"] = pikepdf.Array([figure])

    tree = build_struct_tree(_root(pdf, pikepdf.Array([section])))

    roles = [node.role for node in iter_struct_nodes(tree)]
    assert roles == ["StructTreeRoot", "Sect", "Figure"]


def test_traversal_stops_at_max_depth():
    pdf = pikepdf.new()
    figure = _element(pdf, "/Figure")
    inner = _element(pdf, "/Div", kids=figure)
    outer = _element(pdf, "/Div", kids=inner)

    tree = build_struct_tree(_root(pdf, outer), max_depth=2)

    assert [node.role for node in iter_struct_nodes(tree)] == ["StructTreeRoot", "Div", "Div"]
    assert count_figures(tree) == (0, 0)


def test_non_dictionary_root_is_rejected():
    with pytest.raises(TypeError):
        build_struct_tree(pikepdf.Array([1, 2]))


def test_alt_text_rules():
    assert has_alt_text(StructNode(role="Figure", alt="A photo"))
    assert has_alt_text(StructNode(role="Figure", attributes={"Alt": "A photo"}))
    assert not has_alt_text(StructNode(role="Figure", alt="   "))
    assert not has_alt_text(StructNode(role="Figure", attributes={"ActualText": "x"}))


def test_count_figures_walks_the_whole_tree():
    tree = StructNode(
        role="StructTreeRoot",
        children=[
            StructNode(
                role="Document",
                children=[
                    StructNode(role="Figure", alt="Chart"),
                    StructNode(role="Sect", children=[StructNode(role="Figure")]),
                ],
            ),
            StructNode(role="Figure", attributes={"Alt": ""}),
        ],
    )

    assert count_figures(tree) == (3, 2)
    assert [node.role for node in iter_struct_nodes(tree)] == [
        "StructTreeRoot",
        "Document",
        "Figure",
        "Sect",
        "Figure",
        "Figure",
    ]
