import pytest

from DS_Visualizer.errors import (
    CycleError,
    DuplicateIdError,
    NotFoundError,
    SelfConnectionError,
    StructureFormatError,
)
from DS_Visualizer.graph.tree import TreeModel
from DS_Visualizer.invariants import check_tree


def test_first_node_becomes_root():
    tree = TreeModel.blank()
    assert tree.root is None
    first = tree.add_node("1")
    second = tree.add_node("2")
    assert tree.root == first
    assert first != second
    assert tree.nodes[second]["parent"] is None
    assert check_tree(tree) == []


def test_explicit_duplicate_id_rejected():
    tree = TreeModel.blank()
    tree.add_node("A", node_id="A")
    with pytest.raises(DuplicateIdError):
        tree.add_node("again", node_id="A")


def test_connect_links_both_directions(small_tree):
    assert small_tree.nodes["A"]["left"] == "B"
    assert small_tree.nodes["B"]["parent"] == "A"
    assert small_tree.children("B") == ["D", "E"]
    assert small_tree.ancestors("E") == ["B", "A"]
    assert small_tree.depth("D") == 2
    assert check_tree(small_tree) == []


def test_connect_moves_child_from_old_parent(small_tree):
    small_tree.connect("C", "E", "left")
    assert small_tree.nodes["B"]["right"] is None
    assert small_tree.nodes["C"]["left"] == "E"
    assert small_tree.nodes["E"]["parent"] == "C"
    assert check_tree(small_tree) == []


def test_connect_displaces_occupant(small_tree):
    small_tree.connect("B", "C", "left")
    assert small_tree.nodes["B"]["left"] == "C"
    assert small_tree.nodes["D"]["parent"] is None
    assert small_tree.nodes["A"]["right"] is None
    assert check_tree(small_tree) == []


def test_connect_rejects_self(small_tree):
    with pytest.raises(SelfConnectionError):
        small_tree.connect("A", "A", "left")


def test_connect_rejects_cycle(small_tree):
    before = small_tree.snapshot()
    with pytest.raises(CycleError):
        small_tree.connect("D", "A", "left")
    with pytest.raises(CycleError):
        small_tree.connect("E", "B", "right")
    assert small_tree.snapshot() == before


def test_connect_missing_and_bad_side(small_tree):
    with pytest.raises(NotFoundError):
        small_tree.connect("A", "Z", "left")
    with pytest.raises(ValueError):
        small_tree.connect("A", "B", "middle")


def test_connect_root_under_orphan_moves_root():
    tree = TreeModel.blank()
    tree.add_node("r", node_id="R")
    tree.add_node("o", node_id="O")
    tree.connect("O", "R", "left")
    assert tree.root == "O"
    assert check_tree(tree) == []


def test_remove_node_orphans_children(small_tree):
    small_tree.remove_node("B")
    assert "B" not in small_tree.nodes
    assert small_tree.nodes["A"]["left"] is None
    assert small_tree.nodes["D"]["parent"] is None
    assert small_tree.nodes["E"]["parent"] is None
    assert "D" in small_tree.nodes and "E" in small_tree.nodes
    assert check_tree(small_tree) == []


def test_remove_root_picks_remaining_node(small_tree):
    small_tree.remove_node("A")
    assert small_tree.root == "B"
    assert check_tree(small_tree) == []
    for node_id in list(small_tree.nodes):
        small_tree.remove_node(node_id)
    assert small_tree.root is None
    assert check_tree(small_tree) == []


@pytest.mark.parametrize("node_id", list("ABCDE"))
def test_remove_any_node_leaves_no_dangling_reference(small_tree, node_id):
    small_tree.remove_node(node_id)
    for node in small_tree.nodes.values():
        assert node_id not in (node["left"], node["right"], node["parent"])
    assert check_tree(small_tree) == []


def test_disconnect(small_tree):
    assert small_tree.disconnect("A", "right") == "C"
    assert small_tree.disconnect("A", "right") is None
    assert small_tree.nodes["C"]["parent"] is None
    assert check_tree(small_tree) == []


def test_sample_tree_is_complete():
    tree = TreeModel.sample()
    assert tree.root == "A"
    assert len(tree.nodes) == 15
    assert tree.children("A") == ["B", "C"]
    assert tree.children("G") == ["N", "O"]
    assert tree.children("H") == []
    assert check_tree(tree) == []


def test_from_dict_rejects_broken_links():
    data = {
        "root": "A",
        "nodes": {
            "A": {"id": "A", "value": "A", "left": "B"},
            "B": {"id": "B", "value": "B"},
        },
    }
    with pytest.raises(StructureFormatError):
        TreeModel.from_dict(data)


def test_from_dict_rejects_cycle():
    data = {
        "root": "A",
        "nodes": {
            "A": {"id": "A", "value": "A"},
            "B": {"id": "B", "value": "B", "left": "C", "parent": "C"},
            "C": {"id": "C", "value": "C", "left": "B", "parent": "B"},
        },
    }
    with pytest.raises(StructureFormatError):
        TreeModel.from_dict(data)


def test_from_dict_rejects_non_root_root():
    data = TreeModel.sample().to_dict()
    data["root"] = "B"
    with pytest.raises(StructureFormatError, match="root B has parent A"):
        TreeModel.from_dict(data)


@pytest.mark.parametrize(
    "field, value",
    [("x", "abc"), ("y", None), ("left", ["B"]), ("parent", 5)],
)
def test_from_dict_rejects_badly_typed_fields(field, value):
    data = {
        "root": "A",
        "nodes": {
            "A": {"id": "A", "value": "A", "left": "B"},
            "B": {"id": "B", "value": "B", "parent": "A"},
        },
    }
    data["nodes"]["B" if field == "parent" else "A"][field] = value
    with pytest.raises(StructureFormatError):
        TreeModel.from_dict(data)


def test_from_dict_rejects_non_string_root():
    with pytest.raises(StructureFormatError):
        TreeModel.from_dict({"root": ["A"], "nodes": {"A": {"id": "A"}}})
