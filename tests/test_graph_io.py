import json

import pytest

from DS_Visualizer.errors import NotFoundError, StructureFormatError
from DS_Visualizer.graph.io import (
    StructureLibrary,
    load_graph,
    load_tree,
    new_graph,
    save_graph,
    save_tree,
)
from DS_Visualizer.graph.model import GraphModel
from DS_Visualizer.graph.tree import TreeModel


def test_load_and_save_roundtrip(tmp_path):
    data = {
        "name": "pair",
        "nodes": [
            {"id": "A", "x": 0, "y": 0, "neighbors": ["B"]},
            {"id": "B", "x": 5, "y": 5, "neighbors": ["A"]},
        ],
        "edges": [{"from": "A", "to": "B"}],
    }
    path = tmp_path / "g.json"
    path.write_text(json.dumps(data))

    graph = load_graph(str(path))
    assert "A" in graph.nodes
    assert graph.has_edge("B", "A")

    out = tmp_path / "out.json"
    save_graph(str(out), graph, "pair")
    saved = json.loads(out.read_text())
    assert saved["name"] == "pair"
    assert saved["nodes"][0]["x"] == 0
    assert saved["edges"] == [{"from": "A", "to": "B"}]


def test_load_rejects_asymmetric_neighbors(tmp_path):
    data = {
        "nodes": [
            {"id": "A", "neighbors": ["B"]},
            {"id": "B", "neighbors": []},
        ],
        "edges": [{"from": "A", "to": "B"}],
    }
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(data))
    with pytest.raises(StructureFormatError):
        load_graph(str(path))


def test_load_requires_edges(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"nodes": []}))
    with pytest.raises(StructureFormatError):
        load_graph(str(path))


def test_tree_file_roundtrip(tmp_path, small_tree):
    out = tmp_path / "tree.json"
    save_tree(str(out), small_tree, "small")
    loaded = load_tree(str(out))
    assert loaded == small_tree
    assert json.loads(out.read_text())["root"] == "A"


def test_new_graph_sample():
    graph = new_graph(True)
    assert list(graph.nodes) == list("ABCDEF")
    assert new_graph().nodes == {}


def test_library_save_load_delete(tmp_path):
    library = StructureLibrary(str(tmp_path / "lib" / "structures.json"))
    library.save("demo", GraphModel.sample())
    library.save("tree", TreeModel.sample())

    assert library.names("graphs") == ["demo"]
    assert library.names("tree") == ["tree"]

    graph = library.load("graph", "demo")
    assert graph == GraphModel.sample()
    tree = library.load("trees", "tree")
    assert tree.root == "A" and len(tree.nodes) == 15

    assert library.delete("graph", "demo") is True
    assert library.delete("graph", "demo") is False
    with pytest.raises(NotFoundError):
        library.load("graph", "demo")


def test_library_rejects_unknown_kind(tmp_path):
    library = StructureLibrary(str(tmp_path / "structures.json"))
    with pytest.raises(ValueError):
        library.names("lists")


def test_library_save_requires_name(tmp_path):
    library = StructureLibrary(str(tmp_path / "structures.json"))
    with pytest.raises(ValueError):
        library.save("  ", GraphModel.sample())


@pytest.mark.parametrize(
    "node_patch, edges",
    [
        ({"x": "abc"}, []),
        ({"y": [1]}, []),
        ({"neighbors": 5}, []),
        ({"neighbors": [["B"]]}, []),
        ({}, [{"from": ["A"], "to": "B"}]),
    ],
)
def test_load_rejects_badly_typed_graph_data(tmp_path, node_patch, edges):
    node = {"id": "A", "x": 0, "y": 0, "neighbors": []}
    node.update(node_patch)
    data = {"nodes": [node, {"id": "B", "x": 1, "y": 1, "neighbors": []}], "edges": edges}
    with pytest.raises(StructureFormatError):
        GraphModel.from_dict(data)
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(data))
    with pytest.raises(StructureFormatError):
        load_graph(str(path))
