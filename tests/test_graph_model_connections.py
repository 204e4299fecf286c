from DS_Visualizer.config import Config
from DS_Visualizer.errors import DuplicateIdError, NotFoundError, SelfLoopError
from DS_Visualizer.graph.model import GraphModel
from DS_Visualizer.invariants import check_graph
import pytest


def _sample_nodes(model: GraphModel) -> None:
    model.add_node("A", x=0, y=0)
    model.add_node("B", x=1, y=1)


def test_toggle_edge_adds_symmetrically():
    model = GraphModel.blank()
    _sample_nodes(model)
    assert model.toggle_edge("A", "B") is True
    assert model.nodes["A"]["neighbors"] == ["B"]
    assert model.nodes["B"]["neighbors"] == ["A"]
    assert model.edges == [{"from": "A", "to": "B"}]
    assert check_graph(model) == []


def test_toggle_edge_twice_restores_state():
    model = GraphModel.sample()
    model.add_node("G", x=5, y=5)
    before = model.snapshot()
    model.toggle_edge("G", "D")
    model.toggle_edge("D", "G")
    assert model.snapshot() == before
    assert check_graph(model) == []


def test_toggle_existing_edge_removes_from_both_sides():
    model = GraphModel.sample()
    assert model.toggle_edge("B", "A") is False
    assert "B" not in model.nodes["A"]["neighbors"]
    assert "A" not in model.nodes["B"]["neighbors"]
    assert {"from": "A", "to": "B"} not in model.edges
    assert check_graph(model) == []


def test_self_loop_rejected():
    model = GraphModel.blank()
    _sample_nodes(model)
    with pytest.raises(SelfLoopError):
        model.toggle_edge("A", "A")
    assert model.edges == []


def test_toggle_edge_missing_endpoint():
    model = GraphModel.blank()
    _sample_nodes(model)
    with pytest.raises(NotFoundError):
        model.toggle_edge("A", "Z")
    assert model.nodes["A"]["neighbors"] == []


def test_duplicate_node_disallowed():
    model = GraphModel.blank()
    _sample_nodes(model)
    with pytest.raises(DuplicateIdError):
        model.add_node("A")
    # also catchable as the builtin
    with pytest.raises(ValueError):
        model.add_node("B")


def test_add_node_spawns_inside_layout_bounds():
    Config.layout["spawn_min"] = 10.0
    Config.layout["spawn_max"] = 20.0
    model = GraphModel.blank()
    model.add_node("A")
    x, y = model.node_position("A")
    assert 10.0 <= x <= 20.0 and 10.0 <= y <= 20.0


def test_apply_spring_layout():
    model = GraphModel.blank()
    _sample_nodes(model)
    model.toggle_edge("A", "B")
    model.apply_spring_layout()
    assert model.node_position("A") != model.node_position("B")


def test_move_node_keeps_links():
    model = GraphModel.sample()
    model.move_node("A", 12, 34)
    assert model.node_position("A") == (12.0, 34.0)
    assert model.neighbors("A") == ["B", "C"]
