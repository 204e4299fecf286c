"""Structural invariant checks for graph and tree models.

Each check returns a list of human readable violations; an empty list means
the structure is consistent. The models call these when loading serialized
data and the test-suite calls them after every mutation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .graph.model import GraphModel
    from .graph.tree import TreeModel


def check_graph(model: "GraphModel") -> List[str]:
    """Return violations of the undirected graph invariants."""

    problems: List[str] = []
    for node_id, node in model.nodes.items():
        seen = set()
        for other in node["neighbors"]:
            if other == node_id:
                problems.append(f"{node_id}: self-loop")
            elif other not in model.nodes:
                problems.append(f"{node_id}: dangling neighbor {other}")
            elif node_id not in model.nodes[other]["neighbors"]:
                problems.append(f"{node_id}: asymmetric neighbor {other}")
            if other in seen:
                problems.append(f"{node_id}: duplicate neighbor {other}")
            seen.add(other)

    pairs = set()
    for edge in model.edges:
        a, b = edge["from"], edge["to"]
        pair = frozenset((a, b))
        if a == b:
            problems.append(f"edge {a}-{b}: self-loop")
        elif pair in pairs:
            problems.append(f"edge {a}-{b}: duplicate")
        elif a not in model.nodes or b not in model.nodes:
            problems.append(f"edge {a}-{b}: dangling endpoint")
        elif b not in model.nodes[a]["neighbors"]:
            problems.append(f"edge {a}-{b}: missing from neighbor lists")
        pairs.add(pair)

    adjacent = {
        frozenset((node_id, other))
        for node_id, node in model.nodes.items()
        for other in node["neighbors"]
        if other != node_id
    }
    for pair in adjacent - pairs:
        a, b = sorted(pair)
        problems.append(f"neighbors {a}-{b}: no matching edge")
    return problems


def check_tree(model: "TreeModel") -> List[str]:
    """Return violations of the binary tree invariants."""

    problems: List[str] = []
    incoming: dict[str, str] = {}
    for node_id, node in model.nodes.items():
        for side in ("left", "right"):
            child = node.get(side)
            if child is None:
                continue
            if child not in model.nodes:
                problems.append(f"{node_id}.{side}: dangling child {child}")
                continue
            if child in incoming:
                problems.append(f"{child}: has two parents")
            incoming[child] = node_id
            if model.nodes[child].get("parent") != node_id:
                problems.append(f"{child}: parent does not point back to {node_id}")

    for node_id, node in model.nodes.items():
        parent = node.get("parent")
        if parent is None:
            continue
        if parent not in model.nodes:
            problems.append(f"{node_id}: dangling parent {parent}")
        elif incoming.get(node_id) != parent:
            problems.append(f"{node_id}: parent {parent} has no link to it")

    for node_id in model.nodes:
        seen = {node_id}
        cursor = model.nodes[node_id].get("parent")
        while cursor is not None and cursor in model.nodes:
            if cursor in seen:
                problems.append(f"{node_id}: cycle through {cursor}")
                break
            seen.add(cursor)
            cursor = model.nodes[cursor].get("parent")

    if (model.root is None) != (not model.nodes):
        problems.append("root must be set exactly when the tree has nodes")
    elif model.root is not None and model.root not in model.nodes:
        problems.append(f"root {model.root} is not a node")
    elif model.root is not None and model.nodes[model.root].get("parent") is not None:
        problems.append(f"root {model.root} has parent {model.nodes[model.root]['parent']}")
    return problems


def is_consistent(model: "GraphModel | TreeModel") -> bool:
    """Return ``True`` if ``model`` satisfies its structural invariants."""

    from .graph.tree import TreeModel

    if isinstance(model, TreeModel):
        return not check_tree(model)
    return not check_graph(model)
