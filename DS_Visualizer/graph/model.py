from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

from ..config import Config
from ..errors import (
    DuplicateIdError,
    NotFoundError,
    SelfLoopError,
    StructureFormatError,
    TraversalInProgressError,
)
from .types import EdgeData, GraphDict, GraphNodeData

logger = logging.getLogger(__name__)

# Demo graph shown when the graph view opens
SAMPLE_GRAPH: List[GraphNodeData] = [
    {"id": "A", "x": 200.0, "y": 100.0, "neighbors": ["B", "C"]},
    {"id": "B", "x": 100.0, "y": 200.0, "neighbors": ["A", "D", "E"]},
    {"id": "C", "x": 300.0, "y": 200.0, "neighbors": ["A", "F"]},
    {"id": "D", "x": 50.0, "y": 300.0, "neighbors": ["B"]},
    {"id": "E", "x": 150.0, "y": 300.0, "neighbors": ["B", "F"]},
    {"id": "F", "x": 250.0, "y": 300.0, "neighbors": ["C", "E"]},
]

SAMPLE_EDGES: List[EdgeData] = [
    {"from": "A", "to": "B"},
    {"from": "A", "to": "C"},
    {"from": "B", "to": "D"},
    {"from": "B", "to": "E"},
    {"from": "C", "to": "F"},
    {"from": "E", "to": "F"},
]


def _read_position(entry: Dict[str, Any]) -> tuple[float, float]:
    """Return the ``(x, y)`` of a serialized node, defaulting to the origin."""
    position = []
    for key in ("x", "y"):
        value = entry.get(key, 0.0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise StructureFormatError(f"{entry.get('id')}: {key!r} must be a number")
        position.append(float(value))
    return position[0], position[1]


@dataclass
class GraphModel:
    """In-memory undirected graph edited by the graph view.

    Neighbor lists keep insertion order because traversals expand neighbors
    in that order. ``locked`` is set while a traversal replays over the model;
    every mutation raises :class:`TraversalInProgressError` in that state.
    """

    nodes: Dict[str, GraphNodeData] = field(default_factory=dict)
    edges: List[EdgeData] = field(default_factory=list)
    locked: bool = field(default=False, compare=False, repr=False)
    _rng: Any = field(default=None, compare=False, repr=False)

    def to_dict(self, name: str = "") -> GraphDict:
        """Serialize the model to a plain ``dict`` suitable for JSON."""
        return {
            "name": name,
            "nodes": [copy.deepcopy(node) for node in self.nodes.values()],
            "edges": [dict(edge) for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: GraphDict) -> "GraphModel":
        """Construct a :class:`GraphModel` from ``data``.

        Raises :class:`StructureFormatError` if ``data`` is malformed or the
        neighbor lists and edges disagree.
        """
        from ..invariants import check_graph

        if not isinstance(data, dict):
            raise StructureFormatError("graph data must be an object")
        nodes = data.get("nodes", [])
        edges = data.get("edges", [])
        if not isinstance(nodes, list) or not isinstance(edges, list):
            raise StructureFormatError("'nodes' and 'edges' must be lists")

        model = cls()
        for entry in nodes:
            if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
                raise StructureFormatError("node entries need a string 'id'")
            if entry["id"] in model.nodes:
                raise StructureFormatError(f"duplicate node id {entry['id']!r}")
            neighbors = entry.get("neighbors", [])
            if not isinstance(neighbors, list) or not all(
                isinstance(other, str) for other in neighbors
            ):
                raise StructureFormatError(
                    f"{entry['id']}: 'neighbors' must be a list of ids"
                )
            x, y = _read_position(entry)
            model.nodes[entry["id"]] = {
                "id": entry["id"],
                "x": x,
                "y": y,
                "neighbors": list(neighbors),
            }
        for edge in edges:
            if not isinstance(edge, dict) or "from" not in edge or "to" not in edge:
                raise StructureFormatError("edge missing 'from' or 'to'")
            if not isinstance(edge["from"], str) or not isinstance(edge["to"], str):
                raise StructureFormatError("edge endpoints must be node ids")
            model.edges.append({"from": edge["from"], "to": edge["to"]})

        problems = check_graph(model)
        if problems:
            raise StructureFormatError("; ".join(problems))
        return model

    @classmethod
    def blank(cls) -> "GraphModel":
        """Return a new empty graph."""
        return cls()

    @classmethod
    def sample(cls) -> "GraphModel":
        """Return the six node demo graph."""
        return cls.from_dict({"nodes": SAMPLE_GRAPH, "edges": SAMPLE_EDGES})

    # ---- Read access ---------------------------------------------------------

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def has_edge(self, a: str, b: str) -> bool:
        """Return ``True`` if ``a`` and ``b`` are adjacent."""
        node = self.nodes.get(a)
        return node is not None and b in node["neighbors"]

    def neighbors(self, node_id: str) -> List[str]:
        """Return a copy of the stored neighbor order of ``node_id``."""
        return list(self._require(node_id)["neighbors"])

    def node_position(self, node_id: str) -> tuple[float, float] | None:
        """Return the ``(x, y)`` position for ``node_id`` if present."""
        node = self.nodes.get(node_id)
        if node is None:
            return None
        return node.get("x", 0.0), node.get("y", 0.0)

    def snapshot(self) -> GraphDict:
        """Return a detached plain-data copy of the graph."""
        return self.to_dict()

    # ---- Mutation --------------------------------------------------------------

    def add_node(
        self, node_id: str, *, x: float | None = None, y: float | None = None
    ) -> None:
        """Insert ``node_id`` with an empty neighbor list.

        Nodes added without a position are placed at random inside the spawn
        area configured in :attr:`Config.layout`.
        """

        self._check_unlocked()
        if node_id in self.nodes:
            raise DuplicateIdError(f"node {node_id!r} already exists")
        if x is None or y is None:
            rx, ry = self._spawn_position()
            x = rx if x is None else x
            y = ry if y is None else y
        self.nodes[node_id] = GraphNodeData(
            id=node_id, x=float(x), y=float(y), neighbors=[]
        )
        logger.debug("added graph node %s at (%.1f, %.1f)", node_id, x, y)

    def remove_node(self, node_id: str) -> None:
        """Delete ``node_id`` and any references to it."""

        self._check_unlocked()
        self._require(node_id)
        self.nodes.pop(node_id)
        for node in self.nodes.values():
            node["neighbors"] = [n for n in node["neighbors"] if n != node_id]
        self.edges = [
            e for e in self.edges if e["from"] != node_id and e["to"] != node_id
        ]
        logger.debug("removed graph node %s", node_id)

    def toggle_edge(self, a: str, b: str) -> bool:
        """Add the edge ``a``–``b`` if absent, otherwise remove it.

        Returns ``True`` when the edge exists after the call.
        """

        self._check_unlocked()
        node_a = self._require(a)
        node_b = self._require(b)
        if a == b:
            raise SelfLoopError(f"self-loops are not allowed ({a!r})")

        if b in node_a["neighbors"]:
            node_a["neighbors"].remove(b)
            node_b["neighbors"].remove(a)
            self.edges = [e for e in self.edges if {e["from"], e["to"]} != {a, b}]
            logger.debug("removed edge %s-%s", a, b)
            return False

        node_a["neighbors"].append(b)
        node_b["neighbors"].append(a)
        self.edges.append({"from": a, "to": b})
        logger.debug("added edge %s-%s", a, b)
        return True

    def move_node(self, node_id: str, x: float, y: float) -> None:
        """Change the opaque ``(x, y)`` position of ``node_id``."""

        self._check_unlocked()
        node = self._require(node_id)
        node["x"], node["y"] = float(x), float(y)

    def apply_spring_layout(self) -> None:
        """Position nodes using ``networkx.spring_layout``."""

        import networkx as nx

        self._check_unlocked()
        if not self.nodes:
            return
        g = nx.Graph()
        for node_id in self.nodes:
            g.add_node(node_id)
        for edge in self.edges:
            g.add_edge(edge["from"], edge["to"])

        lo, hi = Config.layout["spawn_min"], Config.layout["spawn_max"]
        centre = (lo + hi) / 2.0
        pos = nx.spring_layout(
            g,
            seed=Config.run_seed,
            center=(centre, centre),
            scale=Config.layout["spring_scale"],
        )
        for nid, coords in pos.items():
            node = self.nodes[nid]
            node["x"], node["y"] = float(coords[0]), float(coords[1])

    # ---- Helpers ---------------------------------------------------------------

    def _require(self, node_id: str) -> GraphNodeData:
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"node {node_id!r} not found")
        return node

    def _check_unlocked(self) -> None:
        if self.locked:
            raise TraversalInProgressError("graph cannot be edited during a traversal")

    def _spawn_position(self) -> tuple[float, float]:
        if self._rng is None:
            self._rng = np.random.default_rng(Config.run_seed)
        lo, hi = Config.layout["spawn_min"], Config.layout["spawn_max"]
        x, y = self._rng.uniform(lo, hi, size=2)
        return float(x), float(y)
