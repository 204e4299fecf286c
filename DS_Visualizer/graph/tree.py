from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

from ..config import Config
from ..errors import (
    CycleError,
    DuplicateIdError,
    NotFoundError,
    SelfConnectionError,
    StructureFormatError,
    TraversalInProgressError,
)
from .model import _read_position
from .types import TreeDict, TreeNodeData

logger = logging.getLogger(__name__)

SIDES = ("left", "right")


def _sample_nodes() -> Dict[str, TreeNodeData]:
    """Return the fifteen node complete tree shown when the tree view opens."""

    nodes: Dict[str, TreeNodeData] = {}
    labels = "ABCDEFGHIJKLMNO"
    for index, label in enumerate(labels):
        level = (index + 1).bit_length() - 1
        offset = index - (2**level - 1)
        width = 800.0 / 2**level
        nodes[label] = {
            "id": label,
            "value": label,
            "x": 100.0 + width * (offset + 0.5),
            "y": 50.0 + 70.0 * level,
            "left": labels[2 * index + 1] if 2 * index + 1 < len(labels) else None,
            "right": labels[2 * index + 2] if 2 * index + 2 < len(labels) else None,
            "parent": labels[(index - 1) // 2] if index else None,
        }
    return nodes


@dataclass
class TreeModel:
    """In-memory binary tree edited by the tree view.

    Nodes link to their children through ``left``/``right`` and back to their
    parent through ``parent``. Nodes without a parent other than the root are
    orphaned subtrees: they are kept but not reached by traversals.
    """

    nodes: Dict[str, TreeNodeData] = field(default_factory=dict)
    root: str | None = None
    locked: bool = field(default=False, compare=False, repr=False)
    _rng: Any = field(default=None, compare=False, repr=False)

    def to_dict(self, name: str = "") -> TreeDict:
        """Serialize the model to a plain ``dict`` suitable for JSON."""
        return {
            "name": name,
            "root": self.root,
            "nodes": copy.deepcopy(self.nodes),
        }

    @classmethod
    def from_dict(cls, data: TreeDict) -> "TreeModel":
        """Construct a :class:`TreeModel` from ``data``.

        ``nodes`` may be a mapping keyed by id or a list of node objects.
        Raises :class:`StructureFormatError` on malformed data or broken links.
        """
        from ..invariants import check_tree

        if not isinstance(data, dict):
            raise StructureFormatError("tree data must be an object")
        nodes = data.get("nodes", {})
        if isinstance(nodes, dict):
            entries = list(nodes.values())
        elif isinstance(nodes, list):
            entries = list(nodes)
        else:
            raise StructureFormatError("'nodes' must be a dict or list")

        model = cls()
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
                raise StructureFormatError("node entries need a string 'id'")
            if entry["id"] in model.nodes:
                raise StructureFormatError(f"duplicate node id {entry['id']!r}")
            for key in ("left", "right", "parent"):
                if entry.get(key) is not None and not isinstance(entry[key], str):
                    raise StructureFormatError(
                        f"{entry['id']}: {key!r} must be a node id or null"
                    )
            x, y = _read_position(entry)
            model.nodes[entry["id"]] = {
                "id": entry["id"],
                "value": entry.get("value", entry["id"]),
                "x": x,
                "y": y,
                "left": entry.get("left") or None,
                "right": entry.get("right") or None,
                "parent": entry.get("parent") or None,
            }
        if data.get("root") is not None and not isinstance(data["root"], str):
            raise StructureFormatError("'root' must be a node id or null")
        model.root = data.get("root") or None
        if model.root is None and model.nodes:
            model.root = model._first_parentless()

        problems = check_tree(model)
        if problems:
            raise StructureFormatError("; ".join(problems))
        return model

    @classmethod
    def blank(cls) -> "TreeModel":
        """Return a new empty tree."""
        return cls()

    @classmethod
    def sample(cls) -> "TreeModel":
        """Return the fifteen node demo tree rooted at ``A``."""
        return cls(nodes=_sample_nodes(), root="A")

    # ---- Read access ---------------------------------------------------------

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def children(self, node_id: str) -> List[str]:
        """Return the present children of ``node_id``, left first."""
        node = self._require(node_id)
        return [node[side] for side in SIDES if node.get(side) is not None]

    def ancestors(self, node_id: str) -> List[str]:
        """Return the parent chain of ``node_id``, nearest first."""
        chain: List[str] = []
        cursor = self._require(node_id).get("parent")
        while cursor is not None:
            chain.append(cursor)
            cursor = self.nodes[cursor].get("parent")
        return chain

    def depth(self, node_id: str) -> int:
        return len(self.ancestors(node_id))

    def node_position(self, node_id: str) -> tuple[float, float] | None:
        """Return the ``(x, y)`` position for ``node_id`` if present."""
        node = self.nodes.get(node_id)
        if node is None:
            return None
        return node.get("x", 0.0), node.get("y", 0.0)

    def snapshot(self) -> TreeDict:
        """Return a detached plain-data copy of the tree."""
        return self.to_dict()

    # ---- Mutation --------------------------------------------------------------

    def add_node(
        self,
        value: str,
        *,
        node_id: str | None = None,
        x: float | None = None,
        y: float | None = None,
    ) -> str:
        """Insert a parentless, childless node holding ``value``.

        A fresh identifier is generated unless ``node_id`` is given. The first
        node added to an empty tree becomes the root. Returns the identifier.
        """

        self._check_unlocked()
        if node_id is None:
            node_id = self._fresh_id()
        elif node_id in self.nodes:
            raise DuplicateIdError(f"node {node_id!r} already exists")
        if x is None or y is None:
            rx, ry = self._spawn_position()
            x = rx if x is None else x
            y = ry if y is None else y

        self.nodes[node_id] = TreeNodeData(
            id=node_id,
            value=value,
            x=float(x),
            y=float(y),
            left=None,
            right=None,
            parent=None,
        )
        if self.root is None:
            self.root = node_id
        logger.debug("added tree node %s (%s)", node_id, value)
        return node_id

    def remove_node(self, node_id: str) -> None:
        """Delete ``node_id``; its children become orphaned subtrees."""

        self._check_unlocked()
        node = self._require(node_id)
        parent_id = node.get("parent")
        if parent_id is not None:
            parent = self.nodes[parent_id]
            for side in SIDES:
                if parent.get(side) == node_id:
                    parent[side] = None
        for side in SIDES:
            child = node.get(side)
            if child is not None:
                self.nodes[child]["parent"] = None
        del self.nodes[node_id]

        if self.root == node_id:
            self.root = self._first_parentless()
        logger.debug("removed tree node %s; root is now %s", node_id, self.root)

    def connect(self, parent_id: str, child_id: str, side: str) -> None:
        """Make ``child_id`` the ``side`` child of ``parent_id``.

        The child is detached from any previous parent and a node already
        occupying ``side`` is orphaned. Connecting a node under its own
        descendant raises :class:`CycleError`.
        """

        self._check_unlocked()
        if side not in SIDES:
            raise ValueError("side must be 'left' or 'right'")
        parent = self._require(parent_id)
        child = self._require(child_id)
        if parent_id == child_id:
            raise SelfConnectionError(f"node {parent_id!r} cannot be its own child")
        if child_id in self.ancestors(parent_id):
            raise CycleError(f"{child_id!r} is an ancestor of {parent_id!r}")

        old_parent_id = child.get("parent")
        if old_parent_id is not None:
            old_parent = self.nodes[old_parent_id]
            for slot in SIDES:
                if old_parent.get(slot) == child_id:
                    old_parent[slot] = None

        displaced = parent.get(side)
        if displaced is not None:
            self.nodes[displaced]["parent"] = None

        parent[side] = child_id
        child["parent"] = parent_id

        if self.root == child_id:
            self.root = self._topmost(parent_id)
        logger.debug("connected %s as %s child of %s", child_id, side, parent_id)

    def disconnect(self, parent_id: str, side: str) -> str | None:
        """Clear the ``side`` slot of ``parent_id`` and return the old child."""

        self._check_unlocked()
        if side not in SIDES:
            raise ValueError("side must be 'left' or 'right'")
        parent = self._require(parent_id)
        child_id = parent.get(side)
        if child_id is None:
            return None
        parent[side] = None
        self.nodes[child_id]["parent"] = None
        logger.debug("disconnected %s from %s", child_id, parent_id)
        return child_id

    def set_value(self, node_id: str, value: str) -> None:
        self._check_unlocked()
        self._require(node_id)["value"] = value

    def move_node(self, node_id: str, x: float, y: float) -> None:
        """Change the opaque ``(x, y)`` position of ``node_id``."""

        self._check_unlocked()
        node = self._require(node_id)
        node["x"], node["y"] = float(x), float(y)

    # ---- Helpers ---------------------------------------------------------------

    def _require(self, node_id: str) -> TreeNodeData:
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"node {node_id!r} not found")
        return node

    def _check_unlocked(self) -> None:
        if self.locked:
            raise TraversalInProgressError("tree cannot be edited during a traversal")

    def _topmost(self, node_id: str) -> str:
        chain = self.ancestors(node_id)
        return chain[-1] if chain else node_id

    def _first_parentless(self) -> str | None:
        for node_id, node in self.nodes.items():
            if node.get("parent") is None:
                return node_id
        return None

    def _fresh_id(self) -> str:
        while True:
            candidate = uuid.uuid4().hex[:8]
            if candidate not in self.nodes:
                return candidate

    def _spawn_position(self) -> tuple[float, float]:
        if self._rng is None:
            self._rng = np.random.default_rng(Config.run_seed)
        lo, hi = Config.layout["spawn_min"], Config.layout["spawn_max"]
        x, y = self._rng.uniform(lo, hi, size=2)
        return float(x), float(y)
