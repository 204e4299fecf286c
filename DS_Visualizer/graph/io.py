"""File IO helpers for :mod:`DS_Visualizer.graph`."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List

from ..config import Config
from ..errors import NotFoundError, StructureFormatError
from .model import GraphModel
from .tree import TreeModel

logger = logging.getLogger(__name__)


def load_graph(path: str) -> GraphModel:
    """Load a graph from ``path`` and return a :class:`GraphModel`."""
    with open(path) as f:
        data = json.load(f)
    _validate_graph(data)
    return GraphModel.from_dict(data)


def save_graph(path: str, graph: GraphModel, name: str = "") -> None:
    """Write ``graph`` to ``path`` in JSON format."""
    with open(path, "w") as f:
        json.dump(graph.to_dict(name), f, indent=2)


def new_graph(sample: bool = False) -> GraphModel:
    """Return a new blank graph model, or the demo graph."""
    return GraphModel.sample() if sample else GraphModel.blank()


def load_tree(path: str) -> TreeModel:
    """Load a tree from ``path`` and return a :class:`TreeModel`."""
    with open(path) as f:
        data = json.load(f)
    _validate_tree(data)
    return TreeModel.from_dict(data)


def save_tree(path: str, tree: TreeModel, name: str = "") -> None:
    """Write ``tree`` to ``path`` in JSON format."""
    with open(path, "w") as f:
        json.dump(tree.to_dict(name), f, indent=2)


def _validate_graph(data: Any) -> None:
    if not isinstance(data, dict):
        raise StructureFormatError("graph file must contain an object")
    if "nodes" not in data or "edges" not in data:
        raise StructureFormatError("graph file must contain 'nodes' and 'edges'")
    if not isinstance(data["nodes"], list):
        raise StructureFormatError("'nodes' must be a list")
    if not isinstance(data["edges"], list):
        raise StructureFormatError("'edges' must be a list")


def _validate_tree(data: Any) -> None:
    if not isinstance(data, dict):
        raise StructureFormatError("tree file must contain an object")
    if "nodes" not in data:
        raise StructureFormatError("tree file must contain 'nodes'")
    if not isinstance(data["nodes"], (dict, list)):
        raise StructureFormatError("'nodes' must be a dict or list")


class StructureLibrary:
    """Named graphs and trees persisted together in one JSON file.

    The file holds ``{"graphs": {name: data}, "trees": {name: data}}``. It is
    re-read on every call so several sessions may share it.
    """

    KINDS = ("graphs", "trees")

    def __init__(self, path: str | None = None) -> None:
        self.path = path or Config.library_file

    def names(self, kind: str) -> List[str]:
        """Return the saved names of ``kind`` in save order."""
        return list(self._read()[self._kind(kind)])

    def save(self, name: str, structure: GraphModel | TreeModel) -> None:
        """Store ``structure`` under ``name``, replacing any previous entry."""

        name = name.strip()
        if not name:
            raise ValueError("structure name must not be empty")
        kind = "trees" if isinstance(structure, TreeModel) else "graphs"
        data = self._read()
        data[kind][name] = structure.to_dict(name)
        self._write(data)
        logger.info("saved %s %r to %s", kind[:-1], name, self.path)

    def load(self, kind: str, name: str) -> GraphModel | TreeModel:
        """Return a fresh model for the entry ``name`` of ``kind``."""

        kind = self._kind(kind)
        entries = self._read()[kind]
        if name not in entries:
            raise NotFoundError(f"no saved {kind[:-1]} named {name!r}")
        if kind == "trees":
            return TreeModel.from_dict(entries[name])
        return GraphModel.from_dict(entries[name])

    def delete(self, kind: str, name: str) -> bool:
        """Remove ``name``; return ``False`` if it was not stored."""

        kind = self._kind(kind)
        data = self._read()
        if data[kind].pop(name, None) is None:
            return False
        self._write(data)
        logger.info("deleted %s %r from %s", kind[:-1], name, self.path)
        return True

    def _kind(self, kind: str) -> str:
        if kind in ("graph", "tree"):
            kind += "s"
        if kind not in self.KINDS:
            raise ValueError(f"kind must be one of {self.KINDS}")
        return kind

    def _read(self) -> Dict[str, Dict[str, Any]]:
        data: Dict[str, Dict[str, Any]] = {kind: {} for kind in self.KINDS}
        if not os.path.exists(self.path):
            return data
        with open(self.path) as f:
            stored = json.load(f)
        if not isinstance(stored, dict):
            raise StructureFormatError(f"{self.path} must contain an object")
        for kind in self.KINDS:
            entries = stored.get(kind, {})
            if not isinstance(entries, dict):
                raise StructureFormatError(f"'{kind}' must be an object")
            data[kind] = dict(entries)
        return data

    def _write(self, data: Dict[str, Dict[str, Any]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)
