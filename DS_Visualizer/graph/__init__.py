"""Editable graph and binary tree models."""

from .io import StructureLibrary, load_graph, load_tree, new_graph, save_graph, save_tree
from .model import GraphModel
from .tree import TreeModel

__all__ = [
    "GraphModel",
    "TreeModel",
    "StructureLibrary",
    "load_graph",
    "save_graph",
    "load_tree",
    "save_tree",
    "new_graph",
]
