from __future__ import annotations

from typing import Dict, List, TypedDict

# Reusable typed mappings for serialized structures

GraphNodeData = TypedDict(
    "GraphNodeData",
    {
        "id": str,
        "x": float,
        "y": float,
        "neighbors": List[str],
    },
    total=False,
)

EdgeData = TypedDict(
    "EdgeData",
    {
        "from": str,
        "to": str,
    },
)

GraphDict = TypedDict(
    "GraphDict",
    {
        "name": str,
        "nodes": List[GraphNodeData],
        "edges": List[EdgeData],
    },
    total=False,
)

TreeNodeData = TypedDict(
    "TreeNodeData",
    {
        "id": str,
        "value": str,
        "x": float,
        "y": float,
        "left": str | None,
        "right": str | None,
        "parent": str | None,
    },
    total=False,
)

TreeDict = TypedDict(
    "TreeDict",
    {
        "name": str,
        "root": str | None,
        "nodes": Dict[str, TreeNodeData],
    },
    total=False,
)
