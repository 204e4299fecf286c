"""Graph and tree traversals that record frontier snapshots.

Every algorithm is a generator of :class:`TraversalStep` records so callers
may consume it lazily. :func:`compute_traversal` materializes one eagerly,
flags the last step and pairs the steps with the final visitation order.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Dict, Iterator, List, Union

from ..errors import InvalidStartNodeError
from ..graph.model import GraphModel
from ..graph.tree import TreeModel
from .steps import StepAction, Traversal, TraversalStep

logger = logging.getLogger(__name__)

Structure = Union[GraphModel, TreeModel]


def _visit(node: str, frontier) -> TraversalStep:
    return TraversalStep(node, tuple(frontier), StepAction.VISIT)


def _discover(node: str, frontier) -> TraversalStep:
    return TraversalStep(node, tuple(frontier), StepAction.DISCOVER)


# ---- Graph traversals -----------------------------------------------------------


def iter_bfs(graph: GraphModel, start: str) -> Iterator[TraversalStep]:
    """Breadth-first search from ``start`` over stored neighbor order."""

    if start not in graph.nodes:
        raise InvalidStartNodeError(f"start node {start!r} not in graph")
    queue = deque([start])
    visited: set[str] = set()
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        yield _visit(current, queue)
        for neighbor in graph.nodes[current]["neighbors"]:
            if neighbor not in visited and neighbor not in queue:
                queue.append(neighbor)
                yield _discover(neighbor, queue)


def iter_dfs(graph: GraphModel, start: str) -> Iterator[TraversalStep]:
    """Depth-first search from ``start``.

    Neighbors are pushed in reverse so they are popped in stored order. A node
    may sit on the stack more than once; only its first pop counts.
    """

    if start not in graph.nodes:
        raise InvalidStartNodeError(f"start node {start!r} not in graph")
    stack = [start]
    visited: set[str] = set()
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        yield _visit(current, stack)
        for neighbor in reversed(graph.nodes[current]["neighbors"]):
            if neighbor not in visited:
                stack.append(neighbor)
                yield _discover(neighbor, stack)


# ---- Tree traversals ------------------------------------------------------------


def iter_preorder(tree: TreeModel, root: str | None) -> Iterator[TraversalStep]:
    """Root, left, right using an explicit stack."""

    if root is None:
        return
    stack = [root]
    while stack:
        current = stack.pop()
        yield _visit(current, stack)
        node = tree.nodes[current]
        if node.get("right") is not None:
            stack.append(node["right"])
        if node.get("left") is not None:
            stack.append(node["left"])


def iter_inorder(tree: TreeModel, root: str | None) -> Iterator[TraversalStep]:
    """Left, root, right by descending left with a cursor."""

    stack: List[str] = []
    cursor = root
    while cursor is not None or stack:
        while cursor is not None:
            stack.append(cursor)
            yield _discover(cursor, stack)
            cursor = tree.nodes[cursor].get("left")
        current = stack.pop()
        yield _visit(current, stack)
        cursor = tree.nodes[current].get("right")


def iter_postorder(tree: TreeModel, root: str | None) -> Iterator[TraversalStep]:
    """Left, right, root with the two-stack formulation.

    The first phase fills ``stack2`` in root-right-left order; draining it
    yields the final order.
    """

    if root is None:
        return
    stack1 = [root]
    stack2: List[str] = []
    while stack1:
        current = stack1.pop()
        stack2.append(current)
        yield _discover(current, stack1)
        node = tree.nodes[current]
        if node.get("left") is not None:
            stack1.append(node["left"])
        if node.get("right") is not None:
            stack1.append(node["right"])
    while stack2:
        current = stack2.pop()
        yield _visit(current, stack2)


def iter_levelorder(tree: TreeModel, root: str | None) -> Iterator[TraversalStep]:
    """Breadth-first over the tree, left child before right."""

    if root is None:
        return
    queue = deque([root])
    while queue:
        current = queue.popleft()
        yield _visit(current, queue)
        node = tree.nodes[current]
        if node.get("left") is not None:
            queue.append(node["left"])
        if node.get("right") is not None:
            queue.append(node["right"])


GRAPH_ALGORITHMS: Dict[str, Callable[[GraphModel, str], Iterator[TraversalStep]]] = {
    "bfs": iter_bfs,
    "dfs": iter_dfs,
}

TREE_ALGORITHMS: Dict[str, Callable[[TreeModel, str | None], Iterator[TraversalStep]]] = {
    "preorder": iter_preorder,
    "inorder": iter_inorder,
    "postorder": iter_postorder,
    "levelorder": iter_levelorder,
}


def iter_traversal(
    structure: Structure, algorithm: str, start_id: str | None = None
) -> Iterator[TraversalStep]:
    """Return the lazy step generator for ``algorithm`` over ``structure``.

    Graph algorithms require ``start_id``. Tree algorithms start from the root
    unless ``start_id`` names another node.
    """

    name = algorithm.lower()
    if isinstance(structure, GraphModel):
        if name not in GRAPH_ALGORITHMS:
            raise ValueError(f"unknown graph algorithm {algorithm!r}")
        if start_id is None or start_id not in structure.nodes:
            raise InvalidStartNodeError(f"start node {start_id!r} not in graph")
        return GRAPH_ALGORITHMS[name](structure, start_id)
    if isinstance(structure, TreeModel):
        if name not in TREE_ALGORITHMS:
            raise ValueError(f"unknown tree algorithm {algorithm!r}")
        if start_id is not None and start_id not in structure.nodes:
            raise InvalidStartNodeError(f"start node {start_id!r} not in tree")
        return TREE_ALGORITHMS[name](structure, start_id or structure.root)
    raise TypeError(f"cannot traverse {type(structure).__name__}")


def compute_traversal(
    structure: Structure, algorithm: str, start_id: str | None = None
) -> Traversal:
    """Compute the full step sequence for ``algorithm`` over ``structure``."""

    steps = list(iter_traversal(structure, algorithm, start_id))
    if steps:
        last = steps[-1]
        steps[-1] = TraversalStep(last.node, last.frontier, last.action, True)
    order = tuple(step.node for step in steps if step.action is StepAction.VISIT)
    if start_id is None and isinstance(structure, TreeModel):
        start_id = structure.root
    logger.debug(
        "computed %s from %s: %d steps, %d visited",
        algorithm,
        start_id,
        len(steps),
        len(order),
    )
    return Traversal(
        algorithm=algorithm.lower(),
        start=start_id,
        steps=tuple(steps),
        order=order,
    )
