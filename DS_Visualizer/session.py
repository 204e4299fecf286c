"""Editing sessions pairing one structure model with one step scheduler.

A session is the state object a front end holds for one view: the model
being edited, the scheduler replaying traversals over it, the chosen
algorithm and the name and dirty flag of the loaded structure. The model is
locked for the duration of every run so edits fail with
:class:`TraversalInProgressError` instead of racing the replay.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generic, TypeVar

from .config import Config
from .engine.scheduler import SchedulerState, StepScheduler
from .engine.steps import Traversal
from .engine.traversal import GRAPH_ALGORITHMS, TREE_ALGORITHMS, compute_traversal
from .errors import AlreadyRunningError
from .graph.io import StructureLibrary
from .graph.model import GraphModel
from .graph.tree import TreeModel

logger = logging.getLogger(__name__)

M = TypeVar("M", GraphModel, TreeModel)


class _Session(Generic[M]):
    kind = ""
    model_cls: Any = None
    algorithms: Dict[str, Any] = {}

    def __init__(
        self,
        model: M | None = None,
        scheduler: StepScheduler | None = None,
        name: str = "",
    ) -> None:
        self.model: M = model if model is not None else self.model_cls.blank()
        self.scheduler = scheduler or StepScheduler()
        self.scheduler.on_state(self._sync_lock)
        self.name = name
        self.dirty = False
        self.traversal: Traversal | None = None
        self.algorithm = next(iter(self.algorithms))

    # ------------------------------------------------------------------
    @property
    def is_traversing(self) -> bool:
        return self.scheduler.is_running

    def _sync_lock(self, state: SchedulerState) -> None:
        self.model.locked = state is SchedulerState.RUNNING

    def mark_dirty(self) -> None:
        """Flag the structure as modified since the last load/save."""
        self.dirty = True

    def select_algorithm(self, algorithm: str) -> None:
        name = algorithm.lower()
        if name not in self.algorithms:
            raise ValueError(f"unknown {self.kind} algorithm {algorithm!r}")
        self.algorithm = name

    def stop(self) -> None:
        """Halt the running traversal, leaving the visit states on display."""
        self.scheduler.stop()

    def reset(self) -> None:
        """Halt the traversal and clear all visit states."""
        self.scheduler.reset()
        self.traversal = None

    def _start(
        self, start_id: str | None, algorithm: str | None, tick_interval_ms: float | None
    ) -> Traversal:
        if self.is_traversing:
            raise AlreadyRunningError("a traversal is already running")
        if algorithm is not None:
            self.select_algorithm(algorithm)
        traversal = compute_traversal(self.model, self.algorithm, start_id)
        self.scheduler.start(traversal, tick_interval_ms, nodes=list(self.model.nodes))
        self.traversal = traversal
        return traversal

    # ------------------------------------------------------------------
    # persistence
    def load(self, data: Dict[str, Any]) -> None:
        """Replace the model with serialized ``data``, stopping any run."""

        model = self.model_cls.from_dict(data)
        self._replace(model, data.get("name", ""))

    def save(self, library: StructureLibrary, name: str | None = None) -> None:
        """Store the model in ``library`` under ``name`` or the current name."""

        name = (name if name is not None else self.name).strip()
        library.save(name, self.model)
        self.name = name
        self.dirty = False

    def open(self, library: StructureLibrary, name: str) -> None:
        """Load the entry ``name`` from ``library``."""

        self._replace(library.load(self.kind, name), name)

    def to_dict(self) -> Dict[str, Any]:
        return self.model.to_dict(self.name)

    def _replace(self, model: M, name: str) -> None:
        self.reset()
        self.model = model
        self.name = name
        self.dirty = False
        logger.info("loaded %s %r (%d nodes)", self.kind, name, len(model.nodes))


class GraphSession(_Session[GraphModel]):
    """Session for the graph view; runs ``bfs`` or ``dfs``."""

    kind = "graph"
    model_cls = GraphModel
    algorithms = GRAPH_ALGORITHMS

    def __init__(
        self,
        model: GraphModel | None = None,
        scheduler: StepScheduler | None = None,
        name: str = "",
    ) -> None:
        super().__init__(model, scheduler, name)
        self.start_node: str | None = next(iter(self.model.nodes), None)

    def add_node(self, node_id: str, *, x: float | None = None, y: float | None = None) -> None:
        node_id = node_id.strip()
        if not node_id:
            raise ValueError("node id must not be empty")
        self.model.add_node(node_id, x=x, y=y)
        if self.start_node is None:
            self.start_node = node_id
        self.mark_dirty()

    def remove_node(self, node_id: str) -> None:
        self.model.remove_node(node_id)
        if self.start_node == node_id:
            self.start_node = next(iter(self.model.nodes), None)
        self.mark_dirty()

    def toggle_edge(self, a: str, b: str) -> bool:
        present = self.model.toggle_edge(a, b)
        self.mark_dirty()
        return present

    def move_node(self, node_id: str, x: float, y: float) -> None:
        self.model.move_node(node_id, x, y)
        self.mark_dirty()

    def apply_spring_layout(self) -> None:
        self.model.apply_spring_layout()
        self.mark_dirty()

    def run(
        self,
        algorithm: str | None = None,
        start_id: str | None = None,
        tick_interval_ms: float | None = None,
    ) -> Traversal:
        """Compute ``algorithm`` from ``start_id`` and begin replaying it."""

        start = start_id if start_id is not None else self.start_node
        traversal = self._start(start, algorithm, tick_interval_ms)
        self.start_node = start
        return traversal

    def _replace(self, model: GraphModel, name: str) -> None:
        super()._replace(model, name)
        self.start_node = next(iter(model.nodes), None)


class TreeSession(_Session[TreeModel]):
    """Session for the tree view; runs the four depth and level orders."""

    kind = "tree"
    model_cls = TreeModel
    algorithms = TREE_ALGORITHMS

    def add_node(self, value: str, *, x: float | None = None, y: float | None = None) -> str:
        value = value.strip()
        if not value:
            raise ValueError("node value must not be empty")
        node_id = self.model.add_node(value, x=x, y=y)
        self.mark_dirty()
        return node_id

    def remove_node(self, node_id: str) -> None:
        self.model.remove_node(node_id)
        self.mark_dirty()

    def connect(self, parent_id: str, child_id: str, side: str) -> None:
        self.model.connect(parent_id, child_id, side)
        self.mark_dirty()

    def disconnect(self, parent_id: str, side: str) -> str | None:
        child = self.model.disconnect(parent_id, side)
        self.mark_dirty()
        return child

    def set_value(self, node_id: str, value: str) -> None:
        self.model.set_value(node_id, value)
        self.mark_dirty()

    def move_node(self, node_id: str, x: float, y: float) -> None:
        self.model.move_node(node_id, x, y)
        self.mark_dirty()

    def run(
        self,
        algorithm: str | None = None,
        start_id: str | None = None,
        tick_interval_ms: float | None = None,
    ) -> Traversal:
        """Compute ``algorithm`` from the root and begin replaying it."""

        if tick_interval_ms is None:
            tick_interval_ms = self.scheduler.tick_interval_ms
        if tick_interval_ms is None:
            tick_interval_ms = Config.tree_tick_interval_ms
        return self._start(start_id, algorithm, tick_interval_ms)
