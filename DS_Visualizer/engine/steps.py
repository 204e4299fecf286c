"""Immutable step records produced by the traversal algorithms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple, overload


class StepAction(str, Enum):
    """What happened to the node a step refers to."""

    VISIT = "visit"  # node finalized and appended to the visitation order
    DISCOVER = "discover"  # node entered the frontier


class VisitState(str, Enum):
    """Per-node animation state owned by the scheduler."""

    UNVISITED = "unvisited"
    VISITING = "visiting"
    CURRENT = "current"
    VISITED = "visited"


# Ordering used to avoid downgrading a node's state
STATE_RANK = {
    VisitState.UNVISITED: 0,
    VisitState.VISITING: 1,
    VisitState.CURRENT: 2,
    VisitState.VISITED: 3,
}


@dataclass(frozen=True)
class TraversalStep:
    """One unit of traversal progress.

    ``frontier`` lists pending identifiers front-first for queues and
    bottom-first for stacks, exactly as the algorithm held them when the step
    was recorded.
    """

    node: str
    frontier: Tuple[str, ...]
    action: StepAction = StepAction.VISIT
    is_final: bool = False


@dataclass(frozen=True)
class Traversal:
    """Complete, read-only result of one traversal invocation.

    Behaves as a sequence of :class:`TraversalStep` so it can be handed to the
    scheduler directly.
    """

    algorithm: str
    start: str | None
    steps: Tuple[TraversalStep, ...]
    order: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[TraversalStep]:
        return iter(self.steps)

    @overload
    def __getitem__(self, index: int) -> TraversalStep: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[TraversalStep, ...]: ...

    def __getitem__(self, index):
        return self.steps[index]

    @property
    def frontier_kind(self) -> str:
        """Return ``"queue"`` or ``"stack"`` for labelling the frontier."""
        return "queue" if self.algorithm in {"bfs", "levelorder"} else "stack"
