"""Traversal algorithms and the step scheduler."""

from .scheduler import SchedulerState, StepScheduler
from .steps import StepAction, Traversal, TraversalStep, VisitState
from .traversal import (
    GRAPH_ALGORITHMS,
    TREE_ALGORITHMS,
    compute_traversal,
    iter_traversal,
)

__all__ = [
    "SchedulerState",
    "StepScheduler",
    "StepAction",
    "Traversal",
    "TraversalStep",
    "VisitState",
    "GRAPH_ALGORITHMS",
    "TREE_ALGORITHMS",
    "compute_traversal",
    "iter_traversal",
]
