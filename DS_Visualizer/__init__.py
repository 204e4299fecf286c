"""DS_Visualizer package initialization."""

from __future__ import annotations

from .config import Config, configure_logging, load_config
from .engine import StepScheduler, Traversal, TraversalStep, VisitState, compute_traversal
from .graph import GraphModel, StructureLibrary, TreeModel
from .session import GraphSession, TreeSession

__all__ = [
    "Config",
    "configure_logging",
    "load_config",
    "GraphModel",
    "TreeModel",
    "StructureLibrary",
    "StepScheduler",
    "Traversal",
    "TraversalStep",
    "VisitState",
    "compute_traversal",
    "GraphSession",
    "TreeSession",
]
