"""Error kinds raised by the structure models, traversals and scheduler.

Every error derives from :class:`VisualizerError` and from the builtin that
best describes it, so callers may catch either.
"""

from __future__ import annotations


class VisualizerError(Exception):
    """Base class for recoverable errors raised by :mod:`DS_Visualizer`."""


class DuplicateIdError(VisualizerError, ValueError):
    """A node with the requested identifier already exists."""


class NotFoundError(VisualizerError, LookupError):
    """A referenced node identifier is not present in the structure."""


class SelfLoopError(VisualizerError, ValueError):
    """An edge would connect a graph node to itself."""


class SelfConnectionError(VisualizerError, ValueError):
    """A tree node would become its own child."""


class CycleError(VisualizerError, ValueError):
    """A tree connection would make a node its own ancestor."""


class InvalidStartNodeError(VisualizerError, LookupError):
    """The traversal start node is missing from the structure."""


class AlreadyRunningError(VisualizerError, RuntimeError):
    """The scheduler was started while a run is in progress."""


class TraversalInProgressError(VisualizerError, RuntimeError):
    """A structure edit was attempted while a traversal is replaying."""


class StructureFormatError(VisualizerError, ValueError):
    """Serialized structure data is malformed or violates an invariant."""


__all__ = [
    "VisualizerError",
    "DuplicateIdError",
    "NotFoundError",
    "SelfLoopError",
    "SelfConnectionError",
    "CycleError",
    "InvalidStartNodeError",
    "AlreadyRunningError",
    "TraversalInProgressError",
    "StructureFormatError",
]
