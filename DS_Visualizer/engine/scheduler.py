"""Replay a precomputed traversal one step at a time.

The scheduler is cooperative: every step completes its state changes before
control returns to the event loop, and the next step is delivered from a
loop timer after ``tick_interval_ms``. Without a running ``asyncio`` loop
nothing is scheduled and the caller drives delivery with :meth:`advance`.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from ..config import Config
from ..errors import AlreadyRunningError
from .steps import STATE_RANK, StepAction, TraversalStep, VisitState

logger = logging.getLogger(__name__)

NodeStateListener = Callable[[str, VisitState], None]
FrontierListener = Callable[[Tuple[str, ...]], None]
CompleteListener = Callable[[Tuple[str, ...]], None]


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class StepScheduler:
    """Deliver :class:`TraversalStep` records in order at a fixed cadence.

    Parameters
    ----------
    tick_interval_ms:
        Default delay between deliveries; falls back to
        :attr:`Config.tick_interval_ms`.
    loop:
        Event loop used for timers. When omitted the running loop at
        :meth:`start` time is used, if any.
    """

    def __init__(
        self,
        tick_interval_ms: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.tick_interval_ms = tick_interval_ms
        self._loop = loop
        self._active_loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._done: asyncio.Future | None = None
        self._interval = 0.0

        self.state = SchedulerState.IDLE
        self.outcome: str | None = None
        self._steps: Tuple[TraversalStep, ...] = ()
        self._position = 0
        self._current: str | None = None
        self._node_states: Dict[str, VisitState] = {}
        self._frontier: Tuple[str, ...] = ()
        self._order: List[str] = []

        self._node_listeners: List[NodeStateListener] = []
        self._frontier_listeners: List[FrontierListener] = []
        self._complete_listeners: List[CompleteListener] = []
        self._state_listeners: List[Callable[[SchedulerState], None]] = []

    # ------------------------------------------------------------------
    # subscriptions
    def on_node_state(self, fn: NodeStateListener) -> Callable[[], None]:
        """Call ``fn(node_id, state)`` whenever a node's state changes."""
        return self._subscribe(self._node_listeners, fn)

    def on_frontier(self, fn: FrontierListener) -> Callable[[], None]:
        """Call ``fn(frontier)`` whenever the observed frontier changes."""
        return self._subscribe(self._frontier_listeners, fn)

    def on_complete(self, fn: CompleteListener) -> Callable[[], None]:
        """Call ``fn(order)`` when a run delivers its final step."""
        return self._subscribe(self._complete_listeners, fn)

    def on_state(self, fn: Callable[[SchedulerState], None]) -> Callable[[], None]:
        """Call ``fn(state)`` on every idle/running transition."""
        return self._subscribe(self._state_listeners, fn)

    @staticmethod
    def _subscribe(listeners: list, fn) -> Callable[[], None]:
        listeners.append(fn)

        def unsubscribe() -> None:
            if fn in listeners:
                listeners.remove(fn)

        return unsubscribe

    # ------------------------------------------------------------------
    # observed state
    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    @property
    def current(self) -> str | None:
        return self._current

    @property
    def frontier(self) -> Tuple[str, ...]:
        return self._frontier

    @property
    def order(self) -> Tuple[str, ...]:
        return tuple(self._order)

    @property
    def position(self) -> int:
        """Number of steps delivered in the current or last run."""
        return self._position

    @property
    def total(self) -> int:
        return len(self._steps)

    @property
    def node_states(self) -> Dict[str, VisitState]:
        return dict(self._node_states)

    def state_of(self, node_id: str) -> VisitState:
        return self._node_states.get(node_id, VisitState.UNVISITED)

    # ------------------------------------------------------------------
    # control
    def start(
        self,
        steps: Sequence[TraversalStep],
        tick_interval_ms: float | None = None,
        *,
        nodes: Iterable[str] | None = None,
    ) -> None:
        """Begin replaying ``steps``.

        ``nodes`` lists every node of the structure so all of them report
        ``unvisited`` at the start; it defaults to the nodes named by
        ``steps``. Step 0 is delivered before this method returns.
        """

        if self.is_running:
            raise AlreadyRunningError("a traversal is already running")

        steps = tuple(steps)
        if tick_interval_ms is None:
            tick_interval_ms = self.tick_interval_ms
        if tick_interval_ms is None:
            tick_interval_ms = Config.tick_interval_ms
        if tick_interval_ms < 0:
            raise ValueError("tick_interval_ms must not be negative")
        self._interval = tick_interval_ms / 1000.0

        self._active_loop = self._loop
        if self._active_loop is None:
            try:
                self._active_loop = asyncio.get_running_loop()
            except RuntimeError:
                self._active_loop = None  # manual mode
        self._done = (
            self._active_loop.create_future() if self._active_loop is not None else None
        )

        known = list(nodes) if nodes is not None else [s.node for s in steps]
        self._clear(known)
        self._steps = steps
        self.outcome = None
        self.state = SchedulerState.RUNNING
        logger.info(
            "traversal started: %d steps every %.0f ms", len(steps), tick_interval_ms
        )
        self._emit_state()

        if not steps:
            self._finish()
            return
        self.advance()

    def advance(self) -> bool:
        """Deliver the next step now; return ``False`` if nothing is running."""

        if not self.is_running:
            return False
        self._cancel_timer()
        step = self._steps[self._position]
        self._position += 1
        self._deliver(step)
        if not self.is_running:
            # a listener stopped the run
            return True
        if step.is_final or self._position >= len(self._steps):
            self._finish()
        elif self._active_loop is not None:
            self._handle = self._active_loop.call_later(self._interval, self._on_timer)
        return True

    def stop(self) -> None:
        """Cancel pending delivery and return to idle, keeping visit states."""

        if not self.is_running:
            return
        self._cancel_timer()
        self.state = SchedulerState.IDLE
        self.outcome = "cancelled"
        logger.info(
            "traversal stopped after %d of %d steps", self._position, len(self._steps)
        )
        self._resolve()
        self._emit_state()

    def reset(self) -> None:
        """Stop any run and clear visit states, frontier and order."""

        self.stop()
        self._clear(list(self._node_states))
        self._steps = ()
        self.outcome = None

    async def wait(self) -> str | None:
        """Wait until the current run completes or is stopped."""

        if not self.is_running:
            return self.outcome
        if self._done is None:
            self._done = asyncio.get_running_loop().create_future()
        return await asyncio.shield(self._done)

    # ------------------------------------------------------------------
    # internals
    def _on_timer(self) -> None:
        self._handle = None
        self.advance()

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _deliver(self, step: TraversalStep) -> None:
        if step.action is StepAction.VISIT:
            if self._current is not None and self._current != step.node:
                self._set_state(self._current, VisitState.VISITED)
            self._current = step.node
            self._set_state(step.node, VisitState.CURRENT, force=True)
            self._order.append(step.node)
        else:
            self._set_state(step.node, VisitState.VISITING)
        for node_id in step.frontier:
            self._set_state(node_id, VisitState.VISITING)
        if step.frontier != self._frontier:
            self._frontier = step.frontier
            for fn in list(self._frontier_listeners):
                fn(self._frontier)

    def _finish(self) -> None:
        if self._current is not None:
            self._set_state(self._current, VisitState.VISITED)
        self.state = SchedulerState.IDLE
        self.outcome = "completed"
        order = tuple(self._order)
        logger.info("traversal completed: %s", " ".join(order))
        self._resolve()
        self._emit_state()
        for fn in list(self._complete_listeners):
            fn(order)

    def _clear(self, node_ids: List[str]) -> None:
        previous = self._node_states
        self._node_states = {n: VisitState.UNVISITED for n in node_ids}
        self._position = 0
        self._current = None
        self._order = []
        for node_id, state in previous.items():
            if state is not VisitState.UNVISITED:
                for fn in list(self._node_listeners):
                    fn(node_id, VisitState.UNVISITED)
        if self._frontier:
            self._frontier = ()
            for fn in list(self._frontier_listeners):
                fn(self._frontier)

    def _set_state(self, node_id: str, state: VisitState, force: bool = False) -> None:
        old = self._node_states.get(node_id, VisitState.UNVISITED)
        if old is state:
            return
        if not force and STATE_RANK[state] < STATE_RANK[old]:
            return
        self._node_states[node_id] = state
        for fn in list(self._node_listeners):
            fn(node_id, state)

    def _resolve(self) -> None:
        if self._done is not None and not self._done.done():
            self._done.set_result(self.outcome)
        self._done = None

    def _emit_state(self) -> None:
        for fn in list(self._state_listeners):
            fn(self.state)
