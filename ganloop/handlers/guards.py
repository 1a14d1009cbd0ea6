"""Handlers that stop or abort a run."""

from __future__ import annotations

import math

from ..console import GLConsole
from ..errors import NumericalDivergenceError
from ..loop.engine import Flow, Loop, LoopState
from ..loop.events import Event
from .base import LoopHandler


class FiniteLossGuard(LoopHandler):
    """Abort the run when a running loss stops being finite.

    Raises NumericalDivergenceError. Running averages never recover from a
    NaN, so checking every iteration is enough to catch the first one.
    """

    name = "finite_loss_guard"
    event = Event.ITERATION_COMPLETED

    def __call__(self, state: LoopState):
        for key, value in state.step_state.losses().items():
            if not math.isfinite(value):
                player = key.split('/', 1)[0]
                raise NumericalDivergenceError(player, value, state.iteration)


class EarlyStopping(LoopHandler):
    """Halt the run once ``max_iterations`` batches have been processed.

    Halting at ITERATION_COMPLETED only ends the epoch, so the handler also
    listens at EPOCH_STARTED and halts the run there.
    """

    name = "early_stopping"
    event = Event.ITERATION_COMPLETED

    def __init__(self, max_iterations: int):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        self.max_iterations = max_iterations

    def __call__(self, state: LoopState):
        if state.iteration >= self.max_iterations:
            return Flow.HALT
        return Flow.CONTINUE

    def _before_epoch(self, state: LoopState):
        if state.iteration >= self.max_iterations:
            GLConsole().print_notification(
                f"Stopping after {state.iteration} iterations (limit {self.max_iterations})"
            )
            return Flow.HALT
        return None

    def attach(self, loop: Loop) -> Loop:
        return (loop
                .handle(Event.ITERATION_COMPLETED, self)
                .handle(Event.EPOCH_STARTED, self._before_epoch))
