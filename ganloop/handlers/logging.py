"""Periodic loss logging."""

from __future__ import annotations

from ..loop.engine import LoopState
from ..loop.events import Event, every as every_schedule
from ..sinks import ConsoleSink, MetricSink
from .base import LoopHandler


def loss_metrics(state: LoopState) -> dict[str, float | int]:
    """Metrics record for the current loop position and running losses."""
    metrics: dict[str, float | int] = {
        'epoch': state.epoch,
        'batch': state.epoch_iteration,
        'iteration': state.iteration,
    }
    metrics.update(state.step_state.losses())
    return metrics


class IterationLogger(LoopHandler):
    """Emit the running generator/discriminator losses every ``every`` iterations.

    Every attached sink receives the same record; with no sinks given a
    ConsoleSink is used, which prints ``Epoch: e, batch: i G: ... D: ...``.
    """

    name = "iteration_logger"
    event = Event.ITERATION_COMPLETED

    def __init__(self, every: int = 50, sinks: list[MetricSink] | None = None):
        self.every = every
        self.trigger = every_schedule(every)
        self.sinks = sinks if sinks is not None else [ConsoleSink()]

    def __call__(self, state: LoopState):
        metrics = loss_metrics(state)
        for sink in self.sinks:
            sink.emit(metrics, state.iteration, self.event)

    def flush(self):
        for sink in self.sinks:
            sink.flush()
