"""Progress bar across a run."""

from __future__ import annotations

from ..console import GLConsole, player_label
from ..loop.engine import Loop, LoopState
from ..loop.events import Event
from .base import LoopHandler

TASK_TRAINING = "training"


class ProgressHandler(LoopHandler):
    """Drive a console progress bar from loop events.

    The total is ``epochs * batches_per_epoch`` when the data source has a
    length, otherwise the bar is indeterminate. The description shows the
    current epoch and running losses.
    """

    name = "progress"
    event = Event.ITERATION_COMPLETED

    def __init__(self, label: str = "training"):
        self.label = label

    def _start(self, state: LoopState):
        batches = state.metadata.get('batches_per_epoch')
        total = state.metadata['epochs'] * batches if batches is not None else None
        GLConsole().create_progress_task(
            TASK_TRAINING,
            f"[experiment]{self.label}[/experiment]",
            total=total,
        )

    def __call__(self, state: LoopState):
        losses = state.step_state.losses()
        g_loss = losses.get('generator/loss', float('nan'))
        d_loss = losses.get('discriminator/loss', float('nan'))
        desc = (f"[experiment]{self.label}[/experiment] "
                f"[label]epoch {state.epoch}[/label] "
                f"{player_label('generator', 'G')}[metric.value]={g_loss:.4f}[/metric.value] "
                f"{player_label('discriminator', 'D')}[metric.value]={d_loss:.4f}[/metric.value]")
        GLConsole().update_progress_task(TASK_TRAINING, description=desc, advance=1)

    def _end(self, state: LoopState):
        GLConsole().progress_stop()

    def attach(self, loop: Loop) -> Loop:
        return (loop
                .handle(Event.STARTED, self._start)
                .handle(Event.ITERATION_COMPLETED, self)
                .handle(Event.COMPLETED, self._end))
