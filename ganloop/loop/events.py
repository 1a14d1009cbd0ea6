"""Loop lifecycle events and firing schedules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Union


class Event(Enum):
    """Lifecycle points where handlers can fire during a run."""
    STARTED = auto()
    EPOCH_STARTED = auto()
    ITERATION_COMPLETED = auto()
    EPOCH_COMPLETED = auto()
    COMPLETED = auto()


EPOCH_EVENTS = frozenset({Event.EPOCH_STARTED, Event.EPOCH_COMPLETED})


@dataclass(frozen=True)
class StepSchedule:
    """Firing schedule over a counter (iteration or epoch number).

    Modes:
        - continual: fire every time (default).
        - stride: fire when ``counter % stride == 0``.
        - burst: fire ``burst_length`` consecutive counts every ``stride``
          counts.

    The optional ``warmup`` skips all counts below it, regardless of mode.
    """

    mode: str = 'continual'
    stride: int = 1
    burst_length: int = 1
    warmup: int = 0

    def __post_init__(self):
        if self.mode not in ('continual', 'stride', 'burst'):
            raise ValueError(f"Unknown schedule mode '{self.mode}'")
        if self.stride < 1:
            raise ValueError(f"stride must be >= 1, got {self.stride}")
        if self.mode == 'burst' and not 1 <= self.burst_length <= self.stride:
            raise ValueError(
                f"burst_length must be in [1, stride], got {self.burst_length}"
            )

    def is_active(self, counter: int) -> bool:
        """Whether a handler on this schedule fires at ``counter``."""
        if counter < self.warmup:
            return False
        if self.mode == 'continual':
            return True
        if self.mode == 'stride':
            return counter % self.stride == 0
        # burst
        return counter % self.stride < self.burst_length

    __call__ = is_active


Trigger = Union[StepSchedule, Callable[[int], bool]]

ALWAYS = StepSchedule()


def every(n: int) -> StepSchedule:
    """Fire at counts ``n, 2n, 3n, ...``."""
    if n < 1:
        raise ValueError(f"every() needs n >= 1, got {n}")
    return StepSchedule(mode='stride', stride=n, warmup=1)
