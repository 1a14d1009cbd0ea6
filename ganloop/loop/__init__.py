"""Event-driven loop engine: events, schedules and the run driver."""

from .events import Event, StepSchedule, Trigger, every, EPOCH_EVENTS
from .engine import (
    Loop, LoopState, Flow, RunStatus,
    build_loop, register_handler, run,
)

__all__ = [
    "Event", "StepSchedule", "Trigger", "every", "EPOCH_EVENTS",
    "Loop", "LoopState", "Flow", "RunStatus",
    "build_loop", "register_handler", "run",
]
