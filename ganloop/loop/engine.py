"""Generic event-driven training loop.

The engine knows nothing about GANs: it owns an ``init_fn`` producing the
initial step state, a ``step_fn(step_state, batch)`` producing the next one,
and a registry of handlers keyed by :class:`Event`. ``run`` walks epochs and
batches, threads a :class:`LoopState` through every step and handler, and
returns the final LoopState.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Iterable

from .events import ALWAYS, EPOCH_EVENTS, Event, Trigger


class Flow(Enum):
    """Signal returned by a handler."""
    CONTINUE = "continue"
    HALT = "halt"


class RunStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    HALTED = "halted"


@dataclass(frozen=True)
class LoopState:
    """Run context handed to every handler.

    ``epoch`` is the 0-based index of the current epoch, ``iteration``
    counts batches processed since the run started and ``epoch_iteration``
    counts batches processed in the current epoch. ``step_state`` is
    whatever ``step_fn`` returns. ``metadata`` carries run-level facts
    (total epochs, batches per epoch when known).
    """
    epoch: int = 0
    iteration: int = 0
    epoch_iteration: int = 0
    step_state: Any = None
    status: RunStatus = RunStatus.NOT_STARTED
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def halted(self) -> bool:
        return self.status is RunStatus.HALTED


Handler = Callable[[LoopState], Any]


@dataclass(frozen=True)
class _Registration:
    trigger: Trigger
    callback: Handler


def _counter(event: Event, state: LoopState) -> int:
    # Epoch events count epochs from 1; STARTED and COMPLETED happen once.
    if event in EPOCH_EVENTS:
        return state.epoch + 1
    if event is Event.ITERATION_COMPLETED:
        return state.iteration
    return 1


def _normalize(result: Any, state: LoopState) -> tuple[Flow, LoopState]:
    if result is None:
        return Flow.CONTINUE, state
    if isinstance(result, Flow):
        return result, state
    if isinstance(result, tuple) and len(result) == 2 and isinstance(result[0], Flow):
        flow, new_state = result
        if not isinstance(new_state, LoopState):
            raise TypeError(
                f"Handler returned {type(new_state).__name__} alongside {flow}, expected LoopState"
            )
        return flow, new_state
    raise TypeError(
        f"Handler must return None, a Flow, or (Flow, LoopState); got {type(result).__name__}"
    )


class Loop:
    """A step function plus the handlers observing it.

    Build one with :func:`build_loop`, attach handlers with
    :meth:`handle` (chainable) and execute it with :meth:`run`.
    """

    def __init__(self, step_fn: Callable[[Any, Any], Any], init_fn: Callable[[], Any]):
        self.step_fn = step_fn
        self.init_fn = init_fn
        self._handlers: dict[Event, list[_Registration]] = {event: [] for event in Event}

    def handle(self, event: Event, callback: Handler, trigger: Trigger | None = None) -> Loop:
        """Append ``callback`` to ``event``'s handlers.

        Handlers for one event fire in registration order. ``trigger`` is a
        StepSchedule or a predicate over the event's counter; it defaults to
        firing every time.
        """
        if not isinstance(event, Event):
            raise TypeError(f"event must be an Event, got {event!r}")
        if not callable(callback):
            raise TypeError(f"callback for {event.name} is not callable")
        self._handlers[event].append(_Registration(trigger or ALWAYS, callback))
        return self

    def handlers(self, event: Event) -> list[Handler]:
        return [reg.callback for reg in self._handlers[event]]

    def _fire(self, event: Event, state: LoopState) -> tuple[Flow, LoopState]:
        counter = _counter(event, state)
        for reg in self._handlers[event]:
            if not reg.trigger(counter):
                continue
            flow, state = _normalize(reg.callback(state), state)
            if flow is Flow.HALT:
                return Flow.HALT, state
        return Flow.CONTINUE, state

    def run(self, data: Iterable, epochs: int) -> LoopState:
        """Execute the full run.

        ``data`` must be restartable: it is iterated afresh every epoch.

        Returns:
            The final LoopState. ``status`` is COMPLETED, or HALTED when a
            handler halted outside ITERATION_COMPLETED, in which case the
            state is the one at the point of halt.
        """
        if epochs < 0:
            raise ValueError(f"epochs must be >= 0, got {epochs}")
        if epochs > 1 and iter(data) is data:
            raise TypeError(
                "data source is a one-shot iterator; pass a re-iterable source for multi-epoch runs"
            )

        metadata: dict[str, Any] = {'epochs': epochs}
        if hasattr(data, '__len__'):
            metadata['batches_per_epoch'] = len(data)

        state = LoopState(
            epoch=0,
            iteration=0,
            step_state=self.init_fn(),
            status=RunStatus.RUNNING,
            metadata=metadata,
        )

        flow, state = self._fire(Event.STARTED, state)
        if flow is Flow.HALT:
            return replace(state, status=RunStatus.HALTED)

        for epoch in range(epochs):
            state = replace(state, epoch=epoch, epoch_iteration=0)
            flow, state = self._fire(Event.EPOCH_STARTED, state)
            if flow is Flow.HALT:
                return replace(state, status=RunStatus.HALTED)

            for batch in data:
                state = replace(
                    state,
                    step_state=self.step_fn(state.step_state, batch),
                    iteration=state.iteration + 1,
                    epoch_iteration=state.epoch_iteration + 1,
                )
                flow, state = self._fire(Event.ITERATION_COMPLETED, state)
                if flow is Flow.HALT:
                    break

            flow, state = self._fire(Event.EPOCH_COMPLETED, state)
            if flow is Flow.HALT:
                return replace(state, status=RunStatus.HALTED)

        flow, state = self._fire(Event.COMPLETED, state)
        if flow is Flow.HALT:
            return replace(state, status=RunStatus.HALTED)
        return replace(state, status=RunStatus.COMPLETED)


def build_loop(step_fn: Callable[[Any, Any], Any], init_fn: Callable[[], Any]) -> Loop:
    """Create a Loop with an empty handler registry."""
    return Loop(step_fn, init_fn)


def register_handler(loop: Loop, event: Event, callback: Handler, trigger: Trigger | None = None) -> Loop:
    return loop.handle(event, callback, trigger)


def run(loop: Loop, data: Iterable, epochs: int) -> LoopState:
    return loop.run(data, epochs)
