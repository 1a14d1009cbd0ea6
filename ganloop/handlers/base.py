"""LoopHandler abstract base class.

Handlers are observer objects that carry their own configuration (which
event they listen to, how often they fire) and attach themselves to a
:class:`~ganloop.loop.Loop`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..loop.engine import Loop, LoopState
from ..loop.events import Event, Trigger


class LoopHandler(ABC):
    """Base class for loop observers.

    Subclasses set ``name`` and ``event`` and implement ``__call__``.
    ``trigger`` is None to fire on every occurrence of ``event``.
    Handlers that listen to more than one event override ``attach``.
    """

    name: str = "base_handler"
    event: Event = Event.ITERATION_COMPLETED
    trigger: Trigger | None = None

    @abstractmethod
    def __call__(self, state: LoopState) -> Any:
        """Observe ``state``; return None, a Flow, or ``(Flow, LoopState)``."""
        ...

    def attach(self, loop: Loop) -> Loop:
        return loop.handle(self.event, self, self.trigger)

    def reset(self):
        """Reset internal state for a fresh run."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(event={self.event.name})"
