"""Immutable training state records.

Every record here is a frozen dataclass. Transitions never write into a
value they received: they build a new record (``dataclasses.replace``) with
fresh tensor dicts, so a state handed to an observer stays valid for as
long as the observer holds it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import torch


@dataclass(frozen=True)
class RunningStat:
    """Incrementally averaged scalar.

    The divisor basis is the externally supplied ``index`` (the loop
    iteration), not ``count``. Passing ``index=0`` resets the average to
    the observation.
    """
    value: float = 0.0
    count: int = 0

    def update(self, observation: float, index: int) -> RunningStat:
        value = (self.value * index + observation) / (index + 1)
        return RunningStat(value=value, count=index + 1)


@dataclass(frozen=True)
class ModelState:
    """Parameter and buffer tensors for one model, keyed by module path."""
    params: dict[str, torch.Tensor] = field(default_factory=dict)
    buffers: dict[str, torch.Tensor] = field(default_factory=dict)

    def as_dict(self) -> dict[str, torch.Tensor]:
        """Merged mapping suitable for ``torch.func.functional_call``."""
        return {**self.params, **self.buffers}

    def num_parameters(self) -> int:
        return sum(p.numel() for p in self.params.values())


@dataclass(frozen=True)
class PlayerState:
    """One adversarial player: its weights, optimizer state and loss average.

    ``optimizer_state`` is opaque here; its shape is decided by whichever
    optimizer built it.
    """
    model_state: ModelState
    optimizer_state: Any
    loss: RunningStat = field(default_factory=RunningStat)


@dataclass(frozen=True)
class TrainState:
    """Step state threaded through the loop for a GAN run."""
    iteration: int
    discriminator: PlayerState
    generator: PlayerState

    def losses(self) -> dict[str, float]:
        return {
            'generator/loss': self.generator.loss.value,
            'discriminator/loss': self.discriminator.loss.value,
        }
