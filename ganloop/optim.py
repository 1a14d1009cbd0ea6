"""Functional optimizers over named parameter dicts.

An optimizer here is a pair of pure functions instead of a stateful
``torch.optim.Optimizer``: ``init(params)`` builds the optimizer state and
``update(grads, state, params)`` returns ``(updates, new_state)``. The
caller applies the updates with :func:`apply_updates`. Nothing is modified
in place, which lets the optimizer state live inside an immutable
:class:`~ganloop.state.PlayerState`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple

import torch

Params = dict[str, torch.Tensor]


class Optimizer(NamedTuple):
    """``(init, update)`` pair describing a gradient transformation."""
    init: Callable[[Params], object]
    update: Callable[[Params, object, Params], tuple[Params, object]]


@dataclass(frozen=True)
class SGDState:
    count: int = 0


@dataclass(frozen=True)
class AdamState:
    """First/second moment estimates plus the step counter used for bias correction."""
    count: int
    mu: Params
    nu: Params


def sgd(lr: float) -> Optimizer:
    """Plain gradient descent: ``update = -lr * grad``."""
    if lr <= 0:
        raise ValueError(f"lr must be positive, got {lr}")

    def init(params: Params) -> SGDState:
        return SGDState()

    def update(grads: Params, state: SGDState, params: Params | None = None):
        updates = {name: -lr * g for name, g in grads.items()}
        return updates, SGDState(count=state.count + 1)

    return Optimizer(init, update)


def adam(lr: float = 1e-3, b1: float = 0.9, b2: float = 0.999, eps: float = 1e-8) -> Optimizer:
    """Adam with bias correction.

    Update rule, per parameter:
        m = b1*m + (1-b1)*g
        v = b2*v + (1-b2)*g^2
        update = -lr * (m / (1-b1^t)) / (sqrt(v / (1-b2^t)) + eps)
    """
    if lr <= 0:
        raise ValueError(f"lr must be positive, got {lr}")
    if not (0.0 <= b1 < 1.0 and 0.0 <= b2 < 1.0):
        raise ValueError(f"betas must be in [0, 1), got b1={b1}, b2={b2}")

    def init(params: Params) -> AdamState:
        return AdamState(
            count=0,
            mu={name: torch.zeros_like(p) for name, p in params.items()},
            nu={name: torch.zeros_like(p) for name, p in params.items()},
        )

    def update(grads: Params, state: AdamState, params: Params | None = None):
        count = state.count + 1
        mu = {name: b1 * state.mu[name] + (1 - b1) * g for name, g in grads.items()}
        nu = {name: b2 * state.nu[name] + (1 - b2) * g * g for name, g in grads.items()}
        mu_correction = 1 - b1 ** count
        nu_correction = 1 - b2 ** count
        updates = {
            name: -lr * (mu[name] / mu_correction) / ((nu[name] / nu_correction).sqrt() + eps)
            for name in grads
        }
        return updates, AdamState(count=count, mu=mu, nu=nu)

    return Optimizer(init, update)


def apply_updates(params: Params, updates: Params) -> Params:
    """Element-wise ``params + updates``, returning new tensors."""
    return {name: p + updates[name] if name in updates else p for name, p in params.items()}
