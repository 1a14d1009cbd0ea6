"""Per-player update protocol shared by the generator and discriminator."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import torch

from .optim import Optimizer, apply_updates
from .state import PlayerState

Params = dict[str, torch.Tensor]
LossFn = Callable[[Params], tuple[torch.Tensor, Any]]


def value_and_grad(loss_fn: LossFn, params: Params) -> tuple[torch.Tensor, Params, Any]:
    """Evaluate ``loss_fn`` and its gradient with respect to ``params``.

    The parameters are detached into fresh leaf tensors before the call, so
    the graph never reaches back into the caller's tensors.

    Returns:
        ``(loss, grads, aux)`` where ``loss`` is detached, ``grads`` maps every
        parameter name to a gradient tensor (zeros for parameters the loss
        does not depend on) and ``aux`` is whatever ``loss_fn`` returned
        alongside the loss.
    """
    leaves = {name: p.detach().requires_grad_(True) for name, p in params.items()}
    loss, aux = loss_fn(leaves)
    if not leaves:
        return loss.detach(), {}, aux

    names = list(leaves)
    raw = torch.autograd.grad(
        loss, [leaves[n] for n in names], allow_unused=True,
    )
    grads = {
        name: g.detach() if g is not None else torch.zeros_like(leaves[name])
        for name, g in zip(names, raw)
    }
    return loss.detach(), grads, aux


def update_player(
    player: PlayerState,
    loss_fn: LossFn,
    optimizer: Optimizer,
    iteration: int,
) -> PlayerState:
    """One optimization step for a single player.

    ``loss_fn`` closes over the batch and the other player's frozen weights
    and returns ``(loss, buffers)``; ``buffers`` replaces the player's
    buffers when it is not None. The running loss is folded in at
    ``iteration``.
    """
    model_state = player.model_state
    loss, grads, new_buffers = value_and_grad(loss_fn, model_state.params)
    updates, optimizer_state = optimizer.update(grads, player.optimizer_state, model_state.params)
    params = apply_updates(model_state.params, updates)

    new_model_state = replace(
        model_state,
        params=params,
        buffers=new_buffers if new_buffers is not None else model_state.buffers,
    )
    return PlayerState(
        model_state=new_model_state,
        optimizer_state=optimizer_state,
        loss=player.loss.update(float(loss), iteration),
    )
