"""Functional execution of ``torch.nn.Module`` graphs.

Modules are treated as pure graph definitions: their weights live in a
:class:`~ganloop.state.ModelState` and are substituted at call time with
``torch.func.functional_call``. The module's own parameters are only read
once, by :func:`init_model_state`.
"""

from __future__ import annotations

from enum import Enum

import torch
from torch import nn

from .state import ModelState


class Mode(Enum):
    """Execution mode for a forward pass.

    TRAIN uses batch statistics and updates running statistics (on copies).
    INFERENCE uses the stored running statistics and leaves buffers untouched.
    """
    TRAIN = "train"
    INFERENCE = "inference"


def init_model_state(module: nn.Module, device: torch.device | str | None = None) -> ModelState:
    """Snapshot a module's parameters and buffers as detached copies."""
    params = {
        name: p.detach().clone().to(device) if device is not None else p.detach().clone()
        for name, p in module.named_parameters()
    }
    buffers = {
        name: b.detach().clone().to(device) if device is not None else b.detach().clone()
        for name, b in module.named_buffers()
    }
    return ModelState(params=params, buffers=buffers)


def predict(
    module: nn.Module,
    model_state: ModelState,
    inputs: torch.Tensor,
    mode: Mode,
) -> tuple[torch.Tensor, dict[str, torch.Tensor]]:
    """Run ``module`` on ``inputs`` with the weights held in ``model_state``.

    Args:
        module: Graph definition. Its train/eval flag is set from ``mode``
            for this call and restored afterwards.
        model_state: Parameters and buffers to run with. The parameter
            tensors may require grad; gradients flow back to them.
        inputs: Batch of inputs.
        mode: TRAIN or INFERENCE.

    Returns:
        ``(outputs, buffers)``. In TRAIN mode ``buffers`` is a fresh dict of
        updated running statistics and ``model_state.buffers`` is left as it
        was. In INFERENCE mode it is ``model_state.buffers`` itself.
    """
    if mode is Mode.TRAIN:
        buffers = {name: b.clone() for name, b in model_state.buffers.items()}
    else:
        buffers = model_state.buffers

    was_training = module.training
    module.train(mode is Mode.TRAIN)
    try:
        outputs = torch.func.functional_call(
            module, {**model_state.params, **buffers}, (inputs,),
        )
    finally:
        module.train(was_training)
    return outputs, buffers
