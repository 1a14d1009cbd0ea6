"""Functional GAN training on an event-driven loop engine.

Core pieces:
- state: RunningStat, ModelState, PlayerState, TrainState (immutable)
- optim / models / player: functional optimizers, functional forward
  passes and the per-player update protocol
- gan_step: the discriminator-then-generator state transition
- loop: Event, StepSchedule, Loop, LoopState and the run driver

Around them:
- handlers: logging, sampling, progress and guard observers
- sinks: console, CSV, JSONL and W&B metric outputs
- console: the Rich-based GLConsole
- registry / experiment_runner / cli: experiment wiring
"""

from .config import BaseConfig
from .errors import GANLoopError, ShapeMismatchError, NumericalDivergenceError
from .state import RunningStat, ModelState, PlayerState, TrainState
from .optim import Optimizer, sgd, adam, apply_updates
from .models import Mode, init_model_state, predict
from .player import value_and_grad, update_player
from .gan_step import (
    GANStep, FAKE_INDEX, REAL_INDEX, categorical_cross_entropy, make_labels,
)
from .data import BatchedTensorSource
from .loop import (
    Event, StepSchedule, every,
    Loop, LoopState, Flow, RunStatus,
    build_loop, register_handler, run,
)
from .registry import Registry, ExperimentRegistry
from .experiment_runner import ExperimentRunner

__all__ = [
    'BaseConfig',
    'GANLoopError', 'ShapeMismatchError', 'NumericalDivergenceError',
    'RunningStat', 'ModelState', 'PlayerState', 'TrainState',
    'Optimizer', 'sgd', 'adam', 'apply_updates',
    'Mode', 'init_model_state', 'predict',
    'value_and_grad', 'update_player',
    'GANStep', 'FAKE_INDEX', 'REAL_INDEX', 'categorical_cross_entropy', 'make_labels',
    'BatchedTensorSource',
    'Event', 'StepSchedule', 'every',
    'Loop', 'LoopState', 'Flow', 'RunStatus',
    'build_loop', 'register_handler', 'run',
    'Registry', 'ExperimentRegistry',
    'ExperimentRunner',
]
