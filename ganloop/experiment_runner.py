"""Experiment runner base class.

An experiment supplies the building blocks (networks, real-image batches,
optimizers) and ExperimentRunner assembles them into a GANStep, a Loop and
its handlers, runs it and writes the run's config and summary to
``{output_dir}/{experiment_name}/``.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from pathlib import Path
from typing import Any

import torch
import torch.nn as nn

from .config import BaseConfig
from .console import GLConsole, player_label
from .gan_step import GANStep
from .handlers import (
    LoopHandler, IterationLogger, GeneratorSampler, ProgressHandler,
    FiniteLossGuard, ConsoleHeatmapRenderer,
)
from .loop import LoopState, build_loop
from .optim import Optimizer
from .sinks import ConsoleSink, MetricSink
from .utils import set_seeds, set_determinism, get_environment_info, format_human_readable, _json_default

CONFIG_FILE = 'experiment_config.json'
SUMMARY_FILE = 'summary.json'


def pick_device(preferred: str | None = None) -> torch.device:
    """``preferred`` when given, else the first available of CUDA, MPS, CPU."""
    if preferred is not None:
        return torch.device(preferred)
    if torch.cuda.is_available():
        return torch.device('cuda')
    mps = getattr(torch.backends, 'mps', None)
    if mps is not None and mps.is_available():
        return torch.device('mps')
    return torch.device('cpu')


class ExperimentRunner(ABC):
    """Base class for GAN experiments.

    Subclasses implement ``build_config``, ``create_models``,
    ``create_data``, ``create_optimizers`` and ``latent_dim``. The
    remaining hooks (handlers, renderers, display) have working defaults.
    """

    config_class = BaseConfig
    name: str = "experiment"

    def __init__(self, config: BaseConfig, sinks: list[MetricSink] | None = None):
        self.config = config
        self.console = GLConsole()
        self.device = pick_device(getattr(config, 'device', None))
        self.sinks = sinks if sinks is not None else [ConsoleSink()]

    @property
    def run_name(self) -> str:
        return self.config.experiment_name or self.name

    # === CLI / factory ===

    @classmethod
    def add_args(cls, parser):
        """Register experiment-specific CLI flags."""
        pass

    @classmethod
    def build_config(cls, args) -> BaseConfig:
        raise NotImplementedError(f"{cls.__name__} does not implement build_config()")

    @classmethod
    def build_runner(cls, config, args=None, sinks: list[MetricSink] | None = None):
        return cls(config=config, sinks=sinks)

    # === Building blocks ===

    @abstractmethod
    def create_models(self) -> tuple[nn.Module, nn.Module]:
        """``(generator, discriminator)``, already on ``self.device``."""
        ...

    @abstractmethod
    def create_data(self) -> Any:
        """Restartable iterable of real-image batches."""
        ...

    @abstractmethod
    def create_optimizers(self) -> tuple[Optimizer, Optimizer]:
        """``(generator_optimizer, discriminator_optimizer)``."""
        ...

    @property
    @abstractmethod
    def latent_dim(self) -> int:
        ...

    def get_epochs(self) -> int:
        return getattr(self.config, 'epochs', 1)

    def build_step(self, generator: nn.Module, discriminator: nn.Module) -> GANStep:
        g_opt, d_opt = self.create_optimizers()
        return GANStep(
            generator, discriminator, g_opt, d_opt,
            latent_dim=self.latent_dim,
            seed=self.config.seed,
            device=self.device,
        )

    def build_handlers(self, generator: nn.Module, experiment_dir: Path) -> list[LoopHandler]:
        """Progress bar, divergence guard, loss lines and epoch-end samples."""
        sampler = GeneratorSampler(
            generator, self.latent_dim,
            sample_count=getattr(self.config, 'sample_count', 3),
            renderers=self.create_renderers(experiment_dir),
            every=self.config.sample_every,
            seed=self.config.seed,
        )
        return [
            ProgressHandler(label=self.run_name),
            FiniteLossGuard(),
            IterationLogger(every=self.config.log_every, sinks=self.sinks),
            sampler,
        ]

    def create_renderers(self, experiment_dir: Path) -> list:
        """Renderers that receive the generator samples."""
        return [ConsoleHeatmapRenderer()]

    # === Display ===

    def display_banner(self):
        self.console.section(self.run_name)

    def display_models(self, state):
        for player in ('generator', 'discriminator'):
            n = getattr(state, player).model_state.num_parameters()
            self.console.print(
                f"{player_label(player, player.capitalize())} [label]parameters:[/label] "
                f"[metric.value]{format_human_readable(n)}[/metric.value]"
            )

    def display_final(self, final: LoopState):
        losses = final.step_state.losses()
        self.console.print_complete(
            f"Run {final.status.value} after {final.iteration} iterations "
            f"(G: {losses['generator/loss']:.5f}, D: {losses['discriminator/loss']:.5f})"
        )

    # === Run ===

    def run(self) -> LoopState:
        """Assemble the loop, run it and record the outcome."""
        set_seeds(self.config.seed)
        set_determinism(not self.config.no_determinism)

        self.display_banner()
        experiment_dir = self.prepare_output_dir()
        self._write_json(experiment_dir / CONFIG_FILE,
                         {**asdict(self.config), 'environment': get_environment_info()})

        data = self.create_data()
        generator, discriminator = self.create_models()
        step = self.build_step(generator, discriminator)
        initial = step.init_state()
        self.display_models(initial)

        loop = build_loop(step, lambda: initial)
        for handler in self.build_handlers(generator, experiment_dir):
            handler.attach(loop)
        for sink in self.sinks:
            sink.set_run_context(run=self.run_name)

        try:
            final = loop.run(data, self.get_epochs())
        finally:
            self.console.progress_stop()
            for sink in self.sinks:
                sink.flush()

        summary_path = self._write_json(experiment_dir / SUMMARY_FILE, self.build_summary(final))
        self.console.print(f"[label]Summary:[/label] [path]{summary_path}[/path]")
        self.display_final(final)
        return final

    def build_summary(self, final: LoopState) -> dict:
        return {
            'status': final.status.value,
            'epochs_run': self._epochs_run(final),
            'iterations': final.iteration,
            **final.step_state.losses(),
        }

    @staticmethod
    def _epochs_run(final: LoopState) -> int:
        # A halt at EPOCH_STARTED leaves `epoch` on an epoch that never stepped.
        if not final.iteration:
            return 0
        return final.epoch + (1 if final.epoch_iteration else 0)

    # === Output ===

    def prepare_output_dir(self) -> Path:
        """Create ``{output_dir}/{run_name}``; warn when it holds a finished run."""
        experiment_dir = Path(self.config.output_dir) / self.run_name
        experiment_dir.mkdir(parents=True, exist_ok=True)
        if (experiment_dir / SUMMARY_FILE).exists():
            self.console.print_warning(f"{experiment_dir} holds a finished run; its files will be overwritten.")
        return experiment_dir

    @staticmethod
    def _write_json(path: Path, payload: dict) -> Path:
        path.write_text(json.dumps(payload, indent=2, default=_json_default))
        return path
