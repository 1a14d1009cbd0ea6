"""Periodic generator sampling and sample renderers."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import numpy as np
import torch
from rich.columns import Columns
from torch import nn

from ..console import GLConsole, heatmap_text
from ..loop.engine import LoopState
from ..loop.events import Event, every as every_schedule
from ..models import Mode, predict
from .base import LoopHandler

SampleRenderer = Callable[[np.ndarray, LoopState], None]


class ConsoleHeatmapRenderer:
    """Print samples side by side as greyscale terminal heatmaps."""

    def __init__(self, vmin: float | None = -1.0, vmax: float | None = 1.0):
        self.vmin = vmin
        self.vmax = vmax

    def __call__(self, images: np.ndarray, state: LoopState):
        console = GLConsole()
        console.rule(f"Samples after epoch {state.epoch}")
        console.print(Columns(
            [heatmap_text(image, self.vmin, self.vmax) for image in images],
            padding=(0, 2),
        ))


class ImageGridRenderer:
    """Save samples as a single-row PNG grid, one file per call.

    Files are named ``samples_epoch_{epoch:03d}.png`` under ``output_dir``.
    """

    def __init__(self, output_dir: str | Path, cmap: str = 'gray', dpi: int = 100):
        self.output_dir = Path(output_dir)
        self.cmap = cmap
        self.dpi = dpi
        self.saved: list[Path] = []

    def __call__(self, images: np.ndarray, state: LoopState):
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt

        self.output_dir.mkdir(parents=True, exist_ok=True)
        n = len(images)
        fig, axes = plt.subplots(1, n, figsize=(1.5 * n, 1.5), squeeze=False)
        for ax, image in zip(axes[0], images):
            ax.imshow(image, cmap=self.cmap, vmin=-1.0, vmax=1.0)
            ax.axis('off')
        fig.suptitle(f"epoch {state.epoch}", fontsize=8)
        path = self.output_dir / f"samples_epoch_{state.epoch:03d}.png"
        fig.savefig(path, dpi=self.dpi, bbox_inches='tight')
        plt.close(fig)
        self.saved.append(path)


class GeneratorSampler(LoopHandler):
    """Draw samples from the current generator weights at epoch end.

    Noise is fresh each call (seeded from ``seed`` and the epoch when a seed
    is given); the generator runs in INFERENCE mode, so sampling never
    touches the training state. Each renderer receives a ``(N, H, W)``
    array.
    """

    name = "generator_sampler"
    event = Event.EPOCH_COMPLETED

    def __init__(
        self,
        generator: nn.Module,
        latent_dim: int,
        sample_count: int = 3,
        renderers: Sequence[SampleRenderer] | None = None,
        every: int = 1,
        seed: int | None = None,
    ):
        if sample_count < 1:
            raise ValueError(f"sample_count must be >= 1, got {sample_count}")
        self.generator = generator
        self.latent_dim = latent_dim
        self.sample_count = sample_count
        self.renderers = list(renderers) if renderers is not None else [ConsoleHeatmapRenderer()]
        self.trigger = every_schedule(every)
        self.seed = seed
        self.last_samples: np.ndarray | None = None

    def sample(self, state: LoopState) -> np.ndarray:
        model_state = state.step_state.generator.model_state
        device = next(iter(model_state.params.values())).device if model_state.params else None
        if self.seed is not None:
            rng = torch.Generator(device='cpu').manual_seed(self.seed + state.epoch)
            noise = torch.randn(self.sample_count, self.latent_dim, generator=rng)
        else:
            noise = torch.randn(self.sample_count, self.latent_dim)
        if device is not None:
            noise = noise.to(device)
        with torch.no_grad():
            images, _ = predict(self.generator, model_state, noise, Mode.INFERENCE)
        images = images.detach().cpu().numpy()
        return images.reshape(self.sample_count, *images.shape[-2:])

    def __call__(self, state: LoopState):
        images = self.sample(state)
        self.last_samples = images
        for renderer in self.renderers:
            renderer(images, state)

    def reset(self):
        self.last_samples = None
