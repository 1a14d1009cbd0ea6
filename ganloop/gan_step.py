"""The GAN state transition: one discriminator update then one generator update.

Label convention: column ``FAKE_INDEX`` (0) scores "fake", column
``REAL_INDEX`` (1) scores "real". The discriminator is trained to put fakes
in column 0 and real images in column 1; the generator is trained to make
the discriminator put its fakes in column 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import torch
import torch.nn.functional as F
from torch import nn

from .errors import ShapeMismatchError
from .models import Mode, init_model_state, predict
from .optim import Optimizer
from .player import LossFn, update_player
from .state import ModelState, PlayerState, TrainState

FAKE_INDEX = 0
REAL_INDEX = 1

NoiseFn = Callable[[int, int], torch.Tensor]


def categorical_cross_entropy(logits: torch.Tensor, targets: torch.Tensor) -> torch.Tensor:
    """Mean cross-entropy between logits and one-hot (or soft) targets."""
    return F.cross_entropy(logits, targets.to(logits.dtype), reduction='mean')


def make_labels(batch_size: int, device: torch.device | str | None = None) -> tuple[torch.Tensor, torch.Tensor]:
    """Build ``(fake_labels, real_labels)``, each a ``(batch_size, 2)`` one-hot batch."""
    fake = torch.zeros(batch_size, 2, device=device)
    fake[:, FAKE_INDEX] = 1.0
    real = torch.zeros(batch_size, 2, device=device)
    real[:, REAL_INDEX] = 1.0
    return fake, real


def _noise_seed(seed: int, iteration: int) -> int:
    return (seed * 1_000_003 + iteration) % (2 ** 63)


def _check_shapes(fake: torch.Tensor, real: torch.Tensor) -> None:
    if fake.shape[1:] != real.shape[1:]:
        raise ShapeMismatchError(
            f"generator output per-sample shape {tuple(fake.shape[1:])} "
            f"does not match real batch per-sample shape {tuple(real.shape[1:])}"
        )
    if fake.shape[0] != real.shape[0]:
        raise ShapeMismatchError(
            f"generator produced {fake.shape[0]} samples for a batch of {real.shape[0]}"
        )


@dataclass
class GANStep:
    """Callable ``step(state, real_batch) -> TrainState`` for a two-player GAN.

    The modules are graph definitions only; all weights travel in the
    TrainState. Noise is drawn from a generator seeded by ``(seed,
    iteration)`` unless ``noise_fn(batch_size, iteration)`` is supplied, so
    identical inputs always produce an identical output state.

    Ordering within a step:
      1. The discriminator is updated against fakes from the generator's
         current, frozen weights.
      2. The generator is updated against the discriminator's post-update,
         frozen weights, on the same noise batch.
    """
    generator: nn.Module
    discriminator: nn.Module
    g_optimizer: Optimizer
    d_optimizer: Optimizer
    latent_dim: int
    loss_fn: Callable[[torch.Tensor, torch.Tensor], torch.Tensor] = categorical_cross_entropy
    noise_fn: NoiseFn | None = None
    seed: int = 0
    device: torch.device | str | None = None

    def init_state(self) -> TrainState:
        """Initial TrainState built from the modules' current weights."""
        g_model = init_model_state(self.generator, self.device)
        d_model = init_model_state(self.discriminator, self.device)
        return TrainState(
            iteration=0,
            discriminator=PlayerState(d_model, self.d_optimizer.init(d_model.params)),
            generator=PlayerState(g_model, self.g_optimizer.init(g_model.params)),
        )

    def sample_noise(self, batch_size: int, iteration: int) -> torch.Tensor:
        if self.noise_fn is not None:
            noise = self.noise_fn(batch_size, iteration)
        else:
            rng = torch.Generator(device='cpu').manual_seed(_noise_seed(self.seed, iteration))
            noise = torch.randn(batch_size, self.latent_dim, generator=rng)
        return noise.to(self.device) if self.device is not None else noise

    def discriminator_loss_fn(
        self,
        g_model: ModelState,
        d_buffers: dict[str, torch.Tensor],
        noise: torch.Tensor,
        real: torch.Tensor,
        fake_labels: torch.Tensor,
        real_labels: torch.Tensor,
    ) -> LossFn:
        """Loss of the discriminator as a function of its own parameters."""
        def loss(d_params):
            with torch.no_grad():
                fake, _ = predict(self.generator, g_model, noise, Mode.TRAIN)
            _check_shapes(fake, real)
            d_model = ModelState(params=d_params, buffers=d_buffers)
            logits, buffers = predict(
                self.discriminator, d_model, torch.cat([fake, real]), Mode.TRAIN,
            )
            return self.loss_fn(logits, torch.cat([fake_labels, real_labels])), buffers
        return loss

    def generator_loss_fn(
        self,
        g_buffers: dict[str, torch.Tensor],
        d_model: ModelState,
        noise: torch.Tensor,
        real_labels: torch.Tensor,
    ) -> LossFn:
        """Loss of the generator as a function of its own parameters.

        ``d_model`` is held fixed; gradients flow through the discriminator
        only to reach the generator's parameters.
        """
        def loss(g_params):
            g_model = ModelState(params=g_params, buffers=g_buffers)
            fake, buffers = predict(self.generator, g_model, noise, Mode.TRAIN)
            frozen = ModelState(
                params={k: v.detach() for k, v in d_model.params.items()},
                buffers=d_model.buffers,
            )
            logits, _ = predict(self.discriminator, frozen, fake, Mode.INFERENCE)
            return self.loss_fn(logits, real_labels), buffers
        return loss

    def __call__(self, state: TrainState, real_batch: torch.Tensor) -> TrainState:
        if self.device is not None:
            real_batch = real_batch.to(self.device)
        batch_size = real_batch.shape[0]
        noise = self.sample_noise(batch_size, state.iteration)
        fake_labels, real_labels = make_labels(batch_size, real_batch.device)

        discriminator = update_player(
            state.discriminator,
            self.discriminator_loss_fn(
                state.generator.model_state,
                state.discriminator.model_state.buffers,
                noise, real_batch, fake_labels, real_labels,
            ),
            self.d_optimizer,
            state.iteration,
        )

        generator = update_player(
            state.generator,
            self.generator_loss_fn(
                state.generator.model_state.buffers,
                discriminator.model_state,
                noise, real_labels,
            ),
            self.g_optimizer,
            state.iteration,
        )

        return TrainState(
            iteration=state.iteration + 1,
            discriminator=discriminator,
            generator=generator,
        )
