"""Shared fixtures for ganloop unit tests."""

import pytest
import torch
import torch.nn as nn

from ganloop.gan_step import GANStep
from ganloop.optim import sgd


# ---- Console singleton: force NULL mode before any test touches it ----

@pytest.fixture(autouse=True, scope="session")
def _silence_console():
    """Initialize GLConsole in NULL mode to suppress all output during tests.

    Session-scoped so the singleton is set once and stays NULL for the
    entire run. Tests that exercise other modes re-initialize the console
    and restore NULL mode afterwards.
    """
    from ganloop.console.config import ConsoleConfig, ConsoleMode
    from ganloop.console.glconsole import GLConsole
    GLConsole(ConsoleConfig(mode=ConsoleMode.NULL))


# ---- Tiny GAN fixtures ----

LATENT_DIM = 3
FEATURES = 4


@pytest.fixture
def tiny_generator():
    """3 -> 4 linear generator, 16 params."""
    torch.manual_seed(42)
    return nn.Linear(LATENT_DIM, FEATURES)


@pytest.fixture
def tiny_discriminator():
    """4 -> 2 linear discriminator, 10 params."""
    torch.manual_seed(43)
    return nn.Linear(FEATURES, 2)


@pytest.fixture
def tiny_step(tiny_generator, tiny_discriminator):
    """GANStep over the tiny players with SGD for both."""
    return GANStep(
        generator=tiny_generator,
        discriminator=tiny_discriminator,
        g_optimizer=sgd(0.1),
        d_optimizer=sgd(0.1),
        latent_dim=LATENT_DIM,
        seed=0,
    )


@pytest.fixture
def tiny_state(tiny_step):
    """Initial TrainState for tiny_step."""
    return tiny_step.init_state()


@pytest.fixture
def real_batch():
    """Batch of 2 real samples, 4 features."""
    torch.manual_seed(7)
    return torch.randn(2, FEATURES)
