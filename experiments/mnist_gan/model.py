"""Generator and discriminator networks for 28x28 greyscale digits."""

import torch.nn as nn

IMAGE_SHAPE = (1, 28, 28)
IMAGE_PIXELS = 28 * 28


def build_generator(latent_dim: int = 100) -> nn.Sequential:
    """Noise ``(B, latent_dim)`` to images ``(B, 1, 28, 28)`` in [-1, 1].

    Three dense/ReLU/BatchNorm blocks widening 256 -> 512 -> 1024, then a
    dense projection to 784 pixels and tanh.
    """
    layers = []
    in_features = latent_dim
    for width in (256, 512, 1024):
        layers += [nn.Linear(in_features, width), nn.ReLU(), nn.BatchNorm1d(width)]
        in_features = width
    layers += [
        nn.Linear(in_features, IMAGE_PIXELS),
        nn.Tanh(),
        nn.Unflatten(1, IMAGE_SHAPE),
    ]
    return nn.Sequential(*layers)


def build_discriminator() -> nn.Sequential:
    """Images to 2-class logits (column 0 = fake, column 1 = real)."""
    return nn.Sequential(
        nn.Flatten(),
        nn.Linear(IMAGE_PIXELS, 512),
        nn.ReLU(),
        nn.Linear(512, 256),
        nn.ReLU(),
        nn.Linear(256, 2),
    )
