"""Configuration for the MNIST GAN experiment."""

from dataclasses import dataclass

from ganloop import BaseConfig


@dataclass
class MNISTGANConfig(BaseConfig):
    """Configuration for adversarial training on MNIST digits."""
    latent_dim: int = 100
    batch_size: int = 32
    epochs: int = 10
    lr: float = 2e-3
    b1: float = 0.5
    b2: float = 0.999
    sample_count: int = 3

    dataset: str = 'ylecun/mnist'
    split: str = 'train'
    limit: int | None = None         # use only the first N images
    shuffle: bool = False
    device: str | None = None        # None: CUDA > MPS > CPU
    save_samples: bool = False       # also write PNG sample grids

    def __post_init__(self):
        super().__post_init__()
        if self.latent_dim <= 0:
            raise ValueError(f"latent_dim must be > 0, got {self.latent_dim}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {self.batch_size}")
        if self.epochs <= 0:
            raise ValueError(f"epochs must be > 0, got {self.epochs}")
        if self.lr <= 0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if not (0.0 <= self.b1 < 1.0 and 0.0 <= self.b2 < 1.0):
            raise ValueError(f"b1 and b2 must be in [0, 1), got {self.b1}, {self.b2}")
        if self.sample_count <= 0:
            raise ValueError(f"sample_count must be > 0, got {self.sample_count}")
        if self.limit is not None and self.limit < self.batch_size:
            raise ValueError(
                f"limit must be >= batch_size ({self.batch_size}), got {self.limit}"
            )
