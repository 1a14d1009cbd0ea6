from .runner import MNISTGANRunner
from .config import MNISTGANConfig
from .model import build_generator, build_discriminator

__all__ = ['MNISTGANRunner', 'MNISTGANConfig', 'build_generator', 'build_discriminator']
