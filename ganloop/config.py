"""Base configuration dataclass for experiments.

All experiment configs inherit from BaseConfig to get the common fields
that runners and the entry point depend on.
"""

from dataclasses import dataclass


@dataclass
class BaseConfig:
    """Common configuration fields. Experiment configs inherit from this."""
    seed: int = 42
    output_dir: str = "output"
    experiment_name: str = ""

    # Periodicity
    log_every: int = 50              # loss line interval (iterations)
    sample_every: int = 1            # generator sampling interval (epochs)

    # Runtime
    no_determinism: bool = False

    def __post_init__(self):
        if self.seed < 0:
            raise ValueError(f"seed must be >= 0, got {self.seed}")
        if self.log_every <= 0:
            raise ValueError(f"log_every must be > 0, got {self.log_every}")
        if self.sample_every <= 0:
            raise ValueError(f"sample_every must be > 0, got {self.sample_every}")
