"""Observer handlers that attach to a Loop.

- IterationLogger: periodic loss lines and metric sinks
- GeneratorSampler: epoch-end samples, rendered to console or PNG
- ProgressHandler: progress bar across the run
- FiniteLossGuard / EarlyStopping: abort or halt a run
"""

from .base import LoopHandler
from .logging import IterationLogger, loss_metrics
from .sampling import GeneratorSampler, ConsoleHeatmapRenderer, ImageGridRenderer
from .progress import ProgressHandler
from .guards import FiniteLossGuard, EarlyStopping

__all__ = [
    'LoopHandler',
    'IterationLogger',
    'loss_metrics',
    'GeneratorSampler',
    'ConsoleHeatmapRenderer',
    'ImageGridRenderer',
    'ProgressHandler',
    'FiniteLossGuard',
    'EarlyStopping',
]
