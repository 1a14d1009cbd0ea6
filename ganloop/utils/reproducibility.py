"""Seeding, determinism switches and environment capture."""

import os
import platform
import random

import numpy as np
import torch


def set_seeds(seed: int):
    """Seed Python, NumPy and torch (all devices) with ``seed``."""
    os.environ['PYTHONHASHSEED'] = str(seed)
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    torch.cuda.manual_seed_all(seed)


def set_determinism(enabled: bool = True):
    """Turn torch's deterministic-algorithm enforcement on or off.

    On: deterministic cuDNN, no autotuning and a fixed cuBLAS workspace.
    Off: cuDNN autotuning allowed.
    """
    torch.backends.cudnn.deterministic = enabled
    torch.backends.cudnn.benchmark = not enabled
    torch.use_deterministic_algorithms(enabled)
    if enabled:
        os.environ.setdefault('CUBLAS_WORKSPACE_CONFIG', ':4096:8')


def get_environment_info() -> dict:
    """Library versions and hardware facts, saved next to a run's config."""
    cuda = torch.cuda.is_available()
    info = {
        'python_version': platform.python_version(),
        'platform': platform.platform(),
        'torch_version': torch.__version__,
        'numpy_version': np.__version__,
        'cuda_available': cuda,
        'cudnn_deterministic': torch.backends.cudnn.deterministic,
        'cudnn_benchmark': torch.backends.cudnn.benchmark,
    }
    if cuda:
        info.update(
            cuda_version=torch.version.cuda,
            gpu_name=torch.cuda.get_device_name(0),
            gpu_count=torch.cuda.device_count(),
        )
    return info
