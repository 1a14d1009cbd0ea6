"""Shared utility functions.

Organized into submodules:
- reproducibility: seeds, determinism, environment tracking
- formatting: human-readable output, JSON serialization
"""

from .formatting import format_human_readable, _json_default
from .reproducibility import set_seeds, set_determinism, get_environment_info

__all__ = [
    'format_human_readable',
    '_json_default',
    'set_seeds',
    'set_determinism',
    'get_environment_info',
]
