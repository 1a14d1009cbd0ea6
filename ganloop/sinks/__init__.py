"""Metric sinks that consume handler output.

Sinks receive metric dicts from handlers and route them to different
destinations (console, CSV, JSONL, W&B).
"""

from .base import MetricSink, FileSink, unique_path
from .console import ConsoleSink
from .csv_sink import CSVSink
from .jsonl import JSONLSink
from .wandb import WandbSink

__all__ = [
    'MetricSink',
    'FileSink',
    'unique_path',
    'ConsoleSink',
    'CSVSink',
    'JSONLSink',
    'WandbSink',
]
