"""Weights & Biases sink."""

from __future__ import annotations

import datetime
from typing import Any

from ..loop.events import Event
from .base import MetricSink


class WandbSink(MetricSink):
    """Log metric records to Weights & Biases, keyed by loop iteration.

    Each ``set_run_context(run=...)`` opens a new W&B run inside ``group``.
    Image-shaped arrays (2 or more dims, e.g. generator samples) are logged
    as ``wandb.Image``; numeric sequences as a histogram plus their mean.

    Needs the optional ``wandb`` dependency (``pip install ganloop[wandb]``).
    """

    def __init__(self, project: str | None = None, group: str | None = None, config: dict | None = None):
        try:
            import wandb
        except ImportError:
            raise ImportError(
                "WandbSink requires the 'wandb' package. "
                "Install it with: pip install wandb"
            )
        self._wandb = wandb
        self._project = project
        self._group = group or f"experiment_{datetime.datetime.now():%Y%m%d_%H%M%S}"
        self._config = dict(config or {})

    def set_run_context(self, **context):
        self.flush()
        self._wandb.init(
            project=self._project,
            group=self._group,
            name=context.get('run'),
            config={**self._config, **context},
            reinit=True,
            settings=self._wandb.Settings(console="off"),
        )

    def _convert(self, key: str, value: Any) -> dict[str, Any]:
        if getattr(value, 'ndim', 0) >= 2:
            return {key: self._wandb.Image(value)}
        if isinstance(value, (list, tuple)):
            values = [v.item() if hasattr(v, 'item') else v for v in value]
            if not values or not isinstance(values[0], (int, float)):
                return {}
            return {key: self._wandb.Histogram(values), f"{key}_mean": sum(values) / len(values)}
        if hasattr(value, 'item'):
            return {key: value.item()}
        if isinstance(value, (int, float)):
            return {key: value}
        return {}

    def emit(self, metrics: dict[str, Any], step: int, event: Event):
        if not metrics or self._wandb.run is None:
            return
        logged: dict[str, Any] = {}
        for key, value in metrics.items():
            logged.update(self._convert(key, value))
        if logged:
            self._wandb.log(logged, step=step)

    def flush(self):
        if self._wandb.run is not None:
            self._wandb.finish()
