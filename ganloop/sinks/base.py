"""Sink interfaces and the formatting shared between sinks.

A sink receives flat metric records (``{"generator/loss": 0.69, ...}``)
from handlers together with the loop iteration and the event that
produced them. FileSink adds per-run file placement for the CSV and JSONL
sinks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

from ..loop.events import Event


def _flatten_for_csv(value: Any) -> Any:
    """One CSV cell for ``value``: mappings become ``k:v;k:v``, sequences ``a;b``."""
    if isinstance(value, dict):
        value = [f'{k}:{v}' for k, v in value.items()]
    if isinstance(value, (list, tuple)):
        return ';'.join(map(str, value))
    return value


def _format_number(value: float) -> str:
    if value == 0 or 1e-3 <= abs(value) <= 1e4:
        return f"{value:.6f}"
    return f"{value:.4e}"


def _format_metric_value(value: Any) -> str:
    """Short display form of a metric value; numeric lists show their mean."""
    if isinstance(value, (list, tuple)):
        if value and all(isinstance(v, (int, float)) for v in value):
            return f"{_format_number(sum(value) / len(value))} (n={len(value)})"
        return f"[{len(value)} items]"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def unique_path(path: Path) -> Path:
    """``path`` itself, or the first ``<stem>_<n><suffix>`` sibling that is free."""
    candidate, n = path, 0
    while candidate.exists():
        n += 1
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
    return candidate


class MetricSink(ABC):
    """Destination for metric records."""

    @abstractmethod
    def emit(self, metrics: dict[str, Any], step: int, event: Event):
        """Receive one record.

        Args:
            metrics: Flat, namespaced metric dict.
            step: Loop iteration the record belongs to.
            event: Lifecycle event whose handler produced the record.
        """
        ...

    def set_run_context(self, **context):
        """Start a new run, e.g. ``set_run_context(run='mnist_gan')``."""
        pass

    def flush(self):
        """Push out buffered output; called when the run ends."""
        pass


class FileSink(MetricSink):
    """Base for sinks writing one file per run.

    Give either a fixed ``filepath`` or ``output_dir`` and
    ``experiment_name``. In the latter case each run writes
    ``{output_dir}/{experiment_name}/{run}.{suffix}``, numbered
    ``{run}_1``, ``{run}_2`` ... when the file already exists. A sink that
    emits before any ``set_run_context`` call uses the experiment name as
    the run name.
    """

    suffix: str

    def __init__(
        self,
        filepath: str | Path | None = None,
        output_dir: str | Path | None = None,
        experiment_name: str | None = None,
    ):
        if filepath is None and (output_dir is None or experiment_name is None):
            raise ValueError(
                f"{type(self).__name__} requires either filepath or output_dir and experiment_name"
            )
        self._fixed = filepath is not None
        self._path: Path | None = Path(filepath) if filepath is not None else None
        self._run_dir = None if self._fixed else Path(output_dir) / experiment_name
        self._default_run = experiment_name
        self._handle: IO | None = None

    @property
    def filepath(self) -> Path | None:
        return self._path

    def _path_for(self, run: str) -> Path | None:
        if self._fixed:
            return None
        return unique_path(self._run_dir / f"{run}.{self.suffix}")

    def _open(self, mode: str) -> IO:
        if self._path is None:
            self._path = self._path_for(self._default_run)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self._path, mode, newline='', encoding='utf-8')
        return self._handle

    def _close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def set_run_context(self, **context):
        self._close()
        run = context.get('run')
        if run and not self._fixed:
            self._path = self._path_for(run)
        self._reset()

    def _reset(self):
        """Clear per-run state; called on every new run context."""
        pass

    def flush(self):
        self._close()
