"""Console sink: loss lines and metric tables through GLConsole."""

from __future__ import annotations

from typing import Any

from rich import box
from rich.table import Table

from ..console import GLConsole, player_label
from ..loop.events import Event
from .base import MetricSink, _format_metric_value

G_LOSS_KEY = 'generator/loss'
D_LOSS_KEY = 'discriminator/loss'


class ConsoleSink(MetricSink):
    """Print metric records to the console.

    A record holding both running losses becomes one line::

        Epoch: 0, batch: 50 G: 0.69314 D: 0.69314

    with an arrow after each loss showing its move since the previous line.
    Records without both losses are printed as a two-column table.
    """

    _ARROWS = {'up': '▲', 'down': '▼', 'flat': '━'}
    # Relative moves smaller than this count as flat
    _FLAT_BAND = 0.01

    def __init__(self, precision: int = 5, show_trend: bool = True):
        self._console = GLConsole()
        self._precision = precision
        self._show_trend = show_trend
        self._last: dict[str, float] = {}

    def emit(self, metrics: dict[str, Any], step: int, event: Event):
        if not metrics:
            return
        if G_LOSS_KEY in metrics and D_LOSS_KEY in metrics:
            self._console.print(self.format_loss_line(metrics, step))
        else:
            self._console.print(self._table(metrics, step, event))

    def format_loss_line(self, metrics: dict[str, Any], step: int) -> str:
        """Markup for the one-line loss summary of ``metrics``."""
        parts = [
            f"[metric.label]Epoch:[/metric.label] {metrics.get('epoch', 0)},",
            f"[metric.label]batch:[/metric.label] {metrics.get('batch', step)}",
        ]
        for player, key, tag in (('generator', G_LOSS_KEY, 'G:'), ('discriminator', D_LOSS_KEY, 'D:')):
            value = float(metrics[key])
            parts.append(
                f"{player_label(player, tag)} "
                f"[metric.value]{value:.{self._precision}f}[/metric.value]{self._arrow(key, value)}"
            )
        return " ".join(parts)

    def _arrow(self, key: str, value: float) -> str:
        previous = self._last.get(key)
        self._last[key] = value
        if previous is None or not self._show_trend:
            return ""
        direction = self._classify_change(previous, value)
        return f" [trend.{direction}]{self._ARROWS[direction]}[/trend.{direction}]"

    @classmethod
    def _classify_change(cls, prev: float, curr: float) -> str:
        """'up', 'down' or 'flat' for the move from ``prev`` to ``curr``."""
        if prev == 0:
            if curr == 0:
                return 'flat'
            return 'up' if curr > 0 else 'down'
        relative = (curr - prev) / abs(prev)
        if abs(relative) < cls._FLAT_BAND:
            return 'flat'
        return 'up' if relative > 0 else 'down'

    @staticmethod
    def _table(metrics: dict[str, Any], step: int, event: Event) -> Table:
        table = Table(
            box=box.SIMPLE,
            header_style="table.header",
            title=f"{event.name.lower()} @ {step}",
            title_style="detail",
        )
        table.add_column("Metric", style="metric.label")
        table.add_column("Value", justify="right", style="metric.value")
        for key in sorted(metrics):
            table.add_row(key, _format_metric_value(metrics[key]))
        return table

    def set_run_context(self, **kwargs):
        self._last.clear()
