"""JSON Lines metrics file."""

from __future__ import annotations

import json
from typing import Any

from ..loop.events import Event
from ..utils import _json_default
from .base import FileSink


class JSONLSink(FileSink):
    """Append each record as ``{"step": ..., "event": ..., <metrics>}`` on its own line.

    Tensors and arrays are stored as (nested) lists.
    """

    suffix = "jsonl"

    def emit(self, metrics: dict[str, Any], step: int, event: Event):
        if not metrics:
            return
        handle = self._handle or self._open('a')
        record = {'step': step, 'event': event.name, **metrics}
        handle.write(json.dumps(record, default=_json_default) + '\n')
        handle.flush()
