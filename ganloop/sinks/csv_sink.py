"""CSV metrics file."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

from ..loop.events import Event
from .base import FileSink, _flatten_for_csv


class CSVSink(FileSink):
    """One CSV row per record, columns ``step, event, <metric keys...>``.

    Rows are appended as they arrive. A record introducing a key not seen
    before widens the header, and the file is written out again with every
    row so far; earlier rows get empty cells for the new column.
    """

    suffix = "csv"

    def __init__(
        self,
        filepath: str | Path | None = None,
        output_dir: str | Path | None = None,
        experiment_name: str | None = None,
    ):
        super().__init__(filepath, output_dir, experiment_name)
        self._reset()

    def _reset(self):
        self._columns: list[str] = []
        self._rows: list[dict[str, Any]] = []
        self._writer: csv.DictWriter | None = None

    def emit(self, metrics: dict[str, Any], step: int, event: Event):
        if not metrics:
            return
        row = {'step': step, 'event': event.name}
        row.update((key, _flatten_for_csv(value)) for key, value in metrics.items())
        self._rows.append(row)

        added = [key for key in row if key not in self._columns]
        self._columns.extend(added)
        if added or self._writer is None:
            self._write_all()
        else:
            self._writer.writerow(row)
        self._handle.flush()

    def _write_all(self):
        self._close()
        self._writer = csv.DictWriter(self._open('w'), fieldnames=self._columns, restval='')
        self._writer.writeheader()
        self._writer.writerows(self._rows)

    def flush(self):
        super().flush()
        self._writer = None
