# telemetry/backends/tabular.py
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import List, Optional, TextIO

from telemetry.facade.kinds import Metric
from telemetry.runtime.commands import Value, format_float

from .base import Backend


class TabularBackend(Backend):
    """
    CSV output with one column per metric and one row per time step.

    Row policy (sticky last value):
      - updates overwrite the metric's slot in the current row.
      - a timestamp closes the running step: the row is written stamped with
        the step's time, then the cursor moves on. flush() writes the last step.
      - nothing is written until the first update arrives; the header
        (time + metric names, registration order) goes out with the first row.
      - slots are never cleared, a row is a snapshot, not a diff.
    """

    name = "tabular"
    extension = ".csv"

    def __init__(self, path: str | Path, *, logger: Optional[logging.Logger] = None):
        super().__init__(path)
        self._log = logger or logging.getLogger(__name__)

        self._f: Optional[TextIO] = None
        self._writer = None

        self._names: List[str] = []
        self._row: List[str] = []
        self._time_s = 0.0
        self._has_data = False
        self._wrote_header = False
        self.rows_written = 0

    def open(self) -> None:
        self._f = open(self.path, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._f, lineterminator="\n")

    def register(self, metric: Metric) -> None:
        self._names.append(metric.name)
        self._row.append("")
        if self._wrote_header:
            self._log.warning(
                "TABULAR_LATE_REGISTRATION name=%s column=%d (header already written)",
                metric.name,
                metric.identifier + 1,
            )

    def timestamp(self, seconds: float) -> None:
        self._write_step()
        self._time_s = float(seconds)

    def update(self, metric: Metric, value: Value) -> None:
        self._row[metric.identifier] = str(value)
        self._has_data = True

    def flush(self) -> None:
        self._write_step()
        if self._f:
            self._f.flush()

    def close(self) -> None:
        f, self._f = self._f, None
        self._writer = None
        if f:
            try:
                f.flush()
            finally:
                f.close()

    # ---------------- internal ----------------
    def _write_step(self) -> None:
        if not self._has_data:
            return
        if self._writer is None:
            raise RuntimeError("TabularBackend is closed")

        if not self._wrote_header:
            self._writer.writerow(["time", *self._names])
            self._wrote_header = True

        self._writer.writerow([format_float(self._time_s), *self._row])
        self.rows_written += 1
