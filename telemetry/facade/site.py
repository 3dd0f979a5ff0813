# telemetry/facade/site.py
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from .kinds import MetricId, MetricKind
from .recorder import RECORDER, Recorder, RecorderCell

_log = logging.getLogger(__name__)


class MetricSite:
    """
    Memoized instrumentation point for one named metric.

    The first record() against an installed recorder performs the one
    registration round trip and caches the identifier; later calls only
    forward values. Without an installed recorder every call is a no-op.
    """

    def __init__(
        self,
        name: str,
        kind: MetricKind | str,
        unit: str = "",
        *,
        cell: Optional[RecorderCell] = None,
    ):
        self.name = str(name)
        self.kind = MetricKind.parse(kind)
        self.unit = str(unit)

        self._cell = cell if cell is not None else RECORDER
        self._id: Optional[MetricId] = None
        self._once = threading.Lock()
        self._rejected = False

    @property
    def metric_id(self) -> Optional[MetricId]:
        return self._id

    def resolve(self) -> Optional[MetricId]:
        """Register now (if a recorder is installed) without recording a value."""
        recorder = self._cell.get()
        if recorder is None:
            return None
        return self._resolve(recorder)

    def record(self, value: Any) -> None:
        recorder = self._cell.get()
        if recorder is None:
            return

        metric_id = self._resolve(recorder)
        try:
            recorder.record(metric_id, self.kind, value)
        except (TypeError, ValueError):
            if not self._rejected:
                self._rejected = True
                _log.warning(
                    "METRIC_VALUE_REJECTED name=%s kind=%s value=%r",
                    self.name,
                    self.kind.value,
                    value,
                )

    __call__ = record

    def _resolve(self, recorder: Recorder) -> MetricId:
        metric_id = self._id
        if metric_id is not None:
            return metric_id

        with self._once:
            if self._id is None:
                self._id = recorder.allocate(self.name, self.kind, self.unit)
            return self._id

    def __repr__(self) -> str:
        return f"MetricSite(name={self.name!r}, kind={self.kind.value}, unit={self.unit!r}, id={self._id})"


_SiteKey = Tuple[str, MetricKind, str, RecorderCell]

_sites: Dict[_SiteKey, MetricSite] = {}
_sites_lock = threading.Lock()


def site_for(
    name: str,
    kind: MetricKind | str,
    unit: str = "",
    *,
    cell: Optional[RecorderCell] = None,
) -> MetricSite:
    """Return the shared MetricSite for (name, kind, unit, cell), creating it once."""
    kind = MetricKind.parse(kind)
    cell = cell if cell is not None else RECORDER
    key = (str(name), kind, str(unit), cell)

    site = _sites.get(key)
    if site is not None:
        return site

    with _sites_lock:
        site = _sites.get(key)
        if site is None:
            site = MetricSite(name, kind, unit, cell=cell)
            _sites[key] = site
        return site


def metric(
    name: str,
    unit: str,
    kind: MetricKind | str,
    value: Any,
    *,
    cell: Optional[RecorderCell] = None,
) -> None:
    """Record `value` for the metric `name[unit]: kind`."""
    cell = cell if cell is not None else RECORDER
    if cell.get() is None:
        return
    site_for(name, kind, unit, cell=cell).record(value)


def set_current_time(seconds: float, *, cell: Optional[RecorderCell] = None) -> None:
    """Advance the installed recorder's time cursor (no-op without a recorder)."""
    cell = cell if cell is not None else RECORDER
    recorder = cell.get()
    if recorder is None:
        return
    recorder.timestamp(float(seconds))
