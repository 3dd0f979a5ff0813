# facade/__init__.py

from .kinds import INVALID_METRIC_ID, Metric, MetricId, MetricKind
from .recorder import RECORDER, CellState, Recorder, RecorderCell, get_recorder, install_recorder
from .site import MetricSite, metric, set_current_time, site_for

__all__ = [
    "INVALID_METRIC_ID", "Metric", "MetricId", "MetricKind",
    "RECORDER", "CellState", "Recorder", "RecorderCell", "get_recorder", "install_recorder",
    "MetricSite", "metric", "set_current_time", "site_for",
]
