# telemetry/__init__.py
"""
In-process metric recording.

Call sites emit named, typed samples; one background writer thread
serializes them to a CSV table or a VCD waveform trace.

    import telemetry
    from telemetry import MetricKind

    with telemetry.open("/tmp/run.csv"):
        telemetry.set_current_time(0.5)
        telemetry.metric("vbus", "V", MetricKind.FLOAT32, 3.3)
"""

from .errors import BackendOpenError, BackendWriteError, TelemetryConfigError, TelemetryError
from .config import DEFAULTS, TelemetryConfig, load_config
from .facade import (
    INVALID_METRIC_ID,
    Metric,
    MetricKind,
    MetricSite,
    Recorder,
    RecorderCell,
    get_recorder,
    install_recorder,
    metric,
    set_current_time,
    site_for,
)
from .runtime.pipeline import ChannelRecorder, TelemetryRecorder, open_recorder

open = open_recorder

__all__ = [
    "TelemetryError", "TelemetryConfigError", "BackendOpenError", "BackendWriteError",
    "DEFAULTS", "TelemetryConfig", "load_config",
    "INVALID_METRIC_ID", "Metric", "MetricKind", "MetricSite",
    "Recorder", "RecorderCell", "get_recorder", "install_recorder",
    "metric", "set_current_time", "site_for",
    "ChannelRecorder", "TelemetryRecorder", "open_recorder", "open",
]
