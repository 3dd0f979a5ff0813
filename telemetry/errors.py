# telemetry/errors.py
from __future__ import annotations


class TelemetryError(Exception):
    """
    Failure of a telemetry pipeline lifecycle step: choosing a backend,
    opening its output file, or finishing the trace on close.

    Recording calls (metric sites, set_current_time) never raise this; they
    degrade to no-ops. `hint` carries the underlying cause (usually the
    backend's OSError text) and `details` the backend name and output path.
    """

    #: Short tag for log lines and callers that branch on the failure kind.
    code: str = "telemetry_error"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


# ---------------------------------------------------------------------------
# Configuration errors (nothing opened yet)
# ---------------------------------------------------------------------------

class TelemetryConfigError(TelemetryError):
    """
    Configuration is invalid.

    Examples:
      - unknown backend name
      - malformed YAML config file
      - wrong value types in the config file
    """
    code = "telemetry_config_error"


# ---------------------------------------------------------------------------
# Backend lifecycle errors
# ---------------------------------------------------------------------------

class BackendOpenError(TelemetryError):
    """
    The output backend could not be opened by the writer thread.

    Examples:
      - output directory does not exist
      - permission denied
      - temporary spool for the waveform could not be created
    """
    code = "backend_open_error"


class BackendWriteError(TelemetryError):
    """
    The writer thread died on a backend failure while running.

    Reported when the owning handle is closed.
    """
    code = "backend_write_error"
