# telemetry/runtime/pipeline.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from telemetry.backends.registry import BackendRegistry
from telemetry.config import DEFAULTS, TelemetryConfig, default_output_path
from telemetry.errors import BackendWriteError, TelemetryError
from telemetry.facade.kinds import MetricId, MetricKind
from telemetry.facade.recorder import RECORDER, Recorder, RecorderCell

from .channel import CommandChannel
from .commands import Exit, Timestamp, Update, Value
from .writer import Writer


class ChannelRecorder(Recorder):
    """Recorder installed for call sites; turns every call into a channel command."""

    def __init__(self, channel: CommandChannel, *, register_timeout_s: Optional[float] = None):
        self._channel = channel
        self._register_timeout_s = register_timeout_s

    def allocate(self, name: str, kind: MetricKind, unit: str) -> MetricId:
        return self._channel.request(name, kind, unit, timeout=self._register_timeout_s)

    def record_i64(self, metric_id: MetricId, value: int) -> None:
        self._channel.send(Update(metric_id, Value.int64(value)))

    def record_u64(self, metric_id: MetricId, value: int) -> None:
        self._channel.send(Update(metric_id, Value.uint64(value)))

    def record_f64(self, metric_id: MetricId, value: float) -> None:
        self._channel.send(Update(metric_id, Value.float64(value)))

    def timestamp(self, seconds: float) -> None:
        self._channel.send(Timestamp(float(seconds)))


class TelemetryRecorder:
    """
    Owning handle of one telemetry pipeline (channel + writer thread + backend).

    open() returns only once the backend is open; close() sends Exit, joins
    the writer and reports a writer failure as BackendWriteError.
    """

    def __init__(
        self,
        *,
        writer: Writer,
        channel: CommandChannel,
        recorder: ChannelRecorder,
        backend_name: str,
        path: Path,
        installed: bool,
        logger: Optional[logging.Logger] = None,
    ):
        self._writer = writer
        self._channel = channel
        self._recorder = recorder
        self._backend_name = backend_name
        self._path = path
        self._installed = installed
        self._log = logger or logging.getLogger(__name__)
        self._closed = False

    # ---------------- construction ----------------
    @classmethod
    def open(
        cls,
        path: str | Path | None = None,
        *,
        backend: Optional[str] = None,
        config: Optional[TelemetryConfig] = None,
        cell: Optional[RecorderCell] = None,
        registry: Optional[BackendRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "TelemetryRecorder":
        """
        Start a pipeline and install it as the process recorder.

        Backend choice: explicit `backend`, else the one matching the path
        extension, else the config default. Installation is first-wins: if
        a recorder is already installed the pipeline still runs, but call
        sites keep talking to the first one.
        """
        log = logger or logging.getLogger(__name__)
        cfg = config or DEFAULTS
        registry = registry or BackendRegistry.default()
        cell = cell if cell is not None else RECORDER

        path = path if path is not None else cfg.path
        backend_name = backend or (registry.name_for_path(path) if path is not None else None) or cfg.backend
        backend_cls = registry.get_class(backend_name)
        out_path = Path(path) if path is not None else default_output_path(backend_cls.extension, cfg)

        be = registry.create(backend_name, out_path)
        channel = CommandChannel()
        writer = Writer(be, channel, logger=logger)
        writer.start()

        try:
            writer.started.result()
        except TelemetryError:
            writer.join()
            raise

        recorder = ChannelRecorder(channel, register_timeout_s=cfg.register_timeout_s)
        installed = cell.install(recorder)

        log.info(
            "TELEMETRY_OPENED backend=%s path=%s installed=%s",
            be.name,
            out_path,
            installed,
        )
        if not installed:
            log.warning("TELEMETRY_RECORDER_ALREADY_INSTALLED path=%s", out_path)

        return cls(
            writer=writer,
            channel=channel,
            recorder=recorder,
            backend_name=be.name,
            path=out_path,
            installed=installed,
            logger=log,
        )

    # ---------------- state ----------------
    @property
    def path(self) -> Path:
        return self._path

    @property
    def backend_name(self) -> str:
        return self._backend_name

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def recorder(self) -> ChannelRecorder:
        return self._recorder

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def writer(self) -> Writer:
        return self._writer

    # ---------------- API ----------------
    def set_current_time(self, seconds: float) -> None:
        self._recorder.timestamp(seconds)

    def close(self) -> None:
        """Send Exit, wait for the writer to drain and close the backend. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        self._channel.send(Exit())
        self._writer.join()

        err = self._writer.error
        if err is not None:
            self._log.warning("TELEMETRY_CLOSED_WITH_ERROR path=%s error=%s", self._path, err)
            raise BackendWriteError(
                f"Telemetry writer failed while writing {self._path}.",
                hint=str(err),
                details={"backend": self._backend_name, "path": str(self._path)},
            ) from err

        self._log.info(
            "TELEMETRY_CLOSED path=%s processed=%d",
            self._path,
            self._writer.commands_processed,
        )

    def __enter__(self) -> "TelemetryRecorder":
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        try: self.close()
        except Exception: pass


def open_recorder(path: str | Path | None = None, **kwargs: Any) -> TelemetryRecorder:
    return TelemetryRecorder.open(path, **kwargs)
