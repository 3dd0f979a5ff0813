# telemetry/runtime/writer.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import List, Optional, Tuple

from telemetry.backends.base import Backend
from telemetry.errors import BackendOpenError
from telemetry.facade.kinds import Metric

from .channel import CommandChannel
from .commands import Exit, Register, Timestamp, Update


class Writer(threading.Thread):
    """
    Single consumer of the CommandChannel; sole owner of the backend and the metric list.

    Lifecycle:
      - run() opens the backend and reports the outcome through `started`.
      - commands are applied strictly in arrival order until Exit.
      - any backend exception ends the loop and is kept in `error`.
      - on every way out the channel is closed and the backend closed.
    """

    def __init__(
        self,
        backend: Backend,
        channel: CommandChannel,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="telemetry-writer", daemon=True)
        self._backend = backend
        self._channel = channel
        self._log = logger or logging.getLogger(__name__)

        self._metrics: List[Metric] = []
        self._time_s = 0.0

        self.started: Future = Future()
        self.error: Optional[BaseException] = None
        self.commands_processed = 0

    @property
    def metrics(self) -> Tuple[Metric, ...]:
        return tuple(self._metrics)

    @property
    def current_time(self) -> float:
        return self._time_s

    # ---------------- thread body ----------------
    def run(self) -> None:
        try:
            self._backend.open()
        except Exception as e:
            self._log.warning("WRITER_OPEN_FAILED backend=%s error=%s", self._backend.name, e)
            self._channel.close()
            self.started.set_exception(
                BackendOpenError(
                    f"Failed to open {self._backend.name} backend.",
                    hint=str(e),
                    details={"backend": self._backend.name},
                )
            )
            return

        self.started.set_result(None)
        self._log.info("WRITER_STARTED backend=%s", self._backend.name)

        try:
            self._loop()
        except Exception as e:
            self.error = e
            self._log.exception(
                "WRITER_FAILED backend=%s metrics=%d processed=%d",
                self._backend.name,
                len(self._metrics),
                self.commands_processed,
            )
        finally:
            leftover = self._channel.close()
            self._close_backend()
            self._log.info(
                "WRITER_STOPPED backend=%s processed=%d dropped=%d",
                self._backend.name,
                self.commands_processed,
                len(leftover),
            )

    def _loop(self) -> None:
        while True:
            cmd = self._channel.recv()
            self.commands_processed += 1

            if isinstance(cmd, Update):
                self._on_update(cmd)
            elif isinstance(cmd, Timestamp):
                self._time_s = float(cmd.seconds)
                self._backend.timestamp(self._time_s)
            elif isinstance(cmd, Register):
                self._on_register(cmd)
            elif isinstance(cmd, Exit):
                self._backend.flush()
                return
            else:
                self._log.warning("WRITER_UNKNOWN_COMMAND type=%s", type(cmd).__name__)

    def _on_register(self, cmd: Register) -> None:
        metric = Metric(
            name=cmd.name,
            kind=cmd.kind,
            unit=cmd.unit,
            identifier=len(self._metrics),
        )
        try:
            self._backend.register(metric)
        finally:
            # always answer the caller
            self._metrics.append(metric)
            if not cmd.reply.set_result(metric.identifier):
                self._log.debug("REGISTER_REPLY_DROPPED name=%s id=%d", metric.name, metric.identifier)

        self._log.debug(
            "METRIC_REGISTERED id=%d name=%s kind=%s unit=%s",
            metric.identifier,
            metric.name,
            metric.kind.value,
            metric.unit,
        )

    def _on_update(self, cmd: Update) -> None:
        metric_id = cmd.metric_id
        if not 0 <= metric_id < len(self._metrics):
            return
        self._backend.update(self._metrics[metric_id], cmd.value)

    def _close_backend(self) -> None:
        try:
            self._backend.close()
        except Exception as e:
            self._log.exception("WRITER_BACKEND_CLOSE_FAILED backend=%s", self._backend.name)
            if self.error is None:
                self.error = e
