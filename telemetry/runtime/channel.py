# telemetry/runtime/channel.py
from __future__ import annotations

import queue
import threading
from typing import List, Optional

from telemetry.facade.kinds import INVALID_METRIC_ID, MetricId, MetricKind

from .commands import Command, Register
from ._internal.pending_registration import PendingRegistration


class CommandChannel:
    """
    Unbounded FIFO between call sites (many producers) and the writer (one consumer).

    - send() never blocks; after close() commands are dropped silently.
    - request() is the registration round trip: enqueue Register, wait for reply.
    - close() is called by the writer on its way out. Registrations still
      queued at that point are answered with the sentinel id so no producer
      waits forever.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[Command]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    # ---------------- producer side ----------------
    def send(self, command: Command) -> bool:
        if self._closed:
            return False
        self._queue.put(command)
        return True

    def request(
        self,
        name: str,
        kind: MetricKind,
        unit: str,
        *,
        timeout: Optional[float] = None,
    ) -> MetricId:
        pending = PendingRegistration(name)

        # Registers only enter under the lock so close() cannot miss one.
        with self._lock:
            if self._closed:
                return INVALID_METRIC_ID
            self._queue.put(Register(name=name, kind=kind, unit=unit, reply=pending))

        return pending.wait(timeout)

    # ---------------- consumer side ----------------
    def recv(self) -> Command:
        return self._queue.get()

    def close(self) -> List[Command]:
        """Refuse further commands and return whatever was still queued."""
        with self._lock:
            self._closed = True

        leftover: List[Command] = []
        while True:
            try:
                cmd = self._queue.get_nowait()
            except queue.Empty:
                break
            if isinstance(cmd, Register):
                cmd.reply.abandon()
            leftover.append(cmd)
        return leftover
