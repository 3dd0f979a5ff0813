# telemetry/facade/recorder.py
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Dict, Optional

from .kinds import MetricId, MetricKind, narrow_float32, wrap_signed, wrap_unsigned


class Recorder(ABC):
    """
    Capability every recorder implementation provides to call sites.

    Contract:
      - allocate() returns the identifier for a new metric stream. It may block
        once per call site; it must not raise.
      - record_i64/u64/f64 accept already widened values and must not block
        or raise.
      - narrower record_* methods widen and forward to the 64-bit ones.
    """

    @abstractmethod
    def allocate(self, name: str, kind: MetricKind, unit: str) -> MetricId: ...

    @abstractmethod
    def record_i64(self, metric_id: MetricId, value: int) -> None: ...

    @abstractmethod
    def record_u64(self, metric_id: MetricId, value: int) -> None: ...

    @abstractmethod
    def record_f64(self, metric_id: MetricId, value: float) -> None: ...

    def record_i8(self, metric_id: MetricId, value: int) -> None:
        self.record_i64(metric_id, wrap_signed(value, 8))

    def record_i16(self, metric_id: MetricId, value: int) -> None:
        self.record_i64(metric_id, wrap_signed(value, 16))

    def record_i32(self, metric_id: MetricId, value: int) -> None:
        self.record_i64(metric_id, wrap_signed(value, 32))

    def record_u8(self, metric_id: MetricId, value: int) -> None:
        self.record_u64(metric_id, wrap_unsigned(value, 8))

    def record_u16(self, metric_id: MetricId, value: int) -> None:
        self.record_u64(metric_id, wrap_unsigned(value, 16))

    def record_u32(self, metric_id: MetricId, value: int) -> None:
        self.record_u64(metric_id, wrap_unsigned(value, 32))

    def record_f32(self, metric_id: MetricId, value: float) -> None:
        self.record_f64(metric_id, narrow_float32(value))

    def record(self, metric_id: MetricId, kind: MetricKind, value: Any) -> None:
        """Widen a value per its kind and hand it to the matching record_* method."""
        if kind is MetricKind.INT64:
            self.record_i64(metric_id, wrap_signed(value, 64))
        elif kind is MetricKind.UINT64:
            self.record_u64(metric_id, wrap_unsigned(value, 64))
        elif kind is MetricKind.FLOAT64:
            self.record_f64(metric_id, float(value))
        else:
            getattr(self, _RECORD_METHODS[kind])(metric_id, value)

    def timestamp(self, seconds: float) -> None:
        """Advance the time cursor. Recorders without a time axis ignore it."""


_RECORD_METHODS: Dict[MetricKind, str] = {
    MetricKind.INT8: "record_i8",
    MetricKind.INT16: "record_i16",
    MetricKind.INT32: "record_i32",
    MetricKind.UINT8: "record_u8",
    MetricKind.UINT16: "record_u16",
    MetricKind.UINT32: "record_u32",
    MetricKind.FLOAT32: "record_f32",
}


class CellState(IntEnum):
    UNINITIALIZED = 0
    INSTALLING = 1
    INSTALLED = 2


class RecorderCell:
    """
    Process-wide slot holding at most one Recorder, installed exactly once.

    install() arbitrates through a single locked test-and-set of the state
    (UNINITIALIZED -> INSTALLING). The recorder reference is stored before
    INSTALLED is published, so get() reads without locking and never sees a
    half-installed recorder. The installed recorder is never released.
    """

    def __init__(self) -> None:
        self._state = CellState.UNINITIALIZED
        self._recorder: Optional[Recorder] = None
        self._cas_lock = threading.Lock()

    @property
    def state(self) -> CellState:
        return self._state

    def install(self, recorder: Recorder) -> bool:
        with self._cas_lock:
            if self._state is not CellState.UNINITIALIZED:
                return False
            self._state = CellState.INSTALLING

        self._recorder = recorder
        self._state = CellState.INSTALLED
        return True

    def get(self) -> Optional[Recorder]:
        if self._state is not CellState.INSTALLED:
            return None
        return self._recorder


RECORDER = RecorderCell()


def install_recorder(recorder: Recorder) -> bool:
    """Install the process recorder. First caller wins; later calls return False."""
    return RECORDER.install(recorder)


def get_recorder() -> Optional[Recorder]:
    return RECORDER.get()
