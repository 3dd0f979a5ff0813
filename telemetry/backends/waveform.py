# telemetry/backends/waveform.py
from __future__ import annotations

import logging
import math
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Set, TextIO, Tuple

from telemetry.facade.kinds import Metric
from telemetry.runtime.commands import Value

from .base import Backend
from .codec import codec_for, declared_width, decode_payload, encode_value, payload_bits

NS_PER_S = 1_000_000_000
SCOPE = "telemetry"

# printable ASCII '!'..'~'
_IDENT_FIRST = 33
_IDENT_BASE = 94


def _safe_name(name: str) -> str:
    s = re.sub(r"[^0-9A-Za-z_]+", "_", name.strip())
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "metric"


def seconds_to_ticks(seconds: float) -> int:
    """Fractional seconds -> integer nanoseconds (truncated)."""
    return int(float(seconds) * NS_PER_S)


def ident_code(identifier: int) -> str:
    """Short VCD identifier code for a metric id: '!', '"', ..., '~', '!"', ..."""
    chars = []
    n = identifier
    while True:
        n, r = divmod(n, _IDENT_BASE)
        chars.append(chr(_IDENT_FIRST + r))
        if n == 0:
            return "".join(chars)


def format_real(value: float) -> str:
    # 17 significant digits round-trip any binary64
    return format(value, ".17g")


class WaveformBackend(Backend):
    """
    Value Change Dump trace at a 1 ns timescale, one variable per metric.

    Kind mapping:
      - Int8/Uint8       -> integer, 8 bits
      - other integers   -> integer, 64 bits (two's complement for signed)
      - Float32/Float64  -> real, 64 bits

    Time is a monotonic integer tick count. A timestamp earlier than the
    current cursor, or one that is not finite, is rejected and logged; the
    cursor keeps its value.

    Metrics may register at any point of the run. Value changes go to a
    spool file while the run is live; close() writes the declarations of
    every registered metric followed by the spooled changes. No initial
    value dump is written: a variable has no value before its first update.
    """

    name = "waveform"
    extension = ".vcd"
    timescale = "1 ns"

    def __init__(self, path: str | Path, *, logger: Optional[logging.Logger] = None):
        super().__init__(path)
        self._log = logger or logging.getLogger(__name__)

        self._f: Optional[TextIO] = None
        self._spool: Optional[TextIO] = None

        # (identifier, var type, width, var name) in registration order
        self._decls: List[Tuple[int, str, int, str]] = []
        self._idents: Dict[int, str] = {}
        self._used_names: Set[str] = set()

        self._ticks = 0
        self._last_emitted: Optional[int] = None
        self.changes_written = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def declared(self) -> int:
        return len(self._decls)

    def open(self) -> None:
        self._f = open(self.path, "w", encoding="utf-8")
        try:
            self._spool = tempfile.TemporaryFile("w+", encoding="utf-8")
        except Exception:
            self._f.close()
            self._f = None
            raise

    def register(self, metric: Metric) -> None:
        if self._f is None:
            raise RuntimeError("WaveformBackend is not open")

        var_name = _safe_name(metric.name)
        if var_name in self._used_names:
            var_name = f"{var_name}_{metric.identifier}"
        self._used_names.add(var_name)

        codec = codec_for(metric.kind)
        self._decls.append((metric.identifier, codec.var_type, declared_width(metric.kind), var_name))
        self._idents[metric.identifier] = ident_code(metric.identifier)

    def timestamp(self, seconds: float) -> None:
        if not math.isfinite(seconds):
            self._log.warning("WAVEFORM_TIME_INVALID seconds=%r (ignored)", seconds)
            return

        ticks = seconds_to_ticks(seconds)
        if ticks < self._ticks:
            self._log.warning(
                "WAVEFORM_TIME_REGRESSION ticks=%d current=%d (ignored)",
                ticks,
                self._ticks,
            )
            return
        self._ticks = ticks

    def update(self, metric: Metric, value: Value) -> None:
        ident = self._idents.get(metric.identifier)
        if ident is None:
            return
        if self._spool is None:
            raise RuntimeError("WaveformBackend is not open")

        payload = encode_value(metric.kind, value.raw)
        if metric.kind.is_float:
            line = f"r{format_real(decode_payload(metric.kind, payload))} {ident}\n"
        else:
            line = f"b{payload_bits(payload):b} {ident}\n"

        if self._last_emitted != self._ticks:
            self._spool.write(f"#{self._ticks}\n")
            self._last_emitted = self._ticks
        self._spool.write(line)
        self.changes_written += 1

    def flush(self) -> None:
        if self._spool is not None:
            self._spool.flush()

    def close(self) -> None:
        f, self._f = self._f, None
        spool, self._spool = self._spool, None
        try:
            if f is not None:
                self._write_header(f)
                if spool is not None:
                    spool.seek(0)
                    shutil.copyfileobj(spool, f)
                f.flush()
        finally:
            if spool is not None:
                spool.close()
            if f is not None:
                f.close()

    def _write_header(self, f: TextIO) -> None:
        f.write("$version telemetry $end\n")
        f.write(f"$timescale {self.timescale} $end\n")
        f.write(f"$scope module {SCOPE} $end\n")
        for identifier, var_type, width, var_name in self._decls:
            f.write(f"$var {var_type} {width} {self._idents[identifier]} {var_name} $end\n")
        f.write("$upscope $end\n")
        f.write("$enddefinitions $end\n")
