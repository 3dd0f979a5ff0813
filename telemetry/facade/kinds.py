# telemetry/facade/kinds.py
from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

MetricId = int

#: Returned when registration cannot complete; records against it are no-ops.
INVALID_METRIC_ID: MetricId = sys.maxsize

_FLT_MAX = 3.4028234663852886e38


class MetricKind(Enum):
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    UINT8 = "Uint8"
    UINT16 = "Uint16"
    UINT32 = "Uint32"
    UINT64 = "Uint64"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"

    @property
    def bits(self) -> int:
        return _LAYOUT[self][0]

    @property
    def signed(self) -> bool:
        return _LAYOUT[self][1]

    @property
    def is_float(self) -> bool:
        return self in (MetricKind.FLOAT32, MetricKind.FLOAT64)

    @classmethod
    def parse(cls, name: "str | MetricKind") -> "MetricKind":
        if isinstance(name, MetricKind):
            return name
        key = str(name).strip().lower()
        kind = _ALIASES.get(key)
        if kind is None:
            raise ValueError(f"Unsupported metric kind '{name}'")
        return kind


# kind -> (bits, signed)
_LAYOUT: Dict[MetricKind, Tuple[int, bool]] = {
    MetricKind.INT8: (8, True),
    MetricKind.INT16: (16, True),
    MetricKind.INT32: (32, True),
    MetricKind.INT64: (64, True),
    MetricKind.UINT8: (8, False),
    MetricKind.UINT16: (16, False),
    MetricKind.UINT32: (32, False),
    MetricKind.UINT64: (64, False),
    MetricKind.FLOAT32: (32, True),
    MetricKind.FLOAT64: (64, True),
}

_ALIASES: Dict[str, MetricKind] = {k.value.lower(): k for k in MetricKind}
_ALIASES.update({"f32": MetricKind.FLOAT32, "f64": MetricKind.FLOAT64})


@dataclass(frozen=True)
class Metric:
    name: str
    kind: MetricKind
    unit: str
    identifier: MetricId


def wrap_signed(value: int, bits: int) -> int:
    """Two's-complement wrap of an int into a signed `bits`-wide range."""
    mask = (1 << bits) - 1
    v = int(value) & mask
    return v - (1 << bits) if v >> (bits - 1) else v


def wrap_unsigned(value: int, bits: int) -> int:
    return int(value) & ((1 << bits) - 1)


def narrow_float32(value: float) -> float:
    """Round a float through IEEE single precision (overflow saturates to inf)."""
    v = float(value)
    if math.isfinite(v) and abs(v) > _FLT_MAX:
        return math.copysign(math.inf, v)
    return struct.unpack("<f", struct.pack("<f", v))[0]
