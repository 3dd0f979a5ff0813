# telemetry/runtime/commands.py
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Union

from telemetry.facade.kinds import MetricId, MetricKind

if TYPE_CHECKING:
    from ._internal.pending_registration import PendingRegistration


def format_float(value: float) -> str:
    """
    Locale-independent decimal text for a float.

    Shortest round-trip digits, never exponent notation, no trailing ".0":
    1.0 -> "1", 3.5 -> "3.5", 1e-7 -> "0.0000001".
    """
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"

    text = format(Decimal(repr(v)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class ValueType(Enum):
    INT64 = "Int64"
    UINT64 = "Uint64"
    FLOAT64 = "Float64"


@dataclass(frozen=True, slots=True)
class Value:
    """A widened sample as it crosses the channel."""
    type: ValueType
    raw: Union[int, float]

    @classmethod
    def int64(cls, v: int) -> "Value":
        return cls(ValueType.INT64, int(v))

    @classmethod
    def uint64(cls, v: int) -> "Value":
        return cls(ValueType.UINT64, int(v))

    @classmethod
    def float64(cls, v: float) -> "Value":
        return cls(ValueType.FLOAT64, float(v))

    def __str__(self) -> str:
        if self.type is ValueType.FLOAT64:
            return format_float(self.raw)
        return str(int(self.raw))


@dataclass(frozen=True, slots=True)
class Register:
    name: str
    kind: MetricKind
    unit: str
    reply: "PendingRegistration"


@dataclass(frozen=True, slots=True)
class Timestamp:
    seconds: float


@dataclass(frozen=True, slots=True)
class Update:
    metric_id: MetricId
    value: Value


@dataclass(frozen=True, slots=True)
class Exit:
    pass


Command = Union[Register, Timestamp, Update, Exit]
