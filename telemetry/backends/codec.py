# telemetry/backends/codec.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union
import struct

from telemetry.facade.kinds import MetricKind, wrap_signed, wrap_unsigned


@dataclass(frozen=True)
class PrimitiveCodec:
    fmt: str        # little-endian struct format
    size: int       # payload bytes
    var_type: str   # waveform variable type


# 8-bit kinds keep their own byte; wider integers travel widened to 64 bits.
PRIMITIVES: Dict[MetricKind, PrimitiveCodec] = {
    MetricKind.INT8:    PrimitiveCodec(fmt="<b", size=1, var_type="integer"),
    MetricKind.UINT8:   PrimitiveCodec(fmt="<B", size=1, var_type="integer"),
    MetricKind.INT16:   PrimitiveCodec(fmt="<q", size=8, var_type="integer"),
    MetricKind.INT32:   PrimitiveCodec(fmt="<q", size=8, var_type="integer"),
    MetricKind.INT64:   PrimitiveCodec(fmt="<q", size=8, var_type="integer"),
    MetricKind.UINT16:  PrimitiveCodec(fmt="<Q", size=8, var_type="integer"),
    MetricKind.UINT32:  PrimitiveCodec(fmt="<Q", size=8, var_type="integer"),
    MetricKind.UINT64:  PrimitiveCodec(fmt="<Q", size=8, var_type="integer"),
    MetricKind.FLOAT32: PrimitiveCodec(fmt="<d", size=8, var_type="real"),
    MetricKind.FLOAT64: PrimitiveCodec(fmt="<d", size=8, var_type="real"),
}


def codec_for(kind: MetricKind) -> PrimitiveCodec:
    return PRIMITIVES[kind]


def declared_width(kind: MetricKind) -> int:
    """Declared variable width in bits."""
    return PRIMITIVES[kind].size * 8


def encode_value(kind: MetricKind, raw: Union[int, float]) -> bytes:
    """Fixed-size little-endian payload of `raw` for a metric of `kind`."""
    codec = PRIMITIVES[kind]
    if kind.is_float:
        return struct.pack(codec.fmt, float(raw))

    bits = codec.size * 8
    if kind.signed:
        return struct.pack(codec.fmt, wrap_signed(int(raw), bits))
    return struct.pack(codec.fmt, wrap_unsigned(int(raw), bits))


def decode_payload(kind: MetricKind, payload: bytes) -> Union[int, float]:
    codec = PRIMITIVES[kind]
    if len(payload) != codec.size:
        raise ValueError(f"Payload length {len(payload)} != expected {codec.size} for '{kind.value}'")
    return struct.unpack(codec.fmt, payload)[0]


def payload_bits(payload: bytes) -> int:
    """Payload read as an unsigned little-endian bit vector."""
    return int.from_bytes(payload, "little", signed=False)
