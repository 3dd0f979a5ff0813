from __future__ import annotations

import math

import pytest

from telemetry.facade.kinds import (
    INVALID_METRIC_ID,
    MetricKind,
    narrow_float32,
    wrap_signed,
    wrap_unsigned,
)


def test_parse_accepts_names_case_insensitive_and_float_aliases():
    assert MetricKind.parse("Int32") is MetricKind.INT32
    assert MetricKind.parse("uint8") is MetricKind.UINT8
    assert MetricKind.parse("FLOAT64") is MetricKind.FLOAT64
    assert MetricKind.parse("f32") is MetricKind.FLOAT32
    assert MetricKind.parse("f64") is MetricKind.FLOAT64
    assert MetricKind.parse(MetricKind.INT8) is MetricKind.INT8


def test_parse_unknown_raises():
    with pytest.raises(ValueError):
        MetricKind.parse("Int128")


def test_kind_layout():
    assert MetricKind.INT16.bits == 16 and MetricKind.INT16.signed
    assert MetricKind.UINT32.bits == 32 and not MetricKind.UINT32.signed
    assert MetricKind.FLOAT32.is_float
    assert not MetricKind.INT64.is_float


def test_wrap_signed_sign_extends_and_wraps():
    assert wrap_signed(-1, 8) == -1
    assert wrap_signed(127, 8) == 127
    assert wrap_signed(128, 8) == -128
    assert wrap_signed(0xFFFF, 16) == -1
    assert wrap_signed(-(2**63), 64) == -(2**63)


def test_wrap_unsigned_masks():
    assert wrap_unsigned(255, 8) == 255
    assert wrap_unsigned(256, 8) == 0
    assert wrap_unsigned(-1, 16) == 0xFFFF


def test_narrow_float32_rounds_through_single_precision():
    assert narrow_float32(0.1) != 0.1
    assert narrow_float32(0.5) == 0.5
    assert narrow_float32(1e39) == math.inf
    assert narrow_float32(-1e39) == -math.inf
    assert math.isnan(narrow_float32(math.nan))


def test_invalid_id_is_max_index():
    import sys
    assert INVALID_METRIC_ID == sys.maxsize
