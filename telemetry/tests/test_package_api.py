from __future__ import annotations

from pathlib import Path

import telemetry
from telemetry import MetricKind, RecorderCell


def test_open_alias_and_function_api(tmp_path: Path):
    cell = RecorderCell()
    out = tmp_path / "api.csv"

    assert telemetry.open is telemetry.open_recorder

    with telemetry.open(out, cell=cell) as tr:
        assert isinstance(tr, telemetry.TelemetryRecorder)
        telemetry.metric("vbus", "V", MetricKind.FLOAT32, 3.25, cell=cell)
        telemetry.metric("ticks", "", "Uint8", 300, cell=cell)
        telemetry.set_current_time(0.5, cell=cell)

    assert out.read_text(encoding="utf-8") == "time,vbus,ticks\n0,3.25,44\n0.5,3.25,44\n"
