from __future__ import annotations

from pathlib import Path
import textwrap

import pytest

from telemetry.config import DEFAULTS, TelemetryConfig, default_output_path, load_config
from telemetry.errors import TelemetryConfigError


def _write(p: Path, text: str) -> Path:
    path = p / "telemetry.yml"
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


def test_defaults():
    assert DEFAULTS.backend == "tabular"
    assert DEFAULTS.path is None
    assert DEFAULTS.register_timeout_s is None
    assert default_output_path(".csv") == Path("/tmp/out.csv")
    assert default_output_path(".vcd") == Path("/tmp/out.vcd")


def test_load_config_happy_path(tmp_path: Path):
    path = _write(
        tmp_path,
        """
        telemetry:
          backend: Waveform
          path: /var/tmp/run.vcd
          default_dir: /var/tmp
          default_stem: run
          register_timeout_s: 2.5
        """,
    )
    cfg = load_config(path)
    assert cfg == TelemetryConfig(
        backend="waveform",
        path=Path("/var/tmp/run.vcd"),
        default_dir=Path("/var/tmp"),
        default_stem="run",
        register_timeout_s=2.5,
    )


def test_load_config_empty_file_gives_defaults(tmp_path: Path):
    path = _write(tmp_path, "")
    assert load_config(path) == DEFAULTS


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(TelemetryConfigError):
        load_config(tmp_path / "nope.yml")


def test_load_config_bad_yaml(tmp_path: Path):
    path = _write(tmp_path, "telemetry: [unclosed\n")
    with pytest.raises(TelemetryConfigError) as ei:
        load_config(path)
    assert ei.value.hint


@pytest.mark.parametrize(
    "body",
    [
        "telemetry:\n  register_timeout_s: soon\n",
        "telemetry:\n  register_timeout_s: -1\n",
        "telemetry:\n  colour: blue\n",
        "telemetry: 3\n",
        "- a\n- b\n",
        "telemetry:\n  default_stem: '  '\n",
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, body: str):
    path = tmp_path / "bad.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(TelemetryConfigError):
        load_config(path)


def test_with_overrides_ignores_none():
    cfg = DEFAULTS.with_overrides(backend="waveform", path=None)
    assert cfg.backend == "waveform"
    assert cfg.path is None
