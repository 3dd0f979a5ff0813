# telemetry/config.py
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from telemetry.errors import TelemetryConfigError


@dataclass(frozen=True)
class TelemetryConfig:
    backend: str = "tabular"
    path: Optional[Path] = None           # None = default_dir / default_stem + backend extension
    default_dir: Path = Path("/tmp")
    default_stem: str = "out"
    register_timeout_s: Optional[float] = None   # None = wait for the writer indefinitely

    def with_overrides(self, **overrides: Any) -> "TelemetryConfig":
        clean = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **clean)


DEFAULTS = TelemetryConfig()


def default_output_path(extension: str, cfg: TelemetryConfig = DEFAULTS) -> Path:
    return cfg.default_dir / f"{cfg.default_stem}{extension}"


def _as_optional_float(data: dict, key: str) -> Optional[float]:
    raw = data.get(key)
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise TelemetryConfigError(
            f"Config key '{key}' must be a number.",
            details={"key": key, "value": raw},
        ) from None
    if value <= 0:
        raise TelemetryConfigError(
            f"Config key '{key}' must be > 0.",
            details={"key": key, "value": raw},
        )
    return value


def load_config(path: str | Path) -> TelemetryConfig:
    """
    Load a TelemetryConfig from a YAML file.

    Expected layout (every key optional):

        telemetry:
          backend: waveform
          path: /var/tmp/run.vcd
          default_dir: /var/tmp
          default_stem: run
          register_timeout_s: 2.0
    """
    path = Path(path)
    if not path.exists():
        raise TelemetryConfigError(
            f"Missing telemetry config file: {path}",
            details={"path": str(path)},
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise TelemetryConfigError(
            "Failed to parse telemetry config.",
            hint=str(e),
            details={"path": str(path)},
        ) from None

    if not isinstance(raw, dict):
        raise TelemetryConfigError("Telemetry config root must be a mapping.", details={"path": str(path)})

    data = raw.get("telemetry", {}) or {}
    if not isinstance(data, dict):
        raise TelemetryConfigError("'telemetry' node must be a mapping.", details={"path": str(path)})

    unknown = sorted(set(data) - {"backend", "path", "default_dir", "default_stem", "register_timeout_s"})
    if unknown:
        raise TelemetryConfigError(
            f"Unknown telemetry config keys: {', '.join(unknown)}",
            details={"path": str(path)},
        )

    cfg = DEFAULTS
    if data.get("backend") is not None:
        cfg = replace(cfg, backend=str(data["backend"]).strip().lower())
    if data.get("path") is not None:
        cfg = replace(cfg, path=Path(str(data["path"])))
    if data.get("default_dir") is not None:
        cfg = replace(cfg, default_dir=Path(str(data["default_dir"])))
    if data.get("default_stem") is not None:
        stem = str(data["default_stem"]).strip()
        if not stem:
            raise TelemetryConfigError("'default_stem' cannot be empty.", details={"path": str(path)})
        cfg = replace(cfg, default_stem=stem)

    timeout = _as_optional_float(data, "register_timeout_s")
    if timeout is not None:
        cfg = replace(cfg, register_timeout_s=timeout)

    return cfg
