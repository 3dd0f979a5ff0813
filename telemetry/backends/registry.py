# telemetry/backends/registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Type

from telemetry.errors import TelemetryConfigError

from .base import Backend
from .tabular import TabularBackend
from .waveform import WaveformBackend


class BackendRegistry:
    """
    Maps backend names (case-insensitive) and file extensions -> Backend classes.
    """

    def __init__(self, backends: Dict[str, Type[Backend]]):
        self._backends: Dict[str, Type[Backend]] = {k.lower(): v for k, v in backends.items()}

    @classmethod
    def default(cls) -> "BackendRegistry":
        return cls(
            backends={
                TabularBackend.name: TabularBackend,
                WaveformBackend.name: WaveformBackend,
            }
        )

    def names(self) -> list[str]:
        return sorted(self._backends)

    def has(self, name: str) -> bool:
        return name.lower() in self._backends

    def get_class(self, name: str) -> Type[Backend]:
        key = name.lower()
        if key not in self._backends:
            raise TelemetryConfigError(
                f"Unknown telemetry backend '{name}'.",
                hint=f"Known backends: {', '.join(self.names())}",
                details={"backend": name},
            )
        return self._backends[key]

    def name_for_path(self, path: str | Path) -> Optional[str]:
        """Backend name whose extension matches the path suffix, if any."""
        suffix = Path(path).suffix.lower()
        if not suffix:
            return None
        for key, backend_cls in self._backends.items():
            if backend_cls.extension.lower() == suffix:
                return key
        return None

    def create(self, name: str, path: str | Path, **params) -> Backend:
        backend_cls = self.get_class(name)
        return backend_cls(path, **params)
