# telemetry/backends/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from telemetry.facade.kinds import Metric
from telemetry.runtime.commands import Value


class Backend(ABC):
    """
    Output format driven by the writer thread.

    Contract:
      - every method is called from the writer thread only.
      - open() acquires the output; it raises on failure.
      - register() is called once per metric, identifiers are dense and increasing.
      - timestamp() advances the time cursor (seconds).
      - update() applies one value to one registered metric.
      - flush() pushes buffered output; close() flushes and releases the output.
    """

    #: Registry key.
    name: str = "backend"
    #: Default file extension (with dot).
    extension: str = ""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def register(self, metric: Metric) -> None: ...

    @abstractmethod
    def timestamp(self, seconds: float) -> None: ...

    @abstractmethod
    def update(self, metric: Metric, value: Value) -> None: ...

    @abstractmethod
    def flush(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...
