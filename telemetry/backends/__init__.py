# backends/__init__.py

from .base import Backend
from .registry import BackendRegistry
from .tabular import TabularBackend
from .waveform import WaveformBackend

__all__ = ["Backend", "BackendRegistry", "TabularBackend", "WaveformBackend"]
