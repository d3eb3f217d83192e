"""
Sampling and derivation engine.

- series: bounded per-process samples with delta derivation
- context: selected metrics and the name -> series registry
- collector_loop: periodic collection driving the series
- exporter: consistent copies of all series for the HTTP layer
"""

from .collector_loop import CollectorLoop, now_ms, start_collecting
from .context import MonitorContext
from .exporter import SnapshotExporter
from .series import MAX_SAMPLES, SeriesState

__all__ = [
    "CollectorLoop",
    "MAX_SAMPLES",
    "MonitorContext",
    "SeriesState",
    "SnapshotExporter",
    "now_ms",
    "start_collecting",
]
