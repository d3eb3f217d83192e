"""
procmon: Lightweight per-process resource monitoring for Linux.

This package samples /proc accounting counters for a set of named processes
once per interval, derives per-interval deltas for cumulative counters, keeps
a bounded recent history per process, and serves it over HTTP together with a
live dashboard.

The package is organized into specialized modules:
- catalog: The static set of supported metrics and their kernel sources
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- collectors: Process resolution and raw counter reading
- monitoring: Series store, collector loop and snapshot export
- server: HTTP API and dashboard
- cli: Command-line interface

Usage:
    From command line:
        procmon --processes nginx,postgres --metrics cpu,rss

    Programmatically:
        from procmon import ProcfsCounterReader, PsutilProcessResolver, start_collecting
        loop = start_collecting(["nginx"], ["cpu", "rss"],
                                ProcfsCounterReader(), PsutilProcessResolver())
        SnapshotExporter(loop.context).export()
"""

from .catalog import Metric, MetricKind, Source, resolve_metrics
from .collectors import ProcfsCounterReader, PsutilProcessResolver
from .config import get_config, clear_config_cache, set_config_path
from .models import MonitorConfig, Sample
from .monitoring import (
    CollectorLoop,
    MonitorContext,
    SeriesState,
    SnapshotExporter,
    start_collecting,
)
from .validation import ValidationError

__version__ = "1.0.0"

__all__ = [
    # Catalog
    "Metric",
    "MetricKind",
    "Source",
    "resolve_metrics",
    # Collection
    "ProcfsCounterReader",
    "PsutilProcessResolver",
    "CollectorLoop",
    "MonitorContext",
    "SeriesState",
    "SnapshotExporter",
    "start_collecting",
    # Configuration
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "MonitorConfig",
    "Sample",
    "ValidationError",
]
