"""
Configuration data models.

This module contains the configuration data structures for sample collection,
the HTTP server and logging, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from typing import List

from ..catalog import DEFAULT_METRICS


@dataclass
class CollectionConfig:
    """
    Settings for the collector loop, from `[monitor.collection]`.
    """

    # Executable names to monitor (e.g., ["python3", "nginx"]).
    processes: List[str] = field(default_factory=lambda: ["python3"])
    # Metric names as written by the user; unknown names are dropped later.
    metrics: List[str] = field(default_factory=lambda: list(DEFAULT_METRICS))
    # Seconds between two collection ticks.
    interval_seconds: float = 1.0
    # Number of most recent samples retained per process.
    max_samples: int = 300
    # Root of the procfs mount; overridable for tests and containers.
    proc_root: str = "/proc"
    # Upper bound on threads used to collect processes within a tick.
    max_workers: int = 8


@dataclass
class ServerConfig:
    """
    Settings for the HTTP server, from `[monitor.server]`.
    """

    host: str = "0.0.0.0"
    port: int = 8090


@dataclass
class MonitorConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    collection: CollectionConfig = field(default_factory=CollectionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    # [monitor.logging] level
    log_level: str = "INFO"
