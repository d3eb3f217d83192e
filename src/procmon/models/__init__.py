"""
Data models for the monitoring system.

Configuration Models:
- Collection, server and logging settings loaded from TOML

Sample Models:
- Per-tick emitted values for one monitored process
"""

from .config import CollectionConfig, MonitorConfig, ServerConfig
from .samples import Sample

__all__ = [
    # Configuration
    "CollectionConfig",
    "MonitorConfig",
    "ServerConfig",
    # Samples
    "Sample",
]
