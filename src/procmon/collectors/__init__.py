"""
Raw data collection for monitored processes.

- base: reader and resolver interfaces used by the collector loop
- procfs_reader: reads accounting counters from /proc/<pid>/*
- process_resolver: maps executable names to pids via psutil
"""

from .base import AbstractCounterReader, AbstractProcessResolver
from .procfs_reader import (
    ProcfsCounterReader,
    parse_io,
    parse_stat,
    parse_statm,
    parse_status,
)
from .process_resolver import PsutilProcessResolver

__all__ = [
    "AbstractCounterReader",
    "AbstractProcessResolver",
    "ProcfsCounterReader",
    "PsutilProcessResolver",
    "parse_io",
    "parse_stat",
    "parse_statm",
    "parse_status",
]
