"""
Process resolution using the 'psutil' library.

This module provides the PsutilProcessResolver class, which finds the pid of
a running process by its executable name.
"""

import logging

import psutil

from .base import AbstractProcessResolver

logger = logging.getLogger(__name__)


class PsutilProcessResolver(AbstractProcessResolver):
    """
    Resolves executable names to pids by scanning `psutil.process_iter`.

    The first process (in pid order) whose name equals the requested name
    wins. Processes that vanish or deny access while being inspected are
    skipped; they are expected races, not errors.
    """

    def __init__(self):
        # Attributes pre-fetched by psutil.process_iter for each process.
        self._iter_attrs = ["pid", "name"]

    def resolve(self, name: str) -> int:
        for proc in psutil.process_iter(self._iter_attrs):
            try:
                proc_info = proc.as_dict(attrs=self._iter_attrs)
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            if proc_info.get("name") == name:
                pid = proc_info.get("pid") or 0
                logger.debug(f"Resolved process '{name}' to PID {pid}")
                return pid
        logger.debug(f"No running process named '{name}'")
        return 0
