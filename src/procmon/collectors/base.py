"""
Defines the abstract interfaces the collector loop depends on.

This module provides:
- AbstractCounterReader: reads raw counter values for one pid.
- AbstractProcessResolver: maps an executable name to a pid.

Both are external collaborators of the collector loop; concrete
implementations live in `procfs_reader` and `process_resolver`, and tests
substitute simple doubles.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable

from ..catalog import Metric

logger = logging.getLogger(__name__)


class AbstractCounterReader(ABC):
    """
    Abstract base class for raw counter readers.

    A reader turns (pid, requested metrics) into raw integer values. It must
    read each kernel source at most once per call, and a failure reading or
    parsing one source must only drop that source's metrics from the result.
    """

    @abstractmethod
    def read(self, pid: int, metrics: Iterable[Metric]) -> Dict[Metric, int]:
        """
        Read raw values for the requested metrics of one process.

        Args:
            pid: A positive process id.
            metrics: The metrics to read.

        Returns:
            A mapping from metric to raw value. Metrics that could not be
            read or parsed are absent from the mapping.
        """
        pass


class AbstractProcessResolver(ABC):
    """
    Abstract base class for process resolvers.
    """

    @abstractmethod
    def resolve(self, name: str) -> int:
        """
        Return the pid of a running process with this executable name.

        Returns:
            The pid, or 0 when no such process is running.
        """
        pass
