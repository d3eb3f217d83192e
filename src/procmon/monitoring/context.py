"""
Monitoring context shared by the collector loop and the exporter.

MonitorContext is created once by the composition root (the CLI, or a test)
and passed explicitly to every component that needs the selected metrics or
the per-process series.
"""

import logging
import threading
from typing import Dict, Iterable, List, Tuple

from ..catalog import Metric, resolve_metrics
from .series import MAX_SAMPLES, SeriesState

logger = logging.getLogger(__name__)


class MonitorContext:
    """
    Selected metrics plus the name -> SeriesState registry.

    The registry has its own lock, separate from the per-series locks. It is
    written only while names are registered at startup and read on every
    tick and every export afterwards.

    Attributes:
        metrics: Selected metrics, in catalog order.
        unknown_metrics: Configured names that are not in the catalog.
        max_samples: Retention per series.
    """

    def __init__(self, metrics: Iterable[Metric], max_samples: int = MAX_SAMPLES,
                 unknown_metrics: Iterable[str] = ()):
        self.metrics: List[Metric] = list(metrics)
        self.unknown_metrics: List[str] = list(unknown_metrics)
        self.max_samples = max_samples
        self._lock = threading.Lock()
        self._series: Dict[str, SeriesState] = {}

    @classmethod
    def from_names(cls, metric_names: Iterable[str],
                   max_samples: int = MAX_SAMPLES) -> "MonitorContext":
        """
        Build a context from configured metric names.

        Names that are not in the catalog are dropped and reported once with
        a warning; they never cause an error.
        """
        metrics, unknown = resolve_metrics(metric_names)
        if unknown:
            logger.warning(f"Ignoring unknown metric names: {', '.join(unknown)}")
        if not metrics:
            logger.warning("No known metrics selected; samples will only record presence")
        return cls(metrics, max_samples=max_samples, unknown_metrics=unknown)

    def register(self, names: Iterable[str]) -> None:
        """
        Create one empty series per process name.

        Raises:
            ValueError: If a name is already registered.
        """
        with self._lock:
            for name in names:
                if name in self._series:
                    raise ValueError(f"Process '{name}' is already registered")
                self._series[name] = SeriesState(self.max_samples)
                logger.info(f"Registered process '{name}' for monitoring")

    def names(self) -> List[str]:
        with self._lock:
            return list(self._series)

    def get_series(self, name: str) -> SeriesState:
        """
        Raises:
            KeyError: If the name was never registered.
        """
        with self._lock:
            return self._series[name]

    def items(self) -> List[Tuple[str, SeriesState]]:
        """Return (name, series) pairs; the series themselves are live."""
        with self._lock:
            return list(self._series.items())
