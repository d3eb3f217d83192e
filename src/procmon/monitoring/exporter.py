"""
Point-in-time export of all series.
"""

import logging
from typing import Any, Dict, List

from ..models.samples import Sample
from .context import MonitorContext

logger = logging.getLogger(__name__)


class SnapshotExporter:
    """
    Copies every series for external consumers such as the HTTP layer.

    Each series is copied under its own lock, one at a time, so an export
    never holds up collection of unrelated processes. Safe to call from many
    request threads at once.
    """

    def __init__(self, context: MonitorContext):
        self.context = context

    def snapshot(self) -> Dict[str, List[Sample]]:
        """Return process name -> copy of its samples, oldest first."""
        return {name: series.snapshot() for name, series in self.context.items()}

    def export(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Return the JSON-ready snapshot.

        Shape: {process name: [{"timestamp": ms, "values": {metric: int}}]}
        """
        return {
            name: [sample.to_dict() for sample in samples]
            for name, samples in self.snapshot().items()
        }
