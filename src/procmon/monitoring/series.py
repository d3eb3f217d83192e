"""
Bounded per-process sample series.

Each monitored process name owns one SeriesState. The collector loop is the
only writer; HTTP requests read copies taken under the same lock. The lock is
held only while deriving values and appending, never across procfs I/O.
"""

import logging
import threading
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional

from ..catalog import Metric
from ..models.samples import Sample

logger = logging.getLogger(__name__)

MAX_SAMPLES = 300


class SeriesState:
    """
    Time-ordered samples for one process plus the state needed for deltas.

    Cumulative counters are reported as the difference from the previous
    successful reading. A delta is only emitted when the series is
    initialized, i.e. the previous collection found the process. Any absence
    clears the initialized flag so the next successful collection
    re-baselines instead of reporting a delta spanning the gap.

    Restarts that happen between two ticks without an observed absence are
    not detected: the raw counter of the new process is diffed against the
    old one once, producing a single spurious value.
    """

    def __init__(self, max_samples: int = MAX_SAMPLES):
        if max_samples < 1:
            raise ValueError(f"max_samples must be >= 1, got {max_samples}")
        self.max_samples = max_samples
        self._lock = threading.Lock()
        # deque(maxlen=...) evicts the oldest sample on every overflowing append.
        self._samples: Deque[Sample] = deque(maxlen=max_samples)
        self._previous_raw: Dict[Metric, int] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def _append(self, timestamp: int, values: Dict[str, int]) -> Sample:
        # Must hold self._lock. Clamp so timestamps never go backwards when
        # the wall clock is stepped.
        if self._samples and timestamp < self._samples[-1].timestamp:
            timestamp = self._samples[-1].timestamp
        sample = Sample(timestamp=timestamp, values=values)
        self._samples.append(sample)
        return sample

    def record_absence(self, timestamp: int) -> Sample:
        """
        Record a tick in which the process was not running.

        Appends a sample with no values and clears the initialized flag.
        The previous raw values are kept but will not be used for a delta.
        """
        with self._lock:
            self._initialized = False
            return self._append(timestamp, {})

    def record_observation(
        self,
        timestamp: int,
        raw_values: Dict[Metric, int],
        requested: Iterable[Metric],
    ) -> Sample:
        """
        Derive emitted values from raw readings and append them as a sample.

        Args:
            timestamp: Collection time in milliseconds since the epoch.
            raw_values: Raw readings for this tick. Metrics whose source
                could not be read are simply missing.
            requested: The metrics selected for collection.

        Returns:
            The appended sample.
        """
        with self._lock:
            values: Dict[str, int] = {}
            for metric in requested:
                raw = raw_values.get(metric)
                if raw is None:
                    continue
                if not metric.is_cumulative:
                    values[metric.metric_name] = raw
                elif self._initialized and metric in self._previous_raw:
                    values[metric.metric_name] = raw - self._previous_raw[metric]

            self._previous_raw.update(raw_values)
            self._initialized = True
            return self._append(timestamp, values)

    def snapshot(self) -> List[Sample]:
        """Return an independent copy of the samples, oldest first."""
        with self._lock:
            return list(self._samples)

    def latest(self) -> Optional[Sample]:
        """Return the most recent sample, or None if nothing was recorded."""
        with self._lock:
            return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
