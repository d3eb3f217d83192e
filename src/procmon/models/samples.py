"""
Sample data model.

A sample is one collection tick's worth of emitted values for one monitored
process. A metric missing from `values` means "no value for this tick"
(process not found, source unreadable, or no baseline for a delta yet),
which is deliberately different from a measured zero.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class Sample:
    """
    Values emitted for one process at one tick. Never mutated after append.

    Attributes:
        timestamp: Milliseconds since the epoch, assigned at collection time.
        values: Read-only view of metric name -> emitted integer value.
    """

    timestamp: int
    values: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        # Private copy behind a read-only view, so neither the caller's dict
        # nor a snapshot reader can change a stored sample.
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready representation used by the metrics endpoint."""
        return {"timestamp": self.timestamp, "values": dict(self.values)}
