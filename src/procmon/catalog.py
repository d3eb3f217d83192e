"""
Static catalog of the per-process metrics procmon can sample.

Every metric is read from one kernel accounting source under /proc and is
either an absolute reading (passed through as-is) or a cumulative counter
whose per-interval delta is reported instead of the raw value.

The catalog is an enumeration so the collection hot path never dispatches on
metric name strings; string lookups are confined to configuration parsing via
`resolve_metrics`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Tuple

logger = logging.getLogger(__name__)


class MetricKind(Enum):
    """How a raw reading turns into an emitted value."""

    ABSOLUTE = "absolute"
    CUMULATIVE_DELTA = "cumulative_delta"


class Source(Enum):
    """Kernel accounting sources, each a file under /proc/<pid>/."""

    STAT = "stat"
    STATM = "statm"
    STATUS = "status"
    IO = "io"

    def path_for(self, pid: int, proc_root: str = "/proc") -> str:
        """Return the path of this source for the given pid."""
        return f"{proc_root}/{pid}/{self.value}"


@dataclass(frozen=True)
class MetricDescriptor:
    """
    Immutable description of a single metric.

    Attributes:
        name: Unique key used in configuration and in exported samples.
        label: Human-readable label for the dashboard.
        source: The kernel source the raw value is extracted from.
        kind: Absolute reading or cumulative counter.
        unit: Unit of the emitted value, shown on the dashboard axis.
    """

    name: str
    label: str
    source: Source
    kind: MetricKind
    unit: str


class Metric(Enum):
    """All supported metrics, ordered by source."""

    # /proc/<pid>/stat
    CPU = MetricDescriptor(
        "cpu", "CPU time (user + system)", Source.STAT,
        MetricKind.CUMULATIVE_DELTA, "ticks/interval",
    )
    MINFLT = MetricDescriptor(
        "minflt", "Minor page faults", Source.STAT,
        MetricKind.CUMULATIVE_DELTA, "faults/interval",
    )
    MAJFLT = MetricDescriptor(
        "majflt", "Major page faults", Source.STAT,
        MetricKind.CUMULATIVE_DELTA, "faults/interval",
    )
    THREADS = MetricDescriptor(
        "threads", "Threads", Source.STAT, MetricKind.ABSOLUTE, "threads",
    )
    # /proc/<pid>/statm
    VSIZE = MetricDescriptor(
        "vsize", "Virtual memory size", Source.STATM, MetricKind.ABSOLUTE, "pages",
    )
    RSS = MetricDescriptor(
        "rss", "Resident set size", Source.STATM, MetricKind.ABSOLUTE, "pages",
    )
    SHARED = MetricDescriptor(
        "shared", "Shared pages", Source.STATM, MetricKind.ABSOLUTE, "pages",
    )
    # /proc/<pid>/status
    VM_HWM = MetricDescriptor(
        "vm_hwm", "Peak resident set size", Source.STATUS, MetricKind.ABSOLUTE, "kB",
    )
    VM_SWAP = MetricDescriptor(
        "vm_swap", "Swapped-out memory", Source.STATUS, MetricKind.ABSOLUTE, "kB",
    )
    CTXT_VOLUNTARY = MetricDescriptor(
        "ctxt_voluntary", "Voluntary context switches", Source.STATUS,
        MetricKind.CUMULATIVE_DELTA, "switches/interval",
    )
    CTXT_INVOLUNTARY = MetricDescriptor(
        "ctxt_involuntary", "Involuntary context switches", Source.STATUS,
        MetricKind.CUMULATIVE_DELTA, "switches/interval",
    )
    # /proc/<pid>/io
    READ_CHARS = MetricDescriptor(
        "read_chars", "Characters read", Source.IO,
        MetricKind.CUMULATIVE_DELTA, "bytes/interval",
    )
    WRITE_CHARS = MetricDescriptor(
        "write_chars", "Characters written", Source.IO,
        MetricKind.CUMULATIVE_DELTA, "bytes/interval",
    )
    READ_BYTES = MetricDescriptor(
        "read_bytes", "Storage bytes read", Source.IO,
        MetricKind.CUMULATIVE_DELTA, "bytes/interval",
    )
    WRITE_BYTES = MetricDescriptor(
        "write_bytes", "Storage bytes written", Source.IO,
        MetricKind.CUMULATIVE_DELTA, "bytes/interval",
    )

    @property
    def metric_name(self) -> str:
        return self.value.name

    @property
    def label(self) -> str:
        return self.value.label

    @property
    def source(self) -> Source:
        return self.value.source

    @property
    def kind(self) -> MetricKind:
        return self.value.kind

    @property
    def unit(self) -> str:
        return self.value.unit

    @property
    def is_cumulative(self) -> bool:
        return self.value.kind is MetricKind.CUMULATIVE_DELTA


DEFAULT_METRICS: List[str] = ["cpu", "vsize", "rss"]

_METRICS_BY_NAME: Dict[str, Metric] = {m.metric_name: m for m in Metric}


def get_metric(name: str) -> Metric:
    """
    Look up a metric by its configuration name.

    Raises:
        KeyError: If the name is not in the catalog.
    """
    return _METRICS_BY_NAME[name]


def metric_names() -> List[str]:
    """Return all catalog metric names in catalog order."""
    return list(_METRICS_BY_NAME)


def resolve_metrics(names: Iterable[str]) -> Tuple[List[Metric], List[str]]:
    """
    Translate configured metric names into catalog members.

    Unrecognized names are not an error: they are returned separately so the
    caller can warn about them once at startup, and otherwise have no effect.

    Args:
        names: Metric names as written in the configuration or on the CLI.

    Returns:
        A tuple of (selected metrics in catalog order without duplicates,
        unknown names in the order they were given).
    """
    requested = set()
    unknown: List[str] = []
    for raw_name in names:
        name = raw_name.strip()
        if not name:
            continue
        if name in _METRICS_BY_NAME:
            requested.add(_METRICS_BY_NAME[name])
        elif name not in unknown:
            unknown.append(name)

    selected = [m for m in Metric if m in requested]
    return selected, unknown


def group_by_source(metrics: Iterable[Metric]) -> Dict[Source, List[Metric]]:
    """
    Group metrics by the kernel source they are read from.

    Both the sources and the metrics within each source keep catalog order.
    """
    wanted = set(metrics)
    grouped: Dict[Source, List[Metric]] = {}
    for metric in Metric:
        if metric in wanted:
            grouped.setdefault(metric.source, []).append(metric)
    return grouped
