"""
Raw counter reader backed by the Linux /proc filesystem.

This module provides the ProcfsCounterReader class and the pure parsers for
each supported source:

- /proc/<pid>/stat: whitespace-delimited fields following the "(comm)" field
- /proc/<pid>/statm: whitespace-delimited page counts
- /proc/<pid>/status: "Key:<tab>value [kB]" lines
- /proc/<pid>/io: "key: value" lines, starting with "rchar: N"

Processes exiting between resolution and read is an expected condition, so
read failures are logged at debug level and result in missing values rather
than exceptions.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from ..catalog import Metric, Source, group_by_source
from .base import AbstractCounterReader

logger = logging.getLogger(__name__)

# Kernel counters are plain ASCII decimals, optionally negative.
_DECIMAL_RE = re.compile(r"-?[0-9]+")

# Zero-based positions in the fields that follow "(comm)" in /proc/<pid>/stat.
# The kernel documents these as 1-based field numbers starting at pid, so
# field N is at index N - 3 once pid and comm are stripped.
_STAT_MINFLT = 10 - 3
_STAT_MAJFLT = 12 - 3
_STAT_UTIME = 14 - 3
_STAT_STIME = 15 - 3
_STAT_NUM_THREADS = 20 - 3

_STATM_FIELDS: Dict[Metric, int] = {
    Metric.VSIZE: 0,
    Metric.RSS: 1,
    Metric.SHARED: 2,
}

_STATUS_KEYS: Dict[Metric, str] = {
    Metric.VM_HWM: "VmHWM",
    Metric.VM_SWAP: "VmSwap",
    Metric.CTXT_VOLUNTARY: "voluntary_ctxt_switches",
    Metric.CTXT_INVOLUNTARY: "nonvoluntary_ctxt_switches",
}

_IO_KEYS: Dict[Metric, str] = {
    Metric.READ_CHARS: "rchar",
    Metric.WRITE_CHARS: "wchar",
    Metric.READ_BYTES: "read_bytes",
    Metric.WRITE_BYTES: "write_bytes",
}


def _to_int(text: Optional[str]) -> Optional[int]:
    """Parse a decimal integer, returning None instead of raising."""
    if text is None or not _DECIMAL_RE.fullmatch(text):
        return None
    return int(text)


def _field(fields: List[str], index: int) -> Optional[int]:
    if index >= len(fields):
        return None
    return _to_int(fields[index])


def _parse_key_values(text: str) -> Dict[str, str]:
    """Parse "key: value ..." lines into key -> first token of value."""
    result: Dict[str, str] = {}
    for line in text.splitlines():
        key, sep, rest = line.partition(":")
        if not sep:
            continue
        tokens = rest.split()
        if tokens:
            result[key.strip()] = tokens[0]
    return result


def parse_stat(text: str, metrics: Iterable[Metric]) -> Dict[Metric, int]:
    """
    Extract raw values from the contents of /proc/<pid>/stat.

    The comm field is wrapped in parentheses and may itself contain spaces
    or parentheses, so fields are split after the last ')'.
    """
    rparen = text.rfind(")")
    if rparen == -1:
        logger.debug("Malformed stat contents: missing ')' after comm")
        return {}
    fields = text[rparen + 1:].split()

    extractors: Dict[Metric, Callable[[], Optional[int]]] = {
        Metric.MINFLT: lambda: _field(fields, _STAT_MINFLT),
        Metric.MAJFLT: lambda: _field(fields, _STAT_MAJFLT),
        Metric.THREADS: lambda: _field(fields, _STAT_NUM_THREADS),
    }

    result: Dict[Metric, int] = {}
    for metric in metrics:
        if metric is Metric.CPU:
            utime = _field(fields, _STAT_UTIME)
            stime = _field(fields, _STAT_STIME)
            value = utime + stime if utime is not None and stime is not None else None
        elif metric in extractors:
            value = extractors[metric]()
        else:
            continue
        if value is not None:
            result[metric] = value
    return result


def parse_statm(text: str, metrics: Iterable[Metric]) -> Dict[Metric, int]:
    """Extract raw values from the contents of /proc/<pid>/statm."""
    fields = text.split()
    result: Dict[Metric, int] = {}
    for metric in metrics:
        index = _STATM_FIELDS.get(metric)
        if index is None:
            continue
        value = _field(fields, index)
        if value is not None:
            result[metric] = value
    return result


def parse_status(text: str, metrics: Iterable[Metric]) -> Dict[Metric, int]:
    """Extract raw values from the contents of /proc/<pid>/status."""
    return _extract_keyed(_parse_key_values(text), _STATUS_KEYS, metrics)


def parse_io(text: str, metrics: Iterable[Metric]) -> Dict[Metric, int]:
    """Extract raw values from the contents of /proc/<pid>/io."""
    return _extract_keyed(_parse_key_values(text), _IO_KEYS, metrics)


def _extract_keyed(
    pairs: Dict[str, str], keys: Dict[Metric, str], metrics: Iterable[Metric]
) -> Dict[Metric, int]:
    result: Dict[Metric, int] = {}
    for metric in metrics:
        key = keys.get(metric)
        if key is None:
            continue
        value = _to_int(pairs.get(key))
        if value is not None:
            result[metric] = value
    return result


SOURCE_PARSERS: Dict[Source, Callable[[str, Iterable[Metric]], Dict[Metric, int]]] = {
    Source.STAT: parse_stat,
    Source.STATM: parse_statm,
    Source.STATUS: parse_status,
    Source.IO: parse_io,
}


class ProcfsCounterReader(AbstractCounterReader):
    """
    Reads raw counters for a process from procfs.

    Each distinct source needed by the requested metrics is read exactly once
    per `read()` call, and failures are isolated per source.

    Attributes:
        proc_root: Mount point of procfs, "/proc" outside of tests.
    """

    def __init__(self, proc_root: str = "/proc"):
        self.proc_root = proc_root

    def read_source(self, pid: int, source: Source) -> Optional[str]:
        """
        Read the full contents of one source for one pid.

        The kernel truncates comm to 15 bytes, which can split a multibyte
        character, so undecodable bytes are replaced rather than failing
        the whole source.

        Returns:
            The file contents, or None if the file could not be read.
        """
        path = source.path_for(pid, self.proc_root)
        try:
            with open(path, "rb") as f:
                return f.read().decode("utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")
            return None

    def read(self, pid: int, metrics: Iterable[Metric]) -> Dict[Metric, int]:
        raw_values: Dict[Metric, int] = {}
        for source, source_metrics in group_by_source(metrics).items():
            text = self.read_source(pid, source)
            if text is None:
                continue
            parsed = SOURCE_PARSERS[source](text, source_metrics)
            if len(parsed) < len(source_metrics):
                missing = [m.metric_name for m in source_metrics if m not in parsed]
                logger.debug(f"PID {pid}: no value for {missing} in {source.value}")
            raw_values.update(parsed)
        return raw_values
