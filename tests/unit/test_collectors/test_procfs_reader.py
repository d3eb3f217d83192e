"""
Unit tests for the procfs counter reader and its parsers.
"""

import pytest

from procmon.catalog import Metric, Source
from procmon.collectors.procfs_reader import (
    ProcfsCounterReader,
    parse_io,
    parse_stat,
    parse_statm,
    parse_status,
)

from conftest import make_stat_line


class CountingReader(ProcfsCounterReader):
    """Counts how many times each source is read."""

    def __init__(self, proc_root):
        super().__init__(proc_root)
        self.reads = []

    def read_source(self, pid, source):
        self.reads.append((pid, source))
        return super().read_source(pid, source)


@pytest.mark.unit
class TestParseStat:
    """Test cases for /proc/<pid>/stat parsing."""

    def test_cpu_is_utime_plus_stime(self):
        line = make_stat_line(100, "alpha", utime=10, stime=5)
        assert parse_stat(line, [Metric.CPU]) == {Metric.CPU: 15}

    def test_other_fields(self):
        line = make_stat_line(100, "alpha", 1, 1, minflt=70, majflt=3, threads=9)
        result = parse_stat(line, [Metric.MINFLT, Metric.MAJFLT, Metric.THREADS])
        assert result == {Metric.MINFLT: 70, Metric.MAJFLT: 3, Metric.THREADS: 9}

    def test_comm_with_spaces_and_parens(self):
        line = make_stat_line(100, "we (ird) name", utime=12, stime=6)
        assert parse_stat(line, [Metric.CPU]) == {Metric.CPU: 18}

    def test_missing_close_paren_yields_nothing(self):
        assert parse_stat("100 alpha S 1 2 3", [Metric.CPU]) == {}

    def test_truncated_line_yields_absent(self):
        line = "100 (alpha) S 1 100 100 0 -1 4194560 5 0 1 0\n"
        result = parse_stat(line, [Metric.CPU, Metric.MINFLT])
        assert result == {Metric.MINFLT: 5}

    def test_non_numeric_field_yields_absent(self):
        line = make_stat_line(100, "alpha", utime=10, stime=5).replace(" 10 5 ", " x 5 ")
        assert parse_stat(line, [Metric.CPU]) == {}

    def test_ignores_metrics_from_other_sources(self):
        line = make_stat_line(100, "alpha", utime=1, stime=2)
        assert parse_stat(line, [Metric.RSS]) == {}


@pytest.mark.unit
class TestParseOtherSources:
    """Test cases for statm, status and io parsing."""

    def test_statm(self):
        result = parse_statm("1000 200 50 10 0 100 0\n", [Metric.VSIZE, Metric.RSS, Metric.SHARED])
        assert result == {Metric.VSIZE: 1000, Metric.RSS: 200, Metric.SHARED: 50}

    def test_statm_short(self):
        assert parse_statm("1000\n", [Metric.VSIZE, Metric.RSS]) == {Metric.VSIZE: 1000}

    def test_status(self):
        text = (
            "Name:\talpha\n"
            "VmHWM:\t    4096 kB\n"
            "VmSwap:\t       0 kB\n"
            "voluntary_ctxt_switches:\t120\n"
            "nonvoluntary_ctxt_switches:\t7\n"
        )
        result = parse_status(
            text,
            [Metric.VM_HWM, Metric.VM_SWAP, Metric.CTXT_VOLUNTARY, Metric.CTXT_INVOLUNTARY],
        )
        assert result == {
            Metric.VM_HWM: 4096,
            Metric.VM_SWAP: 0,
            Metric.CTXT_VOLUNTARY: 120,
            Metric.CTXT_INVOLUNTARY: 7,
        }

    def test_status_missing_key(self):
        assert parse_status("Name:\talpha\n", [Metric.VM_SWAP]) == {}

    def test_io(self):
        text = "rchar: 500\nwchar: 40\nsyscr: 3\nsyscw: 2\nread_bytes: 4096\nwrite_bytes: 0\n"
        result = parse_io(
            text,
            [Metric.READ_CHARS, Metric.WRITE_CHARS, Metric.READ_BYTES, Metric.WRITE_BYTES],
        )
        assert result == {
            Metric.READ_CHARS: 500,
            Metric.WRITE_CHARS: 40,
            Metric.READ_BYTES: 4096,
            Metric.WRITE_BYTES: 0,
        }

    def test_io_garbage(self):
        assert parse_io("rchar: lots\n", [Metric.READ_CHARS]) == {}


@pytest.mark.unit
class TestProcfsCounterReader:
    """Test cases for reading a fake /proc tree."""

    def test_reads_stat_and_statm(self, fake_proc):
        fake_proc.add_process(100, utime=10, stime=5, rss=200, vsize=1000)
        reader = ProcfsCounterReader(str(fake_proc.root))

        result = reader.read(100, [Metric.CPU, Metric.RSS, Metric.VSIZE])

        assert result == {Metric.CPU: 15, Metric.RSS: 200, Metric.VSIZE: 1000}

    def test_one_read_per_source(self, fake_proc):
        fake_proc.add_process(100, utime=10, stime=5, minflt=3, rss=200, vsize=1000)
        reader = CountingReader(str(fake_proc.root))

        reader.read(100, [Metric.CPU, Metric.MINFLT, Metric.THREADS, Metric.RSS, Metric.VSIZE])

        assert sorted(reader.reads, key=lambda r: r[1].value) == [
            (100, Source.STAT),
            (100, Source.STATM),
        ]

    def test_missing_source_is_isolated(self, fake_proc):
        fake_proc.add_process(100, utime=10, stime=5, rss=200)
        fake_proc.remove(100, "stat")
        reader = ProcfsCounterReader(str(fake_proc.root))

        result = reader.read(100, [Metric.CPU, Metric.RSS])

        assert result == {Metric.RSS: 200}

    def test_malformed_source_is_isolated(self, fake_proc):
        fake_proc.add_process(100, utime=10, stime=5, rss=200)
        fake_proc.write(100, "statm", "garbage\n")
        reader = ProcfsCounterReader(str(fake_proc.root))

        result = reader.read(100, [Metric.CPU, Metric.RSS])

        assert result == {Metric.CPU: 15}

    def test_vanished_process(self, fake_proc):
        reader = ProcfsCounterReader(str(fake_proc.root))
        assert reader.read(999, [Metric.CPU, Metric.RSS]) == {}

    def test_read_source_returns_none_on_error(self, fake_proc):
        reader = ProcfsCounterReader(str(fake_proc.root))
        assert reader.read_source(999, Source.IO) is None

    def test_no_metrics_reads_nothing(self, fake_proc):
        fake_proc.add_process(100)
        reader = CountingReader(str(fake_proc.root))
        assert reader.read(100, []) == {}
        assert reader.reads == []

    def test_split_multibyte_comm(self, fake_proc):
        """A comm cut inside a UTF-8 character still yields the numeric fields."""
        fake_proc.add_process(100, rss=200, status={"Name": "ab", "VmHWM": "4096 kB"})
        stat = make_stat_line(100, "X", utime=10, stime=5).encode()
        (fake_proc.root / "100" / "stat").write_bytes(stat.replace(b"(X)", b"(ab\xd0\xbf\xd1)"))
        (fake_proc.root / "100" / "status").write_bytes(b"Name:\tab\xd1\nVmHWM:\t4096 kB\n")
        reader = ProcfsCounterReader(str(fake_proc.root))

        result = reader.read(100, [Metric.CPU, Metric.RSS, Metric.VM_HWM])

        assert result == {Metric.CPU: 15, Metric.RSS: 200, Metric.VM_HWM: 4096}


@pytest.mark.unit
class TestFieldFormat:
    """Test cases for what counts as a numeric field."""

    @pytest.mark.parametrize("text", ["1_000", "+5", "٣", "12a", "1.5", ""])
    def test_malformed_number_is_omitted(self, text):
        assert parse_io(f"rchar: {text}\nwchar: 7\n", [Metric.READ_CHARS, Metric.WRITE_CHARS]) == {
            Metric.WRITE_CHARS: 7
        }

    def test_negative_number_is_accepted(self):
        assert parse_io("rchar: -3\n", [Metric.READ_CHARS]) == {Metric.READ_CHARS: -3}
