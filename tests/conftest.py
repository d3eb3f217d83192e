"""
Pytest configuration and shared fixtures for the procmon test suite.

This module provides common fixtures, a fake /proc tree builder, and test
doubles for the process resolver and counter reader.
"""

import sys
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from unittest.mock import Mock, patch

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from procmon.catalog import Metric  # noqa: E402
from procmon.collectors.base import AbstractCounterReader, AbstractProcessResolver  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample `[monitor]` table for testing."""
    return {
        "collection": {
            "processes": ["alpha", "beta"],
            "metrics": ["cpu", "rss", "vsize"],
            "interval_seconds": 0.5,
            "max_samples": 300,
            "proc_root": "/proc",
            "max_workers": 4,
        },
        "server": {
            "host": "127.0.0.1",
            "port": 9000,
        },
        "logging": {
            "level": "DEBUG",
        },
    }


# ============================================================================
# Fake /proc
# ============================================================================


def make_stat_line(
    pid: int,
    comm: str,
    utime: int,
    stime: int,
    minflt: int = 0,
    majflt: int = 0,
    threads: int = 1,
) -> str:
    """Build a /proc/<pid>/stat line with the given counters."""
    rest = [
        "S", "1", str(pid), str(pid), "0", "-1", "4194560",
        str(minflt), "0", str(majflt), "0",
        str(utime), str(stime),
        "0", "0", "20", "0", str(threads), "0", "12345", "1048576", "200",
    ]
    return f"{pid} ({comm}) " + " ".join(rest) + "\n"


class FakeProc:
    """Writes per-pid accounting files under a temporary procfs root."""

    def __init__(self, root: Path):
        self.root = root

    def write(self, pid: int, source: str, content: str) -> Path:
        pid_dir = self.root / str(pid)
        pid_dir.mkdir(parents=True, exist_ok=True)
        path = pid_dir / source
        path.write_text(content)
        return path

    def add_process(
        self,
        pid: int,
        comm: str = "alpha",
        utime: int = 0,
        stime: int = 0,
        vsize: int = 1000,
        rss: int = 200,
        shared: int = 50,
        minflt: int = 0,
        majflt: int = 0,
        threads: int = 1,
        status: Optional[Dict[str, str]] = None,
        io: Optional[Dict[str, int]] = None,
    ) -> None:
        self.write(pid, "stat", make_stat_line(pid, comm, utime, stime, minflt, majflt, threads))
        self.write(pid, "statm", f"{vsize} {rss} {shared} 10 0 100 0\n")
        if status is not None:
            self.write(pid, "status", "".join(f"{k}:\t{v}\n" for k, v in status.items()))
        if io is not None:
            self.write(pid, "io", "".join(f"{k}: {v}\n" for k, v in io.items()))

    def remove(self, pid: int, source: str) -> None:
        (self.root / str(pid) / source).unlink()


@pytest.fixture
def fake_proc(temp_dir):
    """A FakeProc rooted in a temporary directory."""
    return FakeProc(temp_dir / "proc")


# ============================================================================
# Test Doubles
# ============================================================================


class StaticResolver(AbstractProcessResolver):
    """Resolver returning pids from a mutable name -> pid mapping."""

    def __init__(self, pids: Optional[Dict[str, int]] = None):
        self.pids: Dict[str, int] = dict(pids or {})
        self.calls: List[str] = []

    def resolve(self, name: str) -> int:
        self.calls.append(name)
        return self.pids.get(name, 0)


class ScriptedReader(AbstractCounterReader):
    """Reader returning preset raw values per pid."""

    def __init__(self, values: Optional[Dict[int, Dict[Metric, int]]] = None):
        self.values: Dict[int, Dict[Metric, int]] = dict(values or {})
        self.calls: List[int] = []

    def read(self, pid: int, metrics: Iterable[Metric]) -> Dict[Metric, int]:
        self.calls.append(pid)
        wanted = set(metrics)
        return {m: v for m, v in self.values.get(pid, {}).items() if m in wanted}


@pytest.fixture
def static_resolver():
    return StaticResolver()


@pytest.fixture
def scripted_reader():
    return ScriptedReader()


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_process_iter():
    """Patch psutil.process_iter as seen by the process resolver."""
    with patch("procmon.collectors.process_resolver.psutil.process_iter") as mocked:
        yield mocked


def make_mock_process(pid: int, name: str) -> Mock:
    proc = Mock()
    proc.pid = pid
    proc.as_dict.return_value = {"pid": pid, "name": name}
    return proc


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset configuration state after each test."""
    yield

    from procmon.config import reset_config_path

    reset_config_path()
