"""
Periodic collection of raw counters into the per-process series.

One background thread drives ticks at a fixed interval. Within a tick, each
monitored name is collected on a thread pool, and the tick ends when all of
them are done. A failure for one name is logged and never affects another.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Iterable, Optional

from ..collectors.base import AbstractCounterReader, AbstractProcessResolver
from ..models.samples import Sample
from ..validation import ErrorSeverity, handle_collection_error
from .context import MonitorContext
from .series import MAX_SAMPLES

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class CollectorLoop:
    """
    Samples every monitored process once per interval.

    Per tick and per name: resolve the pid; if there is none, record an
    absence. Otherwise read the selected metrics (each kernel source once)
    and record the observation. There are no retries within a tick.
    """

    def __init__(
        self,
        context: MonitorContext,
        reader: AbstractCounterReader,
        resolver: AbstractProcessResolver,
        interval_seconds: float = 1.0,
        max_workers: int = 8,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Args:
            context: Selected metrics and the series to append to.
            reader: Raw counter reader.
            resolver: Executable name -> pid resolver.
            interval_seconds: Seconds between tick starts.
            max_workers: Upper bound on threads collecting within a tick.
            clock: Source of sample timestamps in ms; replaced in tests.
        """
        self.context = context
        self.reader = reader
        self.resolver = resolver
        self.interval_seconds = interval_seconds
        self.max_workers = max_workers
        self._clock = clock
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.tick_count = 0

    def collect_once(self, name: str) -> Optional[Sample]:
        """
        Collect one process and append the result to its series.

        Returns:
            The appended sample, or None if collection failed unexpectedly.
        """
        series = self.context.get_series(name)
        try:
            pid = self.resolver.resolve(name)
            timestamp = self._clock()
            if not pid:
                return series.record_absence(timestamp)

            raw_values = self.reader.read(pid, self.context.metrics)
            return series.record_observation(timestamp, raw_values, self.context.metrics)
        except Exception as e:
            handle_collection_error(e, name, severity=ErrorSeverity.ERROR, logger=logger)
            return None

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                workers = max(1, min(self.max_workers, len(self.context.names())))
                self._executor = ThreadPoolExecutor(
                    max_workers=workers, thread_name_prefix="Collector"
                )
            return self._executor

    def tick(self) -> None:
        """Collect every monitored process once, concurrently across names."""
        names = self.context.names()
        if names:
            executor = self._get_executor()
            futures = [executor.submit(self.collect_once, name) for name in names]
            wait(futures)
        self.tick_count += 1

    def _run(self) -> None:
        logger.info(
            f"Collector loop started for {self.context.names()} "
            f"(interval: {self.interval_seconds}s)"
        )
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            tick_start = time.monotonic()
            self.tick()
            elapsed = time.monotonic() - tick_start
            if elapsed > self.interval_seconds:
                logger.warning(
                    f"Collection tick took {elapsed:.2f}s, longer than interval of "
                    f"{self.interval_seconds}s."
                )

            next_tick += self.interval_seconds
            delay = next_tick - time.monotonic()
            if delay < 0:
                # Skip missed ticks rather than bursting to catch up.
                next_tick = time.monotonic()
                delay = 0
            self._stop_event.wait(delay)
        logger.info(f"Collector loop finished after {self.tick_count} ticks.")
        self._shutdown_executor()

    def _shutdown_executor(self) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def start(self) -> None:
        """
        Start ticking on a daemon thread.

        Raises:
            RuntimeError: If the loop is already running.
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Collector loop already started")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="CollectorLoop", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop ticking and release the worker threads.

        If the loop thread is still inside a tick after `timeout`, the
        executor is left to that thread, which releases it on exit.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Collector loop did not stop within {timeout}s")
                return
            self._thread = None
        self._shutdown_executor()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


def start_collecting(
    process_names: Iterable[str],
    metric_names: Iterable[str],
    reader: AbstractCounterReader,
    resolver: AbstractProcessResolver,
    interval_seconds: float = 1.0,
    max_samples: int = MAX_SAMPLES,
    max_workers: int = 8,
) -> CollectorLoop:
    """
    Register the monitored names and start the collector loop.

    Called once at startup. Metric names missing from the catalog are
    dropped with a warning instead of being rejected.

    Returns:
        The running collector loop; its `context` backs the exporter.
    """
    context = MonitorContext.from_names(metric_names, max_samples=max_samples)
    context.register(process_names)
    loop = CollectorLoop(
        context,
        reader,
        resolver,
        interval_seconds=interval_seconds,
        max_workers=max_workers,
    )
    loop.start()
    return loop
