"""Periodic metrics sampler for pagetop."""

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from pagetop.errors import MetricUnavailable
from pagetop.models import (
    UNAVAILABLE,
    ProcessTableSnapshot,
    SystemStats,
    TickResult,
    Unavailable,
)
from pagetop.provider import MetricsProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

TICK_INTERVAL = 1.0


class Sampler:
    """
    Samples the metrics provider on a fixed cadence.

    Runs in a separate daemon thread and hands every TickResult to the publish
    callback. Each metric category is read independently: one that raises
    any error is replaced by UNAVAILABLE and the others still go out.
    The provider is always called before publishing, so slow OS queries never
    hold up the consumer.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        publish: Callable[[TickResult], object],
        interval: float = TICK_INTERVAL,
        disk_path: str = "/",
        order_by_pid: bool = False,
    ) -> None:
        """
        Initialize the Sampler.

        Args:
            provider: Where CPU, memory, disk and process data come from.
            publish: Called with each complete TickResult.
            interval: Seconds between the start of consecutive ticks.
            disk_path: Mount point whose usage is reported.
            order_by_pid: Sort process rows by PID instead of keeping the
                provider's acquisition order.
        """
        self._provider = provider
        self._publish = publish
        self._interval = interval
        self._disk_path = disk_path
        self._order_by_pid = order_by_pid
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._tick = 0
        self._failing: set[str] = set()

    @property
    def interval(self) -> float:
        """Seconds between the start of consecutive ticks."""
        return self._interval

    @property
    def is_running(self) -> bool:
        """Check if the sampler thread is running."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def ticks(self) -> int:
        """Number of sampling cycles completed so far."""
        return self._tick

    def start(self) -> None:
        """Start the sampling thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="Sampler",
        )
        self._thread.start()

    def request_stop(self) -> None:
        """Ask the loop to exit without waiting for it."""
        self._stop_event.set()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the sampling thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Sampler thread did not stop within %.1fs", timeout)
            self._thread = None

    def sample(self) -> TickResult:
        """Run one sampling cycle and return its result."""
        cpu = self._read("cpu", self._provider.cpu_percent_per_core)
        memory = self._read("memory", self._provider.memory_stats)
        disk = self._read("disk", lambda: self._provider.disk_stats(self._disk_path))
        processes = self._read("processes", self._provider.list_processes)

        rows = () if processes is UNAVAILABLE else tuple(processes)
        if self._order_by_pid:
            rows = tuple(sorted(rows, key=lambda row: row.pid))

        self._tick += 1
        return TickResult(
            tick=self._tick,
            stats=SystemStats(
                cpu_per_core=cpu if cpu is UNAVAILABLE else tuple(cpu),
                memory=memory,
                disk=disk,
            ),
            table=ProcessTableSnapshot(rows=rows),
        )

    def _read(self, metric: str, fetch: Callable[[], T]) -> T | Unavailable:
        """Fetch one metric, logging once per failure streak."""
        try:
            value = fetch()
        except MetricUnavailable as e:
            if metric not in self._failing:
                self._failing.add(metric)
                logger.warning("%s", e)
            return UNAVAILABLE
        except Exception:
            if metric not in self._failing:
                self._failing.add(metric)
                logger.exception("Unexpected error reading %s", metric)
            return UNAVAILABLE
        if metric in self._failing:
            self._failing.discard(metric)
            logger.info("%s available again", metric)
        return value

    def _poll_loop(self) -> None:
        """Main sampling loop running in the background thread."""
        logger.debug("Sampler started, interval %.2fs", self._interval)
        while not self._stop_event.is_set():
            started = time.monotonic()
            try:
                result = self.sample()
            except Exception:
                logger.exception("Sampling cycle failed, skipping tick")
            else:
                if not self._stop_event.is_set():
                    self._publish(result)

            # Wait out the rest of the interval or until stop is requested
            elapsed = time.monotonic() - started
            self._stop_event.wait(timeout=max(0.0, self._interval - elapsed))
        logger.debug("Sampler stopped after %d ticks", self._tick)
