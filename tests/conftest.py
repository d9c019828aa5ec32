"""Shared fixtures and fakes for pagetop tests."""

import pytest

from pagetop.errors import MetricUnavailable
from pagetop.models import ProcessRow, UsageStats

MEMORY = UsageStats(used_percent=50.0, total_bytes=16 * 1024**3, used_bytes=8 * 1024**3, free_bytes=8 * 1024**3)
DISK = UsageStats(used_percent=25.0, total_bytes=400 * 1024**3, used_bytes=100 * 1024**3, free_bytes=300 * 1024**3)


def make_rows(count: int, start_pid: int = 1) -> list[ProcessRow]:
    """Build count distinct process rows with consecutive PIDs."""
    return [
        ProcessRow(pid=pid, name=f"proc{pid}", cpu_percent=1.0, mem_percent=0.5)
        for pid in range(start_pid, start_pid + count)
    ]


class FakeProvider:
    """MetricsProvider with scripted data and switchable failures."""

    def __init__(self, cores=(10.0, 20.0), process_count: int = 25) -> None:
        self.cores = list(cores)
        self.memory = MEMORY
        self.disk = DISK
        self.processes = make_rows(process_count)
        self.failing: set[str] = set()
        self.disk_paths: list[str] = []

    def _check(self, metric: str) -> None:
        if metric in self.failing:
            raise MetricUnavailable(metric, OSError("scripted failure"))

    def cpu_percent_per_core(self) -> list[float]:
        self._check("cpu")
        return list(self.cores)

    def memory_stats(self) -> UsageStats:
        self._check("memory")
        return self.memory

    def disk_stats(self, path: str) -> UsageStats:
        self.disk_paths.append(path)
        self._check("disk")
        return self.disk

    def list_processes(self) -> list[ProcessRow]:
        self._check("processes")
        return list(self.processes)


class FakeSurface:
    """DisplaySurface that records what was drawn."""

    def __init__(self) -> None:
        self.panels: list[str] = []
        self.tables: list[tuple] = []
        self.fail_with: Exception | None = None

    def draw_panel(self, text: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.panels.append(text)

    def draw_table(self, header, rows, footer) -> None:
        self.tables.append((tuple(header), [tuple(r) for r in rows], footer))


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()
