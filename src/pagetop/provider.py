"""Metrics acquisition for pagetop."""

from typing import Protocol

import psutil

from pagetop.errors import MetricUnavailable
from pagetop.models import UNAVAILABLE, ProcessRow, UsageStats


class MetricsProvider(Protocol):
    """Source of host metrics consumed by the sampler.

    Each method either returns fresh data or raises MetricUnavailable.
    """

    def cpu_percent_per_core(self) -> list[float]: ...

    def memory_stats(self) -> UsageStats: ...

    def disk_stats(self, path: str) -> UsageStats: ...

    def list_processes(self) -> list[ProcessRow]: ...


class PsutilMetricsProvider:
    """
    MetricsProvider backed by psutil.

    Per-process AccessDenied and ZombieProcess errors mark the affected
    field UNAVAILABLE; processes that vanish mid-poll are dropped.
    """

    PROCESS_ATTRS = ["pid", "name", "cpu_percent", "memory_percent"]

    def __init__(self) -> None:
        # Prime the CPU counters (first call returns 0.0)
        psutil.cpu_percent(percpu=True)

    def cpu_percent_per_core(self) -> list[float]:
        try:
            return psutil.cpu_percent(percpu=True)
        except (OSError, RuntimeError, psutil.Error) as e:
            raise MetricUnavailable("cpu", e) from e

    def memory_stats(self) -> UsageStats:
        try:
            mem = psutil.virtual_memory()
        except (OSError, RuntimeError, psutil.Error) as e:
            raise MetricUnavailable("memory", e) from e
        # Reports "free", not "available"
        return UsageStats(
            used_percent=mem.percent,
            total_bytes=mem.total,
            used_bytes=mem.used,
            free_bytes=mem.free,
        )

    def disk_stats(self, path: str) -> UsageStats:
        try:
            usage = psutil.disk_usage(path)
        except (OSError, RuntimeError, psutil.Error) as e:
            raise MetricUnavailable("disk", e) from e
        return UsageStats(
            used_percent=usage.percent,
            total_bytes=usage.total,
            used_bytes=usage.used,
            free_bytes=usage.free,
        )

    def list_processes(self) -> list[ProcessRow]:
        """
        Collect one row per running process.

        process_iter() fills denied attributes with the ad_value, which is
        then carried as UNAVAILABLE instead of a misleading zero.
        """
        rows: list[ProcessRow] = []
        try:
            procs = psutil.process_iter(attrs=self.PROCESS_ATTRS, ad_value=UNAVAILABLE)
            for proc in procs:
                try:
                    rows.append(self._to_row(proc.info))
                except (psutil.NoSuchProcess, psutil.ZombieProcess):
                    continue
        except (OSError, RuntimeError, psutil.Error) as e:
            raise MetricUnavailable("processes", e) from e
        return rows

    @staticmethod
    def _to_row(info: dict) -> ProcessRow:
        name = info.get("name")
        cpu = info.get("cpu_percent")
        mem = info.get("memory_percent")
        return ProcessRow(
            pid=info["pid"],
            name=name if isinstance(name, str) and name else UNAVAILABLE,
            cpu_percent=float(cpu) if isinstance(cpu, (int, float)) else UNAVAILABLE,
            mem_percent=float(mem) if isinstance(mem, (int, float)) else UNAVAILABLE,
        )
