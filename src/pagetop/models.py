"""Data models for pagetop."""

from dataclasses import dataclass
from enum import Enum


class Unavailable(Enum):
    """Marker for a metric or field that could not be read."""

    UNAVAILABLE = "n/a"

    def __repr__(self) -> str:
        return "UNAVAILABLE"

    def __bool__(self) -> bool:
        return False


UNAVAILABLE = Unavailable.UNAVAILABLE


@dataclass(slots=True, frozen=True)
class UsageStats:
    """Usage of a capacity-bound resource (memory, a disk)."""

    used_percent: float
    total_bytes: int
    used_bytes: int
    free_bytes: int


@dataclass(slots=True, frozen=True)
class SystemStats:
    """
    System-wide metrics for one sampling cycle.

    Any category that failed to acquire holds UNAVAILABLE instead of a value,
    so "0%" and "could not read" stay distinguishable.
    """

    cpu_per_core: tuple[float, ...] | Unavailable
    memory: UsageStats | Unavailable
    disk: UsageStats | Unavailable


@dataclass(slots=True, frozen=True)
class ProcessRow:
    """Immutable snapshot of one process as listed in the table."""

    pid: int
    name: str | Unavailable
    cpu_percent: float | Unavailable
    mem_percent: float | Unavailable


@dataclass(slots=True, frozen=True)
class ProcessTableSnapshot:
    """The process list from one sampling cycle, in acquisition order."""

    rows: tuple[ProcessRow, ...] = ()

    @property
    def total_count(self) -> int:
        return len(self.rows)


@dataclass(slots=True, frozen=True)
class PaginationState:
    """Pagination cursor over the process table."""

    page_size: int = 10
    current_page: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.current_page < 0:
            raise ValueError(f"current_page must be >= 0, got {self.current_page}")


@dataclass(slots=True, frozen=True)
class TickResult:
    """Everything one sampling cycle produced, published as a unit."""

    tick: int
    stats: SystemStats
    table: ProcessTableSnapshot
