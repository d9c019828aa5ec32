"""Rendering of engine frames onto a display surface."""

import logging
from collections.abc import Sequence
from typing import Protocol

from pagetop.engine import Frame
from pagetop.models import UNAVAILABLE, ProcessRow, SystemStats, UsageStats, Unavailable
from pagetop.pagination import page_count

logger = logging.getLogger(__name__)

PLACEHOLDER = "N/A"
LOADING_TEXT = "Loading stats..."
TABLE_HEADER = ("PID", "Name", "CPU %", "Mem %")

MB = 1024**2
GB = 1024**3


class DisplaySurface(Protocol):
    """What the renderer needs from the terminal toolkit."""

    def draw_panel(self, text: str) -> None: ...

    def draw_table(
        self,
        header: Sequence[str],
        rows: Sequence[Sequence[str]],
        footer: str,
    ) -> None: ...


def format_percent(value: float | Unavailable) -> str:
    """Format a percentage, or the placeholder if it could not be read."""
    if value is UNAVAILABLE:
        return PLACEHOLDER
    return f"{value:.2f}%"


def _format_usage(label: str, usage: UsageStats | Unavailable, unit: str, size: int) -> str:
    if usage is UNAVAILABLE:
        return f"{label} Usage: {PLACEHOLDER}"
    return (
        f"{label} Usage: {format_percent(usage.used_percent)}\n"
        f"Total: {usage.total_bytes // size} {unit}\n"
        f"Used: {usage.used_bytes // size} {unit}\n"
        f"Free: {usage.free_bytes // size} {unit}"
    )


def format_stats_panel(stats: SystemStats | None) -> str:
    """Build the text of the system stats panel."""
    if stats is None:
        return LOADING_TEXT

    lines = ["CPU Usage:"]
    if stats.cpu_per_core is UNAVAILABLE:
        lines.append(f"Cores: {PLACEHOLDER}")
    else:
        for i, usage in enumerate(stats.cpu_per_core):
            lines.append(f"Core {i}: {format_percent(usage)}")

    return "\n".join(
        [
            "\n".join(lines),
            _format_usage("Memory", stats.memory, "MB", MB),
            _format_usage("Disk", stats.disk, "GB", GB),
        ]
    )


def format_row(row: ProcessRow) -> tuple[str, str, str, str]:
    """Format one process row as table cells."""
    name = PLACEHOLDER if row.name is UNAVAILABLE else row.name
    return (
        str(row.pid),
        name,
        format_percent(row.cpu_percent),
        format_percent(row.mem_percent),
    )


def format_footer(frame: Frame) -> str:
    """Build the pagination footer, e.g. "Page 2/3 | 25 Processes Total"."""
    page = frame.pagination.current_page + 1
    pages = page_count(frame.total_count, frame.pagination.page_size)
    return f"Page {page}/{pages} | {frame.total_count} Processes Total"


class Renderer:
    """
    Draws frames onto a DisplaySurface.

    Rendering only reads the frame. Once stopped, further frames are dropped.
    RenderFailure raised by the surface propagates to the caller.
    """

    def __init__(self, surface: DisplaySurface) -> None:
        self._surface = surface
        self._accepting = True
        self.frames_drawn = 0

    @property
    def accepting(self) -> bool:
        """Whether redraws are still being drawn."""
        return self._accepting

    def stop(self) -> None:
        """Stop accepting redraws."""
        self._accepting = False

    def render(self, frame: Frame) -> bool:
        """Draw frame. Returns False if the renderer has been stopped."""
        if not self._accepting:
            logger.debug("Renderer stopped, dropping frame for tick %d", frame.tick)
            return False
        self._surface.draw_panel(format_stats_panel(frame.stats))
        self._surface.draw_table(
            TABLE_HEADER,
            [format_row(row) for row in frame.rows],
            format_footer(frame),
        )
        self.frames_drawn += 1
        return True
