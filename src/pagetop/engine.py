"""The view-state engine: sole owner of the dashboard's mutable state.

Sampler ticks, page commands and the stop request all arrive as messages on
one inbox and are applied in order by a single asyncio task, so a reader
never sees stats from one tick paired with the process table of another and
a page command is never clamped against a total that is being replaced.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from pagetop.models import (
    PaginationState,
    ProcessRow,
    ProcessTableSnapshot,
    SystemStats,
    TickResult,
)
from pagetop.pagination import PageCommand, apply_command, recompute, visible_rows

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Frame:
    """Immutable view of the engine state, handed to the renderer."""

    tick: int
    stats: SystemStats | None
    rows: tuple[ProcessRow, ...]
    pagination: PaginationState
    total_count: int


class _Stop:
    """Inbox message ending the engine loop."""


_STOP = _Stop()

Message = TickResult | PageCommand | _Stop


class ViewStateEngine:
    """
    Actor holding the latest stats, process table and pagination cursor.

    Other components never touch the state directly: they post messages with
    publish(), submit() or stop(), which are safe to call from any thread.
    After a burst of messages has been applied, on_frame is called once with
    the resulting Frame.
    """

    def __init__(
        self,
        page_size: int = 10,
        on_frame: Callable[[Frame], None] | None = None,
    ) -> None:
        self.on_frame = on_frame
        self._pagination = PaginationState(page_size=page_size)
        self._tick = 0
        self._stats: SystemStats | None = None
        self._table = ProcessTableSnapshot()
        self._inbox: asyncio.Queue[Message] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._started = asyncio.Event()
        self._stopped = False

    @property
    def is_stopped(self) -> bool:
        """Whether the engine has processed its stop message."""
        return self._stopped

    @property
    def frame(self) -> Frame:
        """Build a Frame from the current state."""
        rows, page = visible_rows(
            self._table.rows,
            self._table.total_count,
            self._pagination.page_size,
            self._pagination.current_page,
        )
        return Frame(
            tick=self._tick,
            stats=self._stats,
            rows=tuple(rows),
            pagination=PaginationState(self._pagination.page_size, page),
            total_count=self._table.total_count,
        )

    def publish(self, result: TickResult) -> bool:
        """Post a sampling result. Returns False if it was dropped."""
        return self._post(result)

    def submit(self, command: PageCommand) -> bool:
        """Post a pagination command. Returns False if it was dropped."""
        return self._post(command)

    def stop(self) -> None:
        """Ask the engine to stop; later messages are ignored."""
        self._post(_STOP)

    async def wait_started(self) -> None:
        """Wait until run() is consuming the inbox."""
        await self._started.wait()

    async def run(self) -> None:
        """Process the inbox until stopped."""
        self._loop = asyncio.get_running_loop()
        self._started.set()
        logger.debug("View-state engine started")
        while not self._stopped:
            changed = self._apply(await self._inbox.get())
            # Coalesce whatever queued up meanwhile into a single redraw
            while not self._stopped and not self._inbox.empty():
                changed = self._apply(self._inbox.get_nowait()) or changed
            if changed and not self._stopped and self.on_frame is not None:
                self.on_frame(self.frame)
        logger.debug("View-state engine stopped at tick %d", self._tick)

    def _post(self, message: Message) -> bool:
        if self._stopped:
            return False
        loop = self._loop
        if loop is None:
            self._inbox.put_nowait(message)
            return True
        try:
            loop.call_soon_threadsafe(self._inbox.put_nowait, message)
        except RuntimeError:
            # Event loop already closed during shutdown
            logger.debug("Dropped %r: event loop closed", message)
            return False
        return True

    def _apply(self, message: Message) -> bool:
        """Apply one message; return True if the visible state changed."""
        if isinstance(message, _Stop):
            self._stopped = True
            return False
        if isinstance(message, TickResult):
            self._tick = message.tick
            self._stats = message.stats
            self._table = message.table
            self._pagination = recompute(self._pagination, self._table.total_count)
            return True
        updated = apply_command(self._pagination, message, self._table.total_count)
        if updated == self._pagination:
            return False
        self._pagination = updated
        return True
