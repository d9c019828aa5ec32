"""Orderly shutdown of the sampler, renderer and display."""

import asyncio
import logging
import signal
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Phase(Enum):
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class _Stoppable(Protocol):
    def request_stop(self) -> None: ...


class _Halts(Protocol):
    def stop(self) -> None: ...


class ShutdownCoordinator:
    """
    Runs the shutdown sequence exactly once.

    Triggered by a termination signal, the quit key or a fatal render error.
    The sampler is told not to start another tick, the renderer stops taking
    redraws, the engine drops anything still queued, and finally release()
    hands the terminal back with the exit code.
    """

    def __init__(
        self,
        sampler: _Stoppable,
        renderer: _Halts,
        engine: _Halts,
        release: Callable[[int, str | None], object],
    ) -> None:
        self._sampler = sampler
        self._renderer = renderer
        self._engine = engine
        self._release = release
        self._phase = Phase.RUNNING
        self._lock = threading.Lock()
        self.exit_code = 0
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_signals: list[signal.Signals] = []
        self._original_handlers: dict[signal.Signals, Any] = {}

    @property
    def phase(self) -> Phase:
        """Current shutdown phase."""
        return self._phase

    def stop(self, reason: str = "quit") -> bool:
        """Shut down cleanly. Returns False if a shutdown already ran."""
        return self._shutdown(0, reason, None)

    def fail(self, error: BaseException) -> bool:
        """Shut down after a fatal error, exiting non-zero."""
        logger.error("Fatal error: %s", error)
        return self._shutdown(1, type(error).__name__, f"pagetop: {error}")

    def _shutdown(self, exit_code: int, reason: str, message: str | None) -> bool:
        with self._lock:
            if self._phase is not Phase.RUNNING:
                logger.debug("Shutdown already %s, ignoring %s", self._phase.value, reason)
                return False
            self._phase = Phase.STOPPING

        logger.info("Shutting down (%s)...", reason)
        self.exit_code = exit_code
        try:
            self._sampler.request_stop()
            self._renderer.stop()
            self._engine.stop()
            self.remove_signal_handlers()
            self._release(exit_code, message)
        finally:
            self._phase = Phase.STOPPED
        return True

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route SIGINT and SIGTERM to stop() on the given event loop."""
        self._loop = loop
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.stop, sig.name)
                self._loop_signals.append(sig)
            except (NotImplementedError, RuntimeError):
                # No loop signal support (Windows, or not the main thread)
                try:
                    self._original_handlers[sig] = signal.signal(sig, self._signal_handler)
                except ValueError as e:
                    logger.warning("Failed to set up %s handler: %s", sig.name, e)
        logger.debug("Signal handlers set up")

    def remove_signal_handlers(self) -> None:
        """Restore signal handling to what it was before install."""
        if self._loop is not None:
            for sig in self._loop_signals:
                try:
                    self._loop.remove_signal_handler(sig)
                except (RuntimeError, ValueError) as e:
                    logger.warning("Failed to remove %s handler: %s", sig.name, e)
        self._loop_signals.clear()
        for sig, handler in self._original_handlers.items():
            try:
                signal.signal(sig, handler)
            except ValueError as e:
                logger.warning("Failed to restore %s handler: %s", sig.name, e)
        self._original_handlers.clear()

    def _signal_handler(self, signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        logger.warning("Signal %s received", name)
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self.stop, name)
        else:
            self.stop(name)
