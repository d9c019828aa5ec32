"""pagetop - Main Textual application."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import DataTable, Footer, Static

from pagetop.config import DEFAULT_CONFIG, apply_overrides, dump_default_config, load_config
from pagetop.dispatcher import PAGE_KEYS, InputDispatcher
from pagetop.engine import Frame, ViewStateEngine
from pagetop.errors import RenderFailure
from pagetop.logging_setup import configure_logging
from pagetop.provider import MetricsProvider, PsutilMetricsProvider
from pagetop.render import LOADING_TEXT, TABLE_HEADER, Renderer
from pagetop.sampler import Sampler
from pagetop.shutdown import ShutdownCoordinator

logger = logging.getLogger(__name__)


class StatsPanel(Static):
    """Panel showing CPU, memory and disk statistics."""

    DEFAULT_CSS = """
    StatsPanel {
        width: 1fr;
        height: 1fr;
        padding: 1;
        background: $surface;
    }
    """


class ProcessTable(Container):
    """Container for the paginated process table and its footer."""

    DEFAULT_CSS = """
    ProcessTable {
        width: 2fr;
        height: 1fr;
        border: solid $primary;
    }

    ProcessTable DataTable {
        height: 1fr;
    }

    #page-footer {
        height: 1;
        color: $warning;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")
        yield Static("", id="page-footer")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        for label in TABLE_HEADER:
            table.add_column(label, key=label.lower())

    def show(
        self,
        header: Sequence[str],
        rows: Sequence[Sequence[str]],
        footer: str,
    ) -> None:
        """Replace the table contents with one page of rows."""
        table = self.query_one("#process-table", DataTable)
        if not table.columns:
            for label in header:
                table.add_column(label, key=label.lower())
        cursor_row = table.cursor_row
        table.clear()
        for cells in rows:
            # Process names are arbitrary text, not markup
            table.add_row(*(Text(cell) for cell in cells))
        if rows:
            table.move_cursor(row=min(cursor_row, len(rows) - 1))
        self.query_one("#page-footer", Static).update(Text(footer))


class PagetopApp(App):
    """Main pagetop application."""

    TITLE = "pagetop"
    SUB_TITLE = "Paged System Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #dashboard {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("right", "dispatch_key('right')", "Next page", priority=True),
        Binding("left", "dispatch_key('left')", "Prev page", priority=True),
        Binding("ctrl+q", "dispatch_key('ctrl+q')", "Quit", priority=True),
        Binding("q", "dispatch_key('q')", "Quit", show=False),
    ]

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        provider: MetricsProvider | None = None,
        interval: float | None = None,
    ) -> None:
        """Initialize the PagetopApp."""
        super().__init__()
        config = {**DEFAULT_CONFIG, **(config or {})}
        self._view_engine = ViewStateEngine(page_size=config["page_size"], on_frame=self._redraw)
        self._frame_renderer = Renderer(self)
        sampler_options: dict[str, Any] = {}
        if interval is not None:
            sampler_options["interval"] = interval
        self._sampler = Sampler(
            provider if provider is not None else PsutilMetricsProvider(),
            self._view_engine.publish,
            disk_path=config["disk_path"],
            order_by_pid=config["process_order"] == "pid",
            **sampler_options,
        )
        self._coordinator = ShutdownCoordinator(
            self._sampler, self._frame_renderer, self._view_engine, release=self._release_display
        )
        self._key_dispatcher = InputDispatcher(self._view_engine.submit, self._coordinator.stop)

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Horizontal(
            StatsPanel(LOADING_TEXT, id="stats-panel"),
            ProcessTable(),
            id="dashboard",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Start the engine, then the sampler feeding it."""
        self.run_worker(self._view_engine.run(), name="view-state", exclusive=True)
        await self._view_engine.wait_started()
        self._coordinator.install_signal_handlers(asyncio.get_running_loop())
        self._sampler.start()

    def on_unmount(self) -> None:
        """Stop sampling and give signal handling back."""
        self._sampler.request_stop()
        self._coordinator.remove_signal_handlers()

    def _redraw(self, frame: Frame) -> None:
        """Redraw from the engine's latest frame."""
        try:
            self._frame_renderer.render(frame)
        except RenderFailure as e:
            self._coordinator.fail(e)
        except NoMatches:
            logger.debug("Widgets not mounted yet, skipping tick %d", frame.tick)

    def _ensure_drawable(self) -> None:
        width, height = self.size
        if width <= 0 or height <= 0:
            raise RenderFailure(f"terminal too small to draw ({width}x{height})")

    def draw_panel(self, text: str) -> None:
        self._ensure_drawable()
        self.query_one("#stats-panel", StatsPanel).update(Text(text))

    def draw_table(
        self,
        header: Sequence[str],
        rows: Sequence[Sequence[str]],
        footer: str,
    ) -> None:
        self._ensure_drawable()
        self.query_one(ProcessTable).show(header, rows, footer)

    def join_sampler(self, timeout: float | None = 5.0) -> None:
        """Wait for the sampler thread to finish after the app exits."""
        self._sampler.stop(timeout=timeout)

    def _release_display(self, return_code: int, message: str | None) -> None:
        self.exit(return_code=return_code, message=message)

    def action_dispatch_key(self, key: str) -> None:
        """Route a bound key through the input dispatcher."""
        if not self._key_dispatcher.dispatch(key):
            logger.debug("Key %s has no dashboard command", key)

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._coordinator.stop("quit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagetop",
        description="Live terminal dashboard with a paginated process list.",
        epilog=f"Keys: {', '.join(PAGE_KEYS)} to page, q or ctrl+q to quit.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to TOML config file",
    )
    parser.add_argument("--page-size", type=int, default=None, help="Processes per page (default: 10)")
    parser.add_argument("--disk-path", default=None, metavar="PATH", help="Mount point to report (default: /)")
    parser.add_argument(
        "--sort-pid",
        action="store_const",
        const="pid",
        default=None,
        dest="process_order",
        help="List processes by PID instead of acquisition order",
    )
    parser.add_argument("--log-file", default=None, metavar="PATH", help="Write logs to this file")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING)")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print the default configuration as TOML and exit",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for pagetop application."""
    args = build_parser().parse_args(argv)
    if args.print_config:
        print(dump_default_config(), end="")
        return

    config = apply_overrides(
        load_config(args.config),
        {
            "page_size": args.page_size,
            "disk_path": args.disk_path,
            "process_order": args.process_order,
            "log_file": args.log_file,
            "log_level": args.log_level,
        },
    )
    configure_logging(config["log_level"], config["log_file"] or None)

    app = PagetopApp(config)
    try:
        app.run()
    finally:
        app.join_sampler()
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
