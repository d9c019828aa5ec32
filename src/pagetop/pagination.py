"""Pagination over a process table that changes between ticks.

All functions here are pure: they take the current cursor and data size and
return the new cursor, so they can be tested without any running engine.
"""

from collections.abc import Sequence
from enum import Enum
from typing import TypeVar

from pagetop.models import PaginationState

T = TypeVar("T")


class PageCommand(Enum):
    """Commands that move the pagination cursor."""

    NEXT = "next"
    PREV = "prev"


def clamp_page(total_count: int, page_size: int, current_page: int) -> int:
    """Return current_page, or 0 if it starts at or past the end of the data."""
    if current_page * page_size >= total_count:
        return 0
    return current_page


def visible_rows(
    rows: Sequence[T],
    total_count: int,
    page_size: int,
    current_page: int,
) -> tuple[Sequence[T], int]:
    """
    Compute the slice of rows shown on the current page.

    Args:
        rows: The full, ordered row set of the latest snapshot.
        total_count: Number of rows in the snapshot.
        page_size: Rows per page (>= 1).
        current_page: Requested page, zero-based.

    Returns:
        The rows in [start, end) and the page they belong to, which is 0 when
        the requested page no longer exists.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    page = clamp_page(total_count, page_size, current_page)
    start = page * page_size
    end = min(start + page_size, total_count)
    return rows[start:end], page


def page_count(total_count: int, page_size: int) -> int:
    """Number of pages shown in the footer."""
    return total_count // page_size + 1


def next_page(state: PaginationState, total_count: int) -> PaginationState:
    """Advance one page; a no-op on the last page."""
    if (state.current_page + 1) * state.page_size < total_count:
        return PaginationState(state.page_size, state.current_page + 1)
    return state


def prev_page(state: PaginationState) -> PaginationState:
    """Go back one page; a no-op on the first page."""
    if state.current_page > 0:
        return PaginationState(state.page_size, state.current_page - 1)
    return state


def apply_command(
    state: PaginationState, command: PageCommand, total_count: int
) -> PaginationState:
    if command is PageCommand.NEXT:
        return next_page(state, total_count)
    return prev_page(state)


def recompute(state: PaginationState, total_count: int) -> PaginationState:
    """Clamp the cursor against a freshly published total count."""
    page = clamp_page(total_count, state.page_size, state.current_page)
    if page == state.current_page:
        return state
    return PaginationState(state.page_size, page)
