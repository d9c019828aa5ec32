"""Tests for the pagination controller."""

import pytest

from pagetop.models import PaginationState
from pagetop.pagination import (
    PageCommand,
    apply_command,
    next_page,
    page_count,
    prev_page,
    recompute,
    visible_rows,
)

ROWS = list(range(25))


class TestVisibleRows:
    """Tests for visible_rows slicing and clamping."""

    @pytest.mark.parametrize(
        ("page", "expected"),
        [(0, list(range(0, 10))), (1, list(range(10, 20))), (2, list(range(20, 25)))],
    )
    def test_pages_of_twenty_five(self, page, expected):
        rows, clamped = visible_rows(ROWS, 25, 10, page)
        assert list(rows) == expected
        assert clamped == page

    def test_page_past_end_clamps_to_first(self):
        rows, clamped = visible_rows(ROWS, 25, 10, 3)
        assert clamped == 0
        assert list(rows) == list(range(10))

    def test_shrunk_set_clamps_to_first(self):
        """25 rows on page 2 shrinking to 5 shows rows [0, 5) on page 0."""
        rows, clamped = visible_rows(list(range(5)), 5, 10, 2)
        assert clamped == 0
        assert list(rows) == [0, 1, 2, 3, 4]

    def test_empty_table(self):
        rows, clamped = visible_rows([], 0, 10, 4)
        assert list(rows) == []
        assert clamped == 0

    def test_exact_multiple_of_page_size(self):
        rows, clamped = visible_rows(list(range(20)), 20, 10, 2)
        assert clamped == 0
        assert list(rows) == list(range(10))

    def test_rejects_zero_page_size(self):
        with pytest.raises(ValueError):
            visible_rows(ROWS, 25, 0, 0)

    def test_bounds_hold_for_all_small_inputs(self):
        """Slice never exceeds a page and the clamped page always has data."""
        for total in range(0, 40):
            rows = list(range(total))
            for page_size in range(1, 12):
                for page in range(0, 45):
                    visible, clamped = visible_rows(rows, total, page_size, page)
                    assert len(visible) <= page_size
                    assert clamped >= 0
                    if total > 0:
                        assert clamped * page_size < total
                        assert len(visible) >= 1
                        assert visible[0] == clamped * page_size
                    if page * page_size < total:
                        assert clamped == page


class TestCommands:
    """Tests for NextPage / PrevPage."""

    def test_next_page_advances(self):
        state = next_page(PaginationState(10, 0), 25)
        assert state.current_page == 1

    def test_next_page_noop_on_last_page(self):
        state = PaginationState(10, 2)
        for _ in range(5):
            state = next_page(state, 25)
        assert state.current_page == 2

    def test_next_page_noop_on_exact_boundary(self):
        assert next_page(PaginationState(10, 1), 20).current_page == 1

    def test_next_page_noop_when_empty(self):
        assert next_page(PaginationState(10, 0), 0).current_page == 0

    def test_prev_page_goes_back(self):
        assert prev_page(PaginationState(10, 2)).current_page == 1

    def test_prev_page_noop_on_first_page(self):
        state = PaginationState(10, 0)
        assert prev_page(state) is state

    def test_noop_returns_same_state(self):
        state = PaginationState(10, 2)
        assert next_page(state, 25) is state

    def test_apply_command(self):
        state = PaginationState(10, 1)
        assert apply_command(state, PageCommand.NEXT, 25).current_page == 2
        assert apply_command(state, PageCommand.PREV, 25).current_page == 0

    def test_walk_forward_then_back(self):
        state = PaginationState(10, 0)
        pages = []
        for _ in range(4):
            state = next_page(state, 25)
            pages.append(state.current_page)
        for _ in range(4):
            state = prev_page(state)
            pages.append(state.current_page)
        assert pages == [1, 2, 2, 2, 1, 0, 0, 0]


class TestRecompute:
    def test_keeps_valid_page(self):
        state = PaginationState(10, 2)
        assert recompute(state, 25) is state

    def test_resets_when_total_drops(self):
        assert recompute(PaginationState(10, 2), 5).current_page == 0

    def test_preserves_page_size(self):
        assert recompute(PaginationState(7, 3), 1).page_size == 7


@pytest.mark.parametrize(
    ("total", "size", "pages"),
    [(0, 10, 1), (5, 10, 1), (10, 10, 2), (25, 10, 3), (31, 10, 4)],
)
def test_page_count(total, size, pages):
    assert page_count(total, size) == pages
