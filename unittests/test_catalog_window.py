"""Unit tests for utils/catalog/window.py."""

import math

import pytest

from utils.catalog import CatalogWindow, page_size_for_width


ITEMS = list(range(10))


@pytest.mark.parametrize("width,expected", [
    (1920, 4), (1024, 4), (1023, 2), (768, 2), (767, 1), (320, 1), (0, 1),
])
def test_page_size_for_width(width, expected):
    assert page_size_for_width(width) == expected


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        CatalogWindow(ITEMS, page_size=0)
    with pytest.raises(ValueError):
        CatalogWindow(ITEMS).resize(0)


class TestVisible:

    def test_first_page(self):
        assert CatalogWindow(ITEMS, page_size=4).visible() == [0, 1, 2, 3]

    def test_short_collection(self):
        window = CatalogWindow([0, 1], page_size=4)
        assert window.visible() == [0, 1]
        assert window.last_start == 0

    def test_empty_collection(self):
        window = CatalogWindow([], page_size=4)
        assert window.visible() == []
        assert window.advance() == 0
        assert window.retreat() == 0
        assert window.total_pages == 0
        assert window.current_page == 0

    def test_initial_offset_is_clamped(self):
        window = CatalogWindow(ITEMS, page_size=4, offset=50)
        assert window.offset == 6
        assert window.visible() == [6, 7, 8, 9]


class TestAdvance:

    def test_advance_pages_forward(self):
        window = CatalogWindow(ITEMS, page_size=4)
        assert window.advance() == 4
        assert window.visible() == [4, 5, 6, 7]
        assert window.advance() == 8
        assert window.visible() == [8, 9]

    def test_advance_wraps_to_start(self):
        window = CatalogWindow(ITEMS, page_size=4)
        for _ in range(3):
            window.advance()
        assert window.offset == 0

    def test_advance_from_clamped_window_wraps_to_start(self):
        window = CatalogWindow(list(range(5)), page_size=2)
        assert window.jump_to_page(2) == 3
        assert window.advance() == 0
        assert window.visible() == [0, 1]

    def test_advance_from_unaligned_offset_moves_one_page(self):
        window = CatalogWindow(ITEMS, page_size=4)
        window.retreat()
        window.retreat()
        assert window.advance() == 6

    @pytest.mark.parametrize("length,page_size", [(10, 4), (8, 4), (1, 4), (7, 1), (9, 2), (4, 4)])
    def test_full_cycle_returns_to_start(self, length, page_size):
        window = CatalogWindow(list(range(length)), page_size=page_size)
        for _ in range(math.ceil(length / page_size)):
            window.advance()
        assert window.offset == 0

    def test_visible_is_never_empty(self):
        window = CatalogWindow(ITEMS, page_size=3)
        for _ in range(20):
            assert window.visible()
            window.advance()
        for _ in range(20):
            assert window.visible()
            window.retreat()


class TestRetreat:

    def test_retreat_from_start_wraps_to_last_window(self):
        window = CatalogWindow(ITEMS, page_size=4)
        assert window.retreat() == 6
        assert window.visible() == [6, 7, 8, 9]

    def test_retreat_pages_back(self):
        window = CatalogWindow(ITEMS, page_size=4)
        window.advance()
        window.advance()
        assert window.retreat() == 4
        assert window.retreat() == 0

    def test_retreat_from_clamped_window(self):
        window = CatalogWindow(ITEMS, page_size=4)
        window.retreat()
        assert window.retreat() == 2
        assert window.visible() == [2, 3, 4, 5]
        assert window.retreat() == 6


class TestPages:

    def test_total_and_current_page(self):
        window = CatalogWindow(ITEMS, page_size=4)
        assert window.total_pages == 3
        assert window.current_page == 0
        window.advance()
        assert window.current_page == 1
        window.advance()
        assert window.current_page == 2

    def test_jump_to_page_is_clamped(self):
        window = CatalogWindow(ITEMS, page_size=4)
        assert window.jump_to_page(1) == 4
        assert window.jump_to_page(2) == 6
        assert window.current_page == 2
        assert window.jump_to_page(-1) == 0


class TestResizeAndRefresh:

    def test_resize_snaps_to_page_boundary(self):
        window = CatalogWindow(ITEMS, page_size=1, offset=5)
        assert window.resize(4) == 4
        assert window.visible() == [4, 5, 6, 7]

    def test_resize_clamps(self):
        window = CatalogWindow(ITEMS, page_size=1, offset=9)
        assert window.resize(4) == 6

    def test_resize_to_width(self):
        window = CatalogWindow(ITEMS, page_size=4, offset=4)
        window.resize_to_width(800)
        assert window.page_size == 2
        assert window.offset == 4

    def test_refresh_keeps_offset(self):
        window = CatalogWindow(ITEMS, page_size=4, offset=4)
        assert window.refresh(list(range(20))) == 4

    def test_refresh_clamps_when_shrinking(self):
        window = CatalogWindow(ITEMS, page_size=4, offset=6)
        assert window.refresh([0, 1, 2, 3, 4]) == 1
        assert window.visible() == [1, 2, 3, 4]
        assert window.refresh([]) == 0
        assert window.visible() == []

    def test_items_are_copied(self):
        source = [1, 2, 3]
        window = CatalogWindow(source, page_size=2)
        source.append(4)
        window.items.append(5)
        assert window.items == [1, 2, 3]
