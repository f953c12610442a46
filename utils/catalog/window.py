"""Windowed pagination over an ordered collection (the catalog carousel).

A pure, synchronous state machine: the state is the ordered items, the page
size and the offset of the first visible item. The visible window is always
``items[offset:offset + page_size]`` clamped to bounds; it is never empty when
the collection is not.

Navigation wraps around: advancing past the end returns to the first page and
retreating before the start lands on the last full window.
"""

from __future__ import annotations

import math
import typing

T = typing.TypeVar('T')

# (minimum viewport width in pixels, items per page), widest first
BREAKPOINTS = ((1024, 4), (768, 2), (0, 1))


def page_size_for_width(width: int) -> int:
    """Items per page for a viewport width."""
    for min_width, page_size in BREAKPOINTS:
        if width >= min_width:
            return page_size
    return BREAKPOINTS[-1][1]


class CatalogWindow(typing.Generic[T]):
    def __init__(self, items: typing.Sequence[T] = (), page_size: int = 4, offset: int = 0):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._items = list(items)
        self._page_size = page_size
        self._offset = max(0, offset)
        self._offset = self._clamp(self._offset)

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def last_start(self) -> int:
        """Offset of the final window: the last full window, or 0 for a short collection."""
        return max(0, len(self._items) - self._page_size)

    def _clamp(self, offset: int) -> int:
        return min(max(0, offset), self.last_start)

    def visible(self) -> list[T]:
        return self._items[self._offset:self._offset + self._page_size]

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self._items) / self._page_size)

    @property
    def current_page(self) -> int:
        """Zero-based index of the page being shown; a clamped final window counts as the last page."""
        if not self._items:
            return 0
        if self._offset >= self.last_start:
            return self.total_pages - 1
        return self._offset // self._page_size

    def advance(self) -> int:
        """Move one page forward, wrapping to the first page once the end is reached."""
        offset = self._offset + self._page_size
        self._offset = 0 if offset >= len(self._items) else offset
        return self._offset

    def retreat(self) -> int:
        """Move one page back, wrapping to the last full window before the start."""
        offset = self._offset - self._page_size
        self._offset = self.last_start if offset < 0 else offset
        return self._offset

    def jump_to_page(self, page: int) -> int:
        """Show the given zero-based page, clamped to the final window."""
        self._offset = self._clamp(page * self._page_size)
        return self._offset

    def resize(self, page_size: int) -> int:
        """Change the page size, keeping the first visible item on screen where possible."""
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = page_size
        self._offset = self._clamp((self._offset // page_size) * page_size)
        return self._offset

    def resize_to_width(self, width: int) -> int:
        return self.resize(page_size_for_width(width))

    def refresh(self, items: typing.Sequence[T]) -> int:
        """Replace the collection, keeping the offset but clamping it to the new bounds."""
        self._items = list(items)
        self._offset = self._clamp(self._offset)
        return self._offset
