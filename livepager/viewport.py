"""Scroll offset and viewport geometry.

The viewport is the only writer of the scroll offset. Every write funnels
through ``clamp`` so the offset always addresses a valid window of content.
"""

from __future__ import annotations


def clamp_offset(offset: int, content_length: int, height: int) -> int:
    """Clamp ``offset`` into ``[0, content_length - height]``.

    Content that fits on one screen always yields ``0``.
    """
    if offset < 0 or content_length <= height:
        return 0
    return min(offset, content_length - height)


class Viewport:
    """Visible ``height`` x ``width`` window positioned by ``offset``."""

    def __init__(self, height: int = 24, width: int = 80) -> None:
        self.height = max(1, height)
        self.width = max(1, width)
        self.offset = 0
        self.content_length = 0

    def resize(self, height: int, width: int) -> None:
        """Update dimensions; callers reclamp explicitly afterwards."""
        self.height = max(1, height)
        self.width = max(1, width)

    def clamp(self, offset: int, content_length: int) -> int:
        return clamp_offset(offset, content_length, self.height)

    def set_content_length(self, content_length: int) -> None:
        self.content_length = max(0, content_length)

    def set_offset(self, offset: int) -> int:
        self.offset = self.clamp(offset, self.content_length)
        return self.offset

    def reclamp(self) -> int:
        return self.set_offset(self.offset)

    @property
    def half_page(self) -> int:
        return max(1, self.height // 2)

    def scroll_by(self, delta: int) -> int:
        return self.set_offset(self.offset + delta)

    def scroll_to_top(self) -> int:
        return self.set_offset(0)

    def scroll_to_bottom(self) -> int:
        return self.set_offset(self.content_length)

    @property
    def visible_range(self) -> tuple[int, int]:
        """Half-open range of content indices currently on screen."""
        end = min(self.content_length, self.offset + self.height)
        return self.offset, end
