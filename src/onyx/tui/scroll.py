"""Viewport offset tracking for the transcript pane."""

from __future__ import annotations

SCROLL_PAGE_AMOUNT = 10


class ScrollManager:
    """Line offset plus an auto-follow flag.

    While auto-follow is set, :meth:`update` pins the viewport to the end of
    the content. Any manual scroll clears it; :meth:`scroll_to_bottom`
    restores it.
    """

    def __init__(self, page_amount: int = SCROLL_PAGE_AMOUNT) -> None:
        self._position = 0
        self._auto_follow = True
        self._page_amount = page_amount

    @property
    def position(self) -> int:
        return self._position

    @property
    def auto_follow(self) -> bool:
        return self._auto_follow

    @staticmethod
    def max_scroll(content_length: int, viewport_height: int) -> int:
        return max(0, content_length - viewport_height)

    # -- manual actions -----------------------------------------------------

    def scroll_up(self, amount: int = 1) -> None:
        self._position = max(0, self._position - amount)
        self._auto_follow = False

    def scroll_down(self, amount: int = 1) -> None:
        self._position += amount
        self._auto_follow = False

    def page_up(self) -> None:
        self.scroll_up(self._page_amount)

    def page_down(self) -> None:
        self.scroll_down(self._page_amount)

    def scroll_to_top(self) -> None:
        self._position = 0
        self._auto_follow = False

    def scroll_to_bottom(self) -> None:
        self._auto_follow = True

    def reset(self) -> None:
        self._position = 0
        self._auto_follow = True

    # -- per-frame reconciliation -------------------------------------------

    def update(self, content_length: int, viewport_height: int) -> int:
        """Reconcile the offset with the current content and viewport."""
        limit = self.max_scroll(content_length, viewport_height)
        if self._auto_follow:
            self._position = limit
        else:
            self._position = min(self._position, limit)
        return self._position

    def ensure_visible(self, line: int, viewport_height: int, content_length: int) -> int:
        """Move the window the least amount needed to show *line*."""
        viewport_height = max(1, viewport_height)
        if line < self._position:
            self._position = line
        elif line >= self._position + viewport_height:
            self._position = line - (viewport_height - 1)

        self._position = max(0, min(self._position, self.max_scroll(content_length, viewport_height)))
        return self._position

    def visible_slice(self, lines: list[str], viewport_height: int) -> list[str]:
        """Return the rows of *lines* that fall inside the viewport."""
        return lines[self._position : self._position + viewport_height]
