"""Terminal cursor style, blink and visibility state."""

from __future__ import annotations

import time
from typing import Callable, Literal, get_args

from onyx.tui.terminal import Terminal

CursorStyle = Literal["block", "block_blinking", "line", "line_blinking"]

CURSOR_STYLES: tuple[CursorStyle, ...] = get_args(CursorStyle)

# DECSCUSR shapes
_STEADY_BLOCK = 2
_STEADY_BAR = 6


def is_blinking(style: CursorStyle) -> bool:
    return style.endswith("_blinking")


def cursor_char(style: CursorStyle) -> str:
    """Glyph used when the cursor is drawn inline."""
    return "█" if style.startswith("block") else "│"


def cursor_shape(style: CursorStyle) -> int:
    return _STEADY_BLOCK if style.startswith("block") else _STEADY_BAR


class TerminalCursor:
    """Explicit cursor state passed into the render path.

    Blinking styles toggle visibility every ``blink_interval_ms`` once the
    user has been idle for at least that long; any activity shows the cursor
    again immediately. :meth:`apply` only writes to the terminal when the
    state changed since the last call.
    """

    def __init__(
        self,
        style: CursorStyle = "block_blinking",
        blink_interval_ms: int = 500,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._style: CursorStyle = style
        self._interval = blink_interval_ms / 1000.0
        self._clock = clock
        self._visible = True
        now = clock()
        self._last_blink = now
        self._last_activity = now
        self._needs_apply = True

    @property
    def style(self) -> CursorStyle:
        return self._style

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def needs_apply(self) -> bool:
        return self._needs_apply

    def set_style(self, style: CursorStyle) -> None:
        self._style = style
        self._visible = True
        self._needs_apply = True

    def _show(self) -> None:
        if not self._visible:
            self._visible = True
            self._needs_apply = True

    def on_activity(self) -> None:
        """Record user input; keeps the cursor solid while typing."""
        self._last_activity = self._clock()
        self._show()

    def update(self) -> None:
        """Advance the blink state machine."""
        if not is_blinking(self._style):
            self._show()
            return

        now = self._clock()
        if now - self._last_activity < self._interval:
            self._show()
            self._last_blink = now
            return

        if now - self._last_blink >= self._interval:
            self._visible = not self._visible
            self._last_blink = now
            self._needs_apply = True

    def apply(self, terminal: Terminal) -> bool:
        """Push pending visibility and shape changes to *terminal*."""
        if not self._needs_apply:
            return False
        if self._visible:
            terminal.show_cursor()
            terminal.set_cursor_shape(cursor_shape(self._style))
        else:
            terminal.hide_cursor()
        self._needs_apply = False
        return True
