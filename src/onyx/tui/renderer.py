"""Full-screen frame composition and differential rendering."""

from __future__ import annotations

import logging

from onyx.tui.cursor import TerminalCursor
from onyx.tui.scroll import ScrollManager
from onyx.tui.terminal import Terminal
from onyx.tui.theme import Theme
from onyx.tui.widgets import INPUT_HEIGHT, InputView, top_border

logger = logging.getLogger(__name__)

_SYNC_BEGIN = "\x1b[?2026h"
_SYNC_END = "\x1b[?2026l"
_CLEAR_SCREEN = "\x1b[2J"
_CLEAR_TO_EOL = "\x1b[K"

_TITLE = "Onyx Chat"


def transcript_height(rows: int) -> int:
    """Rows available to the transcript viewport below the title bar."""
    return max(1, rows - 1 - INPUT_HEIGHT)


def compose_frame(
    transcript: list[str],
    scroll: ScrollManager,
    input_view: InputView,
    palette: list[str],
    theme: Theme,
    width: int,
    rows: int,
) -> tuple[list[str], tuple[int, int]]:
    """Lay out title bar, transcript viewport, input box and palette overlay.

    Reconciles *scroll* against the transcript length. Returns the screen
    rows and the ``(row, col)`` of the hardware cursor.
    """
    viewport = transcript_height(rows)
    scroll.update(len(transcript), viewport)
    visible = scroll.visible_slice(transcript, viewport)
    visible += [""] * (viewport - len(visible))

    if palette:
        # Overlay sits directly above the input box, indented by two columns
        overlay = palette[-viewport:]
        top = viewport - len(overlay)
        for i, line in enumerate(overlay):
            visible[top + i] = "  " + line

    frame = [top_border(_TITLE, width, theme)]
    frame.extend(visible)
    frame.extend(input_view.lines)

    cursor_row = 1 + viewport + input_view.cursor_row
    return frame, (cursor_row, input_view.cursor_col)


class Renderer:
    """Writes frames to a terminal, rewriting only rows that changed.

    A size change (or :meth:`invalidate`) forces a full redraw.
    """

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal
        self._previous: list[str] = []
        self._previous_size: tuple[int, int] = (0, 0)
        self._full_redraws = 0
        self._last_changed_rows: list[int] = []

    @property
    def full_redraws(self) -> int:
        return self._full_redraws

    @property
    def last_changed_rows(self) -> list[int]:
        """Row indices written by the most recent :meth:`render`."""
        return list(self._last_changed_rows)

    def invalidate(self) -> None:
        self._previous = []
        self._previous_size = (0, 0)

    def render(
        self,
        lines: list[str],
        cursor_pos: tuple[int, int],
        cursor: TerminalCursor | None = None,
    ) -> None:
        size = (self._terminal.columns, self._terminal.rows)
        lines = lines[: size[1]]

        out: list[str] = [_SYNC_BEGIN]
        force_full = size != self._previous_size
        if force_full:
            self._full_redraws += 1
            out.append(_CLEAR_SCREEN)
            logger.debug("Full redraw at %dx%d", *size)

        changed: list[int] = []
        total = max(len(lines), len(self._previous))
        for row in range(total):
            new_line = lines[row] if row < len(lines) else ""
            old_line = self._previous[row] if row < len(self._previous) else None
            if not force_full and new_line == old_line:
                continue
            changed.append(row)
            out.append(f"\x1b[{row + 1};1H{new_line}{_CLEAR_TO_EOL}")

        row, col = cursor_pos
        out.append(f"\x1b[{row + 1};{col + 1}H")
        out.append(_SYNC_END)

        self._terminal.write("".join(out))
        if cursor is not None:
            cursor.apply(self._terminal)

        self._previous = lines
        self._previous_size = size
        self._last_changed_rows = changed
