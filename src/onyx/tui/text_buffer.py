"""Single-line text buffer with cursor and selection."""

from __future__ import annotations

from onyx.tui.undo import UndoSnapshot
from onyx.tui.utils import is_whitespace_char, next_boundary, previous_boundary


class TextEditBuffer:
    """Editable text with a cursor and an optional selection anchor.

    All offsets are ``str`` indices. Cursor motion and single-character
    deletion step over whole grapheme clusters, so the cursor always sits on
    a character boundary and ``0 <= cursor <= len(text)`` holds after every
    operation. Out-of-range requests are clamped, never raised.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)
        self._anchor: int | None = None

    # -- accessors ----------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def selection_anchor(self) -> int | None:
        return self._anchor

    def is_empty(self) -> bool:
        return not self._text

    def has_selection(self) -> bool:
        return self._anchor is not None

    def selection_range(self) -> tuple[int, int] | None:
        """Half-open ``(start, end)`` of the selection, or ``None``."""
        if self._anchor is None:
            return None
        return min(self._anchor, self._cursor), max(self._anchor, self._cursor)

    def selected_text(self) -> str:
        rng = self.selection_range()
        if rng is None:
            return ""
        return self._text[rng[0] : rng[1]]

    def word_start(self) -> int:
        """Offset just past the last whitespace before the cursor."""
        i = self._cursor
        while i > 0 and not is_whitespace_char(self._text[i - 1]):
            i -= 1
        return i

    def current_word(self) -> str:
        """Text between :meth:`word_start` and the cursor."""
        return self._text[self.word_start() : self._cursor]

    # -- snapshots ----------------------------------------------------------

    def snapshot(self) -> UndoSnapshot:
        return UndoSnapshot(text=self._text, cursor=self._cursor)

    def restore(self, snapshot: UndoSnapshot) -> None:
        self._text = snapshot.text
        self._cursor = max(0, min(snapshot.cursor, len(self._text)))
        self._anchor = None

    # -- editing ------------------------------------------------------------

    def insert(self, text: str) -> None:
        """Insert *text* at the cursor, replacing any selection."""
        if self._anchor is not None:
            self._delete_selection()
        self._text = self._text[: self._cursor] + text + self._text[self._cursor :]
        self._cursor += len(text)

    def delete_before(self) -> None:
        if self._anchor is not None:
            self._delete_selection()
            return
        if self._cursor == 0:
            return
        start = previous_boundary(self._text, self._cursor)
        self._text = self._text[:start] + self._text[self._cursor :]
        self._cursor = start

    def delete_after(self) -> None:
        if self._anchor is not None:
            self._delete_selection()
            return
        if self._cursor >= len(self._text):
            return
        end = next_boundary(self._text, self._cursor)
        self._text = self._text[: self._cursor] + self._text[end:]

    def replace_range(self, start: int, end: int, text: str) -> None:
        """Replace ``text[start:end]`` and put the cursor after the insertion."""
        length = len(self._text)
        start = max(0, min(start, length))
        end = max(start, min(end, length))
        self._text = self._text[:start] + text + self._text[end:]
        self._cursor = start + len(text)
        self._anchor = None

    def clear(self) -> None:
        self._text = ""
        self._cursor = 0
        self._anchor = None

    def take(self) -> str:
        """Return the text and reset the buffer."""
        text = self._text
        self.clear()
        return text

    def _delete_selection(self) -> None:
        rng = self.selection_range()
        if rng is None:
            return
        start, end = rng
        self._text = self._text[:start] + self._text[end:]
        self._cursor = start
        self._anchor = None

    # -- movement -----------------------------------------------------------

    def move_left(self, extend: bool = False) -> None:
        if extend:
            if self._anchor is None:
                self._anchor = self._cursor
            self._cursor = previous_boundary(self._text, self._cursor)
        elif self._anchor is not None:
            self._cursor = min(self._anchor, self._cursor)
            self._anchor = None
        else:
            self._cursor = previous_boundary(self._text, self._cursor)

    def move_right(self, extend: bool = False) -> None:
        if extend:
            if self._anchor is None:
                self._anchor = self._cursor
            self._cursor = next_boundary(self._text, self._cursor)
        elif self._anchor is not None:
            self._cursor = max(self._anchor, self._cursor)
            self._anchor = None
        else:
            self._cursor = next_boundary(self._text, self._cursor)

    def move_home(self, extend: bool = False) -> None:
        if extend and self._anchor is None:
            self._anchor = self._cursor
        elif not extend:
            self._anchor = None
        self._cursor = 0

    def move_end(self, extend: bool = False) -> None:
        if extend and self._anchor is None:
            self._anchor = self._cursor
        elif not extend:
            self._anchor = None
        self._cursor = len(self._text)

    def select_all(self) -> None:
        self._anchor = 0
        self._cursor = len(self._text)

    def __repr__(self) -> str:
        return f"TextEditBuffer(text={self._text!r}, cursor={self._cursor}, anchor={self._anchor})"
