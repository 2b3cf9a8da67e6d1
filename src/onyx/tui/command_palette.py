"""Slash-command completion for the chat input.

The palette derives its state from the word under the cursor: whenever that
word starts with the command sigil, the command table is filtered by prefix
(declaration order is preserved) and the matches are offered for completion.
"""

from __future__ import annotations

from dataclasses import dataclass

from onyx.tui.text_buffer import TextEditBuffer

COMMAND_SIGIL = "/"


@dataclass(frozen=True)
class CommandEntry:
    """A slash command shown in the palette."""

    keyword: str
    description: str


DEFAULT_COMMANDS: tuple[CommandEntry, ...] = (
    CommandEntry("/help", "Show help information"),
    CommandEntry("/config", "Show the active configuration"),
    CommandEntry("/clear", "Clear the conversation"),
    CommandEntry("/now", "Insert current date and time"),
    CommandEntry("/save", "Save conversation to log file"),
    CommandEntry("/quit", "Exit Onyx"),
)


def filter_commands(
    commands: tuple[CommandEntry, ...] | list[CommandEntry], word: str
) -> list[CommandEntry]:
    """Entries whose keyword starts with *word*, in table order."""
    if not word.startswith(COMMAND_SIGIL):
        return []
    return [cmd for cmd in commands if cmd.keyword.startswith(word)]


class CommandPalette:
    """Visibility, matches and selection for slash-command completion.

    Call :meth:`refresh` after every buffer mutation. The selected index is
    reclamped on each refresh, so it always addresses an entry of the
    current match list while the palette is visible.
    """

    def __init__(self, commands: tuple[CommandEntry, ...] | list[CommandEntry] = DEFAULT_COMMANDS) -> None:
        self._commands: tuple[CommandEntry, ...] = tuple(commands)
        self._matches: list[CommandEntry] = []
        self._visible = False
        self._selected = 0

    @property
    def commands(self) -> tuple[CommandEntry, ...]:
        return self._commands

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def matches(self) -> list[CommandEntry]:
        return list(self._matches)

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def selected(self) -> CommandEntry | None:
        if not self._visible:
            return None
        return self._matches[self._selected]

    def refresh(self, buffer: TextEditBuffer) -> None:
        """Recompute matches from the word under the buffer's cursor."""
        matches = filter_commands(self._commands, buffer.current_word())
        was_visible = self._visible
        self._matches = matches
        self._visible = bool(matches)

        if not self._visible or not was_visible:
            self._selected = 0
        elif self._selected >= len(matches):
            self._selected = len(matches) - 1

    def hide(self) -> None:
        self._visible = False
        self._matches = []
        self._selected = 0

    def select_previous(self) -> None:
        if self._visible:
            self._selected = max(0, self._selected - 1)

    def select_next(self) -> None:
        if self._visible:
            self._selected = min(len(self._matches) - 1, self._selected + 1)

    def accept(self, buffer: TextEditBuffer) -> bool:
        """Complete the word under the cursor with the selected keyword.

        Returns ``False`` (and leaves the buffer alone) when nothing is
        selectable.
        """
        entry = self.selected
        if entry is None:
            return False
        buffer.replace_range(buffer.word_start(), buffer.cursor, entry.keyword)
        self.hide()
        return True
