"""onyx.tui: text editing, input parsing and screen rendering for the chat client."""

# Editing state
from onyx.tui.command_palette import DEFAULT_COMMANDS, CommandEntry, CommandPalette, filter_commands
from onyx.tui.scroll import SCROLL_PAGE_AMOUNT, ScrollManager
from onyx.tui.text_buffer import TextEditBuffer
from onyx.tui.undo import MAX_UNDO_HISTORY, UNDO_GROUP_INTERVAL, UndoManager, UndoSnapshot

# Input
from onyx.tui.keybindings import DEFAULT_CHAT_KEYBINDINGS, ChatAction, ChatKeybindingsManager
from onyx.tui.keys import Key, KeyEvent, KeyId, key_event_from_input, parse_key
from onyx.tui.stdin_buffer import StdinBuffer

# Output
from onyx.tui.cursor import CURSOR_STYLES, CursorStyle, TerminalCursor
from onyx.tui.renderer import Renderer, compose_frame, transcript_height
from onyx.tui.terminal import ProcessTerminal, Terminal
from onyx.tui.theme import Theme, default_theme, plain_theme
from onyx.tui.widgets import InputView, render_input, render_palette, render_transcript

__all__ = [
    "CURSOR_STYLES",
    "DEFAULT_CHAT_KEYBINDINGS",
    "DEFAULT_COMMANDS",
    "MAX_UNDO_HISTORY",
    "SCROLL_PAGE_AMOUNT",
    "UNDO_GROUP_INTERVAL",
    "ChatAction",
    "ChatKeybindingsManager",
    "CommandEntry",
    "CommandPalette",
    "CursorStyle",
    "InputView",
    "Key",
    "KeyEvent",
    "KeyId",
    "ProcessTerminal",
    "Renderer",
    "ScrollManager",
    "StdinBuffer",
    "Terminal",
    "TerminalCursor",
    "TextEditBuffer",
    "Theme",
    "UndoManager",
    "UndoSnapshot",
    "compose_frame",
    "default_theme",
    "filter_commands",
    "key_event_from_input",
    "parse_key",
    "plain_theme",
    "render_input",
    "render_palette",
    "render_transcript",
    "transcript_height",
]
