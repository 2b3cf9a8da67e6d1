"""Tests for onyx.tui.keys and onyx.tui.keybindings."""

from __future__ import annotations

import pytest

from onyx.tui.keybindings import ChatKeybindingsManager
from onyx.tui.keys import PASTE, Key, KeyEvent, key_event_from_input, parse_key


class TestParseKey:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("a", "a"),
            ("Z", "Z"),
            (" ", "space"),
            ("\r", "enter"),
            ("\t", "tab"),
            ("\x7f", "backspace"),
            ("\x1b", "escape"),
            ("\x01", "ctrl+a"),
            ("\x03", "ctrl+c"),
            ("\x1a", "ctrl+z"),
            ("\x1f", "ctrl+-"),
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOD", "left"),
            ("\x1b[H", "home"),
            ("\x1b[F", "end"),
            ("\x1b[1~", "home"),
            ("\x1b[4~", "end"),
            ("\x1b[3~", "delete"),
            ("\x1b[5~", "pageUp"),
            ("\x1b[6~", "pageDown"),
            ("\x1b[Z", "shift+tab"),
            ("\x1bx", "alt+x"),
            ("中", "中"),
        ],
    )
    def test_known_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b[1;2D", "shift+left"),
            ("\x1b[1;2C", "shift+right"),
            ("\x1b[1;5C", "ctrl+right"),
            ("\x1b[1;3A", "alt+up"),
            ("\x1b[1;6D", "ctrl+shift+left"),
            ("\x1b[3;5~", "ctrl+delete"),
            ("\x1b[1;5H", "ctrl+home"),
            ("\x1b[1;2F", "shift+end"),
        ],
    )
    def test_modified_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_unknown_sequence_returns_none(self) -> None:
        assert parse_key("\x1b[99x") is None
        assert parse_key("") is None


class TestKeyEvent:
    def test_printable_input_carries_text(self) -> None:
        assert key_event_from_input("a") == KeyEvent(key="a", text="a")
        assert key_event_from_input(" ") == KeyEvent(key="space", text=" ")

    def test_control_input_has_no_text(self) -> None:
        assert key_event_from_input("\x1a") == KeyEvent(key="ctrl+z")

    def test_paste_event(self) -> None:
        event = KeyEvent.paste("hello")
        assert event.key == PASTE
        assert event.text == "hello"

    def test_key_helpers(self) -> None:
        assert Key.ctrl("c") == "ctrl+c"
        assert Key.shift(Key.left) == "shift+left"


class TestChatKeybindings:
    def test_default_bindings(self) -> None:
        kb = ChatKeybindingsManager()
        assert kb.action_for("ctrl+c") == "quit"
        assert kb.action_for("ctrl+d") == "clearOrQuit"
        assert kb.action_for("ctrl+l") == "clearTranscript"
        assert kb.action_for("ctrl+a") == "selectAll"
        assert kb.action_for("ctrl+z") == "undo"
        assert kb.action_for("shift+left") == "selectLeft"
        assert kb.action_for("pageUp") == "pageUp"
        assert kb.action_for("home") == "scrollTop"
        assert kb.action_for("end") == "scrollBottom"
        assert kb.action_for("ctrl+home") == "cursorLineStart"
        assert kb.action_for("ctrl+e") == "cursorLineEnd"
        assert kb.action_for("shift+end") == "selectLineEnd"
        assert kb.action_for("tab") == "tab"
        assert kb.action_for("enter") == "submit"

    def test_printable_keys_are_unbound(self) -> None:
        kb = ChatKeybindingsManager()
        assert kb.action_for("a") is None
        assert kb.action_for("space") is None

    def test_override_replaces_keys(self) -> None:
        kb = ChatKeybindingsManager({"quit": "ctrl+q"})
        assert kb.action_for("ctrl+q") == "quit"
        assert kb.get_keys("quit") == ["ctrl+q"]
        assert kb.matches("ctrl+q", "quit")
