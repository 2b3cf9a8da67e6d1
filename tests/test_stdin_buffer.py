"""Tests for onyx.tui.stdin_buffer."""

from __future__ import annotations

from onyx.tui.keys import KeyEvent
from onyx.tui.stdin_buffer import (
    BRACKETED_PASTE_END,
    BRACKETED_PASTE_START,
    ESC,
    StdinBuffer,
    sequence_length,
    split_sequences,
)


class TestSplitSequences:
    def test_plain_characters(self) -> None:
        assert split_sequences("abc") == (["a", "b", "c"], "")

    def test_mixed_escape_and_text(self) -> None:
        assert split_sequences("a\x1b[Ab") == (["a", "\x1b[A", "b"], "")

    def test_incomplete_csi_is_kept(self) -> None:
        assert split_sequences("x\x1b[1;") == (["x"], "\x1b[1;")

    def test_lone_escape_is_incomplete(self) -> None:
        assert sequence_length(ESC) is None

    def test_ss3_sequence(self) -> None:
        assert split_sequences("\x1bOD") == (["\x1bOD"], "")

    def test_meta_key(self) -> None:
        assert sequence_length("\x1bx") == 2


class TestStdinBuffer:
    def test_keys_become_events(self) -> None:
        buf = StdinBuffer()
        assert buf.feed("hi") == [KeyEvent("h", "h"), KeyEvent("i", "i")]

    def test_sequence_split_across_reads(self) -> None:
        buf = StdinBuffer()
        assert buf.feed("\x1b[") == []
        assert buf.pending == "\x1b["
        assert buf.feed("D") == [KeyEvent("left")]
        assert buf.pending == ""

    def test_flush_emits_lone_escape(self) -> None:
        buf = StdinBuffer()
        assert buf.feed(ESC) == []
        assert buf.flush() == [KeyEvent("escape")]
        assert buf.flush() == []

    def test_bracketed_paste_in_one_read(self) -> None:
        buf = StdinBuffer()
        events = buf.feed(f"a{BRACKETED_PASTE_START}line1\nline2{BRACKETED_PASTE_END}b")
        assert events == [
            KeyEvent("a", "a"),
            KeyEvent.paste("line1\nline2"),
            KeyEvent("b", "b"),
        ]

    def test_bracketed_paste_across_reads(self) -> None:
        buf = StdinBuffer()
        assert buf.feed(BRACKETED_PASTE_START + "hel") == []
        assert buf.in_paste
        assert buf.feed("lo" + BRACKETED_PASTE_END) == [KeyEvent.paste("hello")]
        assert not buf.in_paste

    def test_clear(self) -> None:
        buf = StdinBuffer()
        buf.feed(BRACKETED_PASTE_START + "x")
        buf.clear()
        assert not buf.in_paste
        assert buf.feed("y") == [KeyEvent("y", "y")]
