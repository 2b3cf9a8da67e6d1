"""Tests for onyx.tui.widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from onyx.tui.command_palette import CommandPalette
from onyx.tui.text_buffer import TextEditBuffer
from onyx.tui.theme import plain_theme
from onyx.tui.utils import visible_width
from onyx.tui.widgets import (
    PALETTE_MAX_VISIBLE,
    bottom_border,
    render_input,
    render_message,
    render_palette,
    render_transcript,
    spinner_frame,
    top_border,
)


@dataclass
class Entry:
    role: str
    content: str = ""
    thinking: str | None = None
    is_streaming: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime(2024, 5, 1, 12, 30, 0))


class TestBorders:
    def test_top_border_fills_width(self) -> None:
        line = top_border("Input", 20, plain_theme())
        assert line.startswith("┌─ Input ")
        assert line.endswith("┐")
        assert visible_width(line) == 20

    def test_bottom_border_truncates_long_label(self) -> None:
        line = bottom_border("x" * 100, 20, plain_theme())
        assert visible_width(line) == 20


class TestRenderMessage:
    def test_user_message(self) -> None:
        lines = render_message(Entry("user", "hi"), plain_theme(), 40)
        assert lines[0].startswith("┌─ You ─")
        assert "2024-05-01 12:30:00" in lines[0]
        assert lines[1] == "│ hi"
        assert lines[-1] == "└─"

    def test_custom_timestamp_format(self) -> None:
        lines = render_message(Entry("user", "hi"), plain_theme(), 40, "%Y/%m/%d")
        assert "2024/05/01" in lines[0]

    def test_streaming_placeholder(self) -> None:
        lines = render_message(Entry("assistant", is_streaming=True), plain_theme(), 40)
        assert lines[0].startswith("┌─ Onyx ─")
        assert lines[1] == "│ …"

    def test_thinking_before_content(self) -> None:
        entry = Entry("assistant", "answer", thinking="plan")
        lines = render_message(entry, plain_theme(), 40)
        assert lines[1:3] == ["│ plan", "│ answer"]

    def test_long_content_wraps(self) -> None:
        lines = render_message(Entry("assistant", "word " * 20), plain_theme(), 22)
        body = lines[1:-1]
        assert len(body) > 1
        assert all(visible_width(line) <= 22 for line in body)


class TestRenderTranscript:
    def test_welcome_shown(self) -> None:
        lines = render_transcript([], plain_theme(), 80)
        assert lines[0] == "Welcome to Onyx!"

    def test_welcome_hidden(self) -> None:
        assert render_transcript([], plain_theme(), 80, show_welcome=False) == []

    def test_messages_separated_by_blank_line(self) -> None:
        lines = render_transcript(
            [Entry("user", "a"), Entry("assistant", "b")], plain_theme(), 40, show_welcome=False
        )
        assert lines.count("") == 2
        assert "│ a" in lines
        assert "│ b" in lines


class TestRenderInput:
    def test_cursor_column_follows_buffer(self) -> None:
        view = render_input(TextEditBuffer("hello"), plain_theme(), 20)
        assert len(view.lines) == 3
        assert view.cursor_row == 1
        assert view.cursor_col == 7
        assert view.lines[1].startswith("│ hello")
        assert all(visible_width(line) == 20 for line in view.lines)

    def test_wide_characters_count_two_columns(self) -> None:
        view = render_input(TextEditBuffer("中文"), plain_theme(), 20)
        assert view.cursor_col == 6

    def test_long_input_scrolls_horizontally(self) -> None:
        view = render_input(TextEditBuffer("x" * 50), plain_theme(), 20)
        assert view.cursor_col == 17
        assert visible_width(view.lines[1]) == 20

    def test_selection_is_reversed(self) -> None:
        buf = TextEditBuffer("hello")
        buf.select_all()
        view = render_input(buf, plain_theme(), 20)
        assert "\x1b[7mhello\x1b[27m" in view.lines[1]

    def test_processing_status(self) -> None:
        view = render_input(TextEditBuffer(), plain_theme(), 60, processing=True, spinner_state=1)
        assert "Processing..." in view.lines[2]
        assert spinner_frame(1) in view.lines[2]

    def test_placeholder_when_unfocused(self) -> None:
        view = render_input(TextEditBuffer(), plain_theme(), 60, focused=False)
        assert "Type your message here..." in view.lines[1]


class TestRenderPalette:
    def test_hidden_palette_renders_nothing(self) -> None:
        assert render_palette(CommandPalette(), plain_theme(), 80) == []

    def test_visible_palette_marks_selection(self) -> None:
        palette = CommandPalette()
        palette.refresh(TextEditBuffer("/"))
        lines = render_palette(palette, plain_theme(), 80)
        assert len(lines) == PALETTE_MAX_VISIBLE + 2
        assert "→ /help" in lines[1]
        assert all(visible_width(line) == 50 for line in lines)

    def test_window_follows_selection(self) -> None:
        palette = CommandPalette()
        palette.refresh(TextEditBuffer("/"))
        for _ in range(5):
            palette.select_next()
        lines = render_palette(palette, plain_theme(), 80)
        assert any("→ /quit" in line for line in lines)
        assert not any("/help" in line for line in lines)
