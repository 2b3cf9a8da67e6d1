"""Line-oriented widgets for the chat screen.

Every widget is a plain function returning ANSI-styled strings, one per
terminal row, each no wider than the requested width.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol

import grapheme

from onyx.tui.command_palette import CommandPalette
from onyx.tui.text_buffer import TextEditBuffer
from onyx.tui.theme import Theme
from onyx.tui.utils import grapheme_width, pad_to_width, truncate_to_width, visible_width, wrap_text

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

INPUT_HEIGHT = 3
PALETTE_MAX_VISIBLE = 5
PALETTE_MAX_WIDTH = 50

PLACEHOLDER = "Type your message here..."
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class TranscriptEntry(Protocol):
    """What the transcript widget needs to know about a message."""

    role: str
    content: str
    thinking: str | None
    is_streaming: bool
    timestamp: datetime


@dataclass
class InputView:
    """Rendered input box plus the cursor cell relative to its first row."""

    lines: list[str]
    cursor_row: int
    cursor_col: int


# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------


def top_border(title: str, width: int, theme: Theme, *, focused: bool = False) -> str:
    border = theme.border_focused if focused else theme.border
    if width < 2:
        return border("─" * width)
    label = truncate_to_width(f" {title} ", max(0, width - 3), "") if title else ""
    fill = "─" * max(0, width - 3 - visible_width(label))
    return border("┌─") + theme.title(label) + border(fill + "┐")


def bottom_border(label: str, width: int, theme: Theme, *, focused: bool = False) -> str:
    border = theme.border_focused if focused else theme.border
    if width < 2:
        return border("─" * width)
    label = truncate_to_width(label, max(0, width - 2), "")
    fill = "─" * max(0, width - 2 - visible_width(label))
    return border("└") + theme.help_text(label) + border(fill + "┘")


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


def render_welcome(theme: Theme, width: int) -> list[str]:
    """Greeting shown above an empty transcript."""
    def fit(text: str) -> str:
        return truncate_to_width(text, width, "")

    return [
        theme.title(fit("Welcome to Onyx!")),
        "",
        theme.help_text(fit("Quick start: Type your message and press [Enter] to send")),
        theme.help_text(fit("Commands: /help • /config • /save • /now • /clear • /quit")),
        theme.help_text(fit("Navigation: ↑↓ scroll • PgUp/PgDn page • Home/End jump")),
        "",
    ]


def render_message(
    message: TranscriptEntry,
    theme: Theme,
    width: int,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> list[str]:
    if message.role == "user":
        label, label_style, body_style = "You", theme.user_label, theme.user_message
    else:
        label, label_style, body_style = "Onyx", theme.assistant_label, theme.assistant_message

    stamp = message.timestamp.strftime(timestamp_format) if timestamp_format else ""
    header = theme.border("┌─ ") + label_style(label) + theme.border(" ─")
    if stamp:
        header += " " + theme.help_text(stamp)
    lines = [header]

    content_width = max(1, width - 2)
    gutter = theme.border("│ ")

    if message.thinking:
        for row in wrap_text(message.thinking, content_width):
            lines.append(gutter + theme.thinking(row))

    if message.content:
        for row in wrap_text(message.content, content_width):
            lines.append(gutter + body_style(row))
    elif message.is_streaming and not message.thinking:
        lines.append(gutter + theme.help_text("…"))

    lines.append(theme.border("└─"))
    return lines


def render_transcript(
    messages: Iterable[TranscriptEntry],
    theme: Theme,
    width: int,
    *,
    show_welcome: bool = True,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> list[str]:
    """All transcript rows, top to bottom; the caller slices the viewport."""
    lines: list[str] = []
    if show_welcome:
        lines.extend(render_welcome(theme, width))
    for message in messages:
        lines.extend(render_message(message, theme, width, timestamp_format))
        lines.append("")
    return lines


# ---------------------------------------------------------------------------
# Input box
# ---------------------------------------------------------------------------


def spinner_frame(state: int) -> str:
    return SPINNER_FRAMES[state % len(SPINNER_FRAMES)]


def status_label(processing: bool, spinner_state: int = 0) -> str:
    if processing:
        return f" {spinner_frame(spinner_state)} Processing... "
    return " [Enter] send • [Ctrl+L] clear • [Ctrl+C] quit │ Tip: / for commands "


def _visible_input(
    buffer: TextEditBuffer,
    theme: Theme,
    inner_width: int,
    focused: bool,
) -> tuple[str, int]:
    """Styled visible slice of the buffer and the cursor column within it.

    The slice scrolls horizontally so the cursor cell always fits.
    """
    text_style = theme.input_active if focused else theme.input_inactive
    selection = buffer.selection_range()

    clusters: list[tuple[int, str, int]] = []
    offset = 0
    cursor_col = 0
    for g in grapheme.graphemes(buffer.text):
        w = grapheme_width(g)
        if offset < buffer.cursor:
            cursor_col += w
        clusters.append((offset, g, w))
        offset += len(g)

    scroll = max(0, cursor_col - (inner_width - 1))

    out = ""
    run = ""
    run_selected = False
    col = 0
    for start, g, w in clusters:
        if col < scroll:
            col += w
            continue
        if col + w - scroll > inner_width:
            break
        selected = selection is not None and selection[0] <= start < selection[1]
        if run and selected != run_selected:
            out += theme.selection(run) if run_selected else text_style(run)
            run = ""
        run += g
        run_selected = selected
        col += w
    if run:
        out += theme.selection(run) if run_selected else text_style(run)

    return out, cursor_col - scroll


def render_input(
    buffer: TextEditBuffer,
    theme: Theme,
    width: int,
    *,
    focused: bool = True,
    processing: bool = False,
    spinner_state: int = 0,
) -> InputView:
    """Bordered single-line input box with a status line as its bottom border."""
    inner_width = max(1, width - 4)

    if buffer.is_empty() and not focused:
        body, cursor_col = theme.help_text(truncate_to_width(PLACEHOLDER, inner_width, "")), 0
    else:
        body, cursor_col = _visible_input(buffer, theme, inner_width, focused)

    border = theme.border_focused if focused else theme.border
    middle = border("│ ") + pad_to_width(body, inner_width) + border(" │")

    lines = [
        top_border("Input", width, theme, focused=focused),
        middle,
        bottom_border(status_label(processing, spinner_state), width, theme, focused=focused),
    ]
    return InputView(lines=lines, cursor_row=1, cursor_col=2 + cursor_col)


# ---------------------------------------------------------------------------
# Command palette overlay
# ---------------------------------------------------------------------------


def render_palette(palette: CommandPalette, theme: Theme, width: int) -> list[str]:
    """Boxed list of matching commands, or nothing when the palette is hidden."""
    if not palette.visible:
        return []

    box_width = min(PALETTE_MAX_WIDTH, max(10, width - 4))
    inner_width = box_width - 4
    matches = palette.matches
    selected = palette.selected_index

    start = max(0, min(selected - PALETTE_MAX_VISIBLE // 2, len(matches) - PALETTE_MAX_VISIBLE))
    end = min(start + PALETTE_MAX_VISIBLE, len(matches))

    lines = [top_border("Commands", box_width, theme)]
    for i in range(start, end):
        entry = matches[i]
        prefix = "→ " if i == selected else "  "
        row = truncate_to_width(f"{prefix}{entry.keyword:<10}{entry.description}", inner_width, "")
        styled = theme.selected(row) if i == selected else theme.help_text(row)
        lines.append(theme.border("│ ") + pad_to_width(styled, inner_width) + theme.border(" │"))
    lines.append(bottom_border("", box_width, theme))
    return lines
