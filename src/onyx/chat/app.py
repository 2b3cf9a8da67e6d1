"""Interactive chat application loop."""

from __future__ import annotations

import logging

from onyx.chat.session import SessionEngine
from onyx.tui.cursor import TerminalCursor
from onyx.tui.renderer import Renderer, compose_frame
from onyx.tui.terminal import Terminal
from onyx.tui.theme import Theme, default_theme
from onyx.tui.widgets import render_input, render_palette, render_transcript

logger = logging.getLogger(__name__)

AWAITING_POLL_INTERVAL = 0.016  # seconds
IDLE_POLL_INTERVAL = 0.1


class ChatApp:
    """Drives a :class:`SessionEngine` against a terminal.

    Each iteration waits for at most one key, applies it, drains decoder
    events, advances the cursor blink and spinner, and renders.
    """

    def __init__(
        self,
        engine: SessionEngine,
        terminal: Terminal,
        *,
        theme: Theme | None = None,
        cursor: TerminalCursor | None = None,
    ) -> None:
        self.engine = engine
        self.terminal = terminal
        self.theme = theme or default_theme()
        self.cursor = cursor or TerminalCursor(
            engine.config.cursor_style,
            engine.config.cursor_blink_interval,
        )
        self.renderer = Renderer(terminal)

    def render(self) -> None:
        engine = self.engine
        width, rows = self.terminal.columns, self.terminal.rows

        transcript = render_transcript(
            engine.messages,
            self.theme,
            width,
            show_welcome=engine.show_welcome,
            timestamp_format=engine.config.timestamp_format,
        )
        input_view = render_input(
            engine.buffer,
            self.theme,
            width,
            processing=engine.awaiting_reply,
            spinner_state=engine.spinner_state,
        )
        palette = render_palette(engine.palette, self.theme, width)

        lines, cursor_pos = compose_frame(
            transcript, engine.scroll, input_view, palette, self.theme, width, rows
        )
        self.renderer.render(lines, cursor_pos, self.cursor)

    async def step(self) -> None:
        """Run one loop iteration."""
        engine = self.engine
        timeout = AWAITING_POLL_INTERVAL if engine.awaiting_reply else IDLE_POLL_INTERVAL

        event = await self.terminal.read_key(timeout)
        if event is not None:
            self.cursor.on_activity()
            engine.handle_key(event)

        engine.drain()
        self.cursor.update()
        if engine.awaiting_reply:
            engine.tick_spinner()
        self.render()

    async def run(self) -> None:
        """Run until the user quits; always restores the terminal."""
        self.terminal.start()
        try:
            self.render()
            while not self.engine.should_quit:
                await self.step()
        finally:
            await self.engine.close()
            self.terminal.stop()
            logger.info("Chat session ended")
