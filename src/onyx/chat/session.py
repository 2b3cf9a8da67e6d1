"""Interactive session engine.

Owns the input buffer, undo history, transcript scroll state, command
palette and transcript. Key events are applied synchronously; a submitted
prompt is answered by a background task that talks to the engine only
through an :class:`~onyx.ai.events.EventQueue`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable, Literal

from onyx.ai.decoder import CHUNK_DELAY, FLUSH_SIZE, run_backend
from onyx.ai.events import EventQueue, SessionEvent, is_terminal
from onyx.chat.commands import expand_now, run_command
from onyx.chat.config import Config
from onyx.chat.messages import Message
from onyx.tui.command_palette import COMMAND_SIGIL, DEFAULT_COMMANDS, CommandEntry, CommandPalette
from onyx.tui.keybindings import ChatKeybindingsManager
from onyx.tui.keys import PASTE, KeyEvent
from onyx.tui.scroll import ScrollManager
from onyx.tui.text_buffer import TextEditBuffer
from onyx.tui.undo import UndoManager
from onyx.tui.utils import is_word_boundary_char

if TYPE_CHECKING:
    from onyx.ai.backend import Backend

logger = logging.getLogger(__name__)

SessionMode = Literal["idle", "awaiting_reply"]
IDLE: SessionMode = "idle"
AWAITING_REPLY: SessionMode = "awaiting_reply"

NO_BACKEND_NOTICE = "Please configure your API key first. Type /config to see the active configuration."


def flatten_paste(text: str) -> str:
    """Pasted text goes into a single-line buffer, so line breaks become spaces."""
    return text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


class SessionEngine:
    """State machine with two modes, ``idle`` and ``awaiting_reply``.

    While a reply is outstanding the input stays editable but
    :meth:`submit` refuses to send another prompt.
    """

    def __init__(
        self,
        config: Config | None = None,
        backend: Backend | None = None,
        *,
        config_path: str | None = None,
        log_dir: str | None = None,
        commands: tuple[CommandEntry, ...] = DEFAULT_COMMANDS,
        keybindings: ChatKeybindingsManager | None = None,
        clock: Callable[[], float] = time.monotonic,
        flush_size: int = FLUSH_SIZE,
        chunk_delay: float = CHUNK_DELAY,
    ) -> None:
        self.config = config or Config()
        self.backend = backend
        self.config_path = config_path
        self.log_dir = log_dir

        self.buffer = TextEditBuffer()
        self.undo = UndoManager(clock=clock)
        self.scroll = ScrollManager()
        self.palette = CommandPalette(commands)
        self.keybindings = keybindings or ChatKeybindingsManager()
        self.messages: list[Message] = []
        self.queue = EventQueue()

        self.show_welcome = True
        self.should_quit = False
        self.spinner_state = 0

        self._mode: SessionMode = IDLE
        self._task: asyncio.Task[None] | None = None
        self._flush_size = flush_size
        self._chunk_delay = chunk_delay

    # -- state --------------------------------------------------------------

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def awaiting_reply(self) -> bool:
        return self._mode == AWAITING_REPLY

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    def add_message(self, message: Message) -> None:
        self.messages.append(message)
        self.show_welcome = False

    def tick_spinner(self) -> None:
        self.spinner_state += 1

    # -- key routing --------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply one key event. Returns ``True`` if it was consumed."""
        if event.key == PASTE:
            self._paste(event.text)
            return True

        action = self.keybindings.action_for(event.key)
        if action is None:
            if event.text:
                self._type(event.text)
                return True
            return False

        match action:
            case "quit":
                self.should_quit = True
            case "clearOrQuit":
                if self.buffer.is_empty():
                    self.should_quit = True
                else:
                    self.undo.save(self.buffer.snapshot(), force=True)
                    self.buffer.clear()
                    self._after_edit()
            case "clearTranscript":
                self.clear_transcript()
            case "selectAll":
                self.buffer.select_all()
            case "undo":
                self.undo_edit()
            case "up":
                if self.palette.visible:
                    self.palette.select_previous()
                else:
                    self.scroll.scroll_up()
            case "down":
                if self.palette.visible:
                    self.palette.select_next()
                else:
                    self.scroll.scroll_down()
            case "pageUp":
                self.scroll.page_up()
            case "pageDown":
                self.scroll.page_down()
            case "scrollTop":
                self.scroll.scroll_to_top()
            case "scrollBottom":
                self.scroll.scroll_to_bottom()
            case "cursorLeft":
                self.buffer.move_left()
                self._after_edit()
            case "cursorRight":
                self.buffer.move_right()
                self._after_edit()
            case "selectLeft":
                self.buffer.move_left(extend=True)
                self._after_edit()
            case "selectRight":
                self.buffer.move_right(extend=True)
                self._after_edit()
            case "cursorLineStart":
                self.buffer.move_home()
                self._after_edit()
            case "cursorLineEnd":
                self.buffer.move_end()
                self._after_edit()
            case "selectLineStart":
                self.buffer.move_home(extend=True)
                self._after_edit()
            case "selectLineEnd":
                self.buffer.move_end(extend=True)
                self._after_edit()
            case "deleteCharBackward":
                self.undo.save(self.buffer.snapshot(), force=True)
                self.buffer.delete_before()
                self._after_edit()
            case "deleteCharForward":
                self.undo.save(self.buffer.snapshot(), force=True)
                self.buffer.delete_after()
                self._after_edit()
            case "tab":
                if self.palette.visible:
                    self.undo.save(self.buffer.snapshot(), force=True)
                    self.palette.accept(self.buffer)
            case "submit":
                self.show_welcome = False
                self.submit()
        return True

    def _type(self, text: str) -> None:
        force = any(is_word_boundary_char(ch) for ch in text)
        self.undo.save(self.buffer.snapshot(), force=force)
        self.buffer.insert(text)
        self.show_welcome = False
        self._after_edit()

    def _paste(self, text: str) -> None:
        text = flatten_paste(text)
        if not text:
            return
        self.undo.save(self.buffer.snapshot(), force=True)
        self.buffer.insert(text)
        self.undo.save(self.buffer.snapshot(), force=True)
        self.show_welcome = False
        self._after_edit()

    def _after_edit(self) -> None:
        self.palette.refresh(self.buffer)

    def undo_edit(self) -> bool:
        """Step the buffer back one history entry."""
        self.undo.save(self.buffer.snapshot(), force=True)
        snapshot = self.undo.undo()
        if snapshot is None:
            return False
        self.buffer.restore(snapshot)
        self._after_edit()
        return True

    # -- submission ---------------------------------------------------------

    def submit(self) -> bool:
        """Send the buffer. Returns ``False`` when the submission is rejected."""
        if self.awaiting_reply:
            logger.debug("Submit rejected: reply outstanding")
            return False
        if self.buffer.is_empty():
            return False

        text = expand_now(self.buffer.take())
        self.undo.clear()
        self.palette.hide()

        if text.startswith(COMMAND_SIGIL):
            self._run_command(text)
            return True

        self.add_message(Message.user(text))
        self.scroll.scroll_to_bottom()

        if self.backend is None:
            self.add_message(Message.assistant(NO_BACKEND_NOTICE))
            return True

        self.add_message(Message.assistant_streaming())
        self._mode = AWAITING_REPLY
        self._task = asyncio.get_running_loop().create_task(
            run_backend(
                self.backend,
                text,
                self.queue,
                flush_size=self._flush_size,
                delay=self._chunk_delay,
            )
        )
        logger.info("Prompt submitted (%d characters)", len(text))
        return True

    def _run_command(self, text: str) -> None:
        logger.info("Running command %s", text.strip())
        result = run_command(
            text,
            self.messages,
            self.config,
            config_path=self.config_path,
            log_dir=self.log_dir,
        )
        if result.action == "quit":
            self.should_quit = True
        elif result.action == "clear":
            self.clear_transcript()
        else:
            self.add_message(Message.assistant(result.text))
            self.scroll.scroll_to_bottom()

    # -- event draining -----------------------------------------------------

    def drain(self) -> int:
        """Apply every queued event to the latest assistant message."""
        events = self.queue.drain()
        for event in events:
            self._apply(event)
        return len(events)

    def _current_reply(self) -> Message | None:
        for message in reversed(self.messages):
            if message.role == "assistant" and message.is_streaming:
                return message
        return None

    def _apply(self, event: SessionEvent) -> None:
        reply = self._current_reply()
        if reply is not None:
            match event.type:
                case "thinking_chunk":
                    reply.append_thinking(event.text)
                case "content_chunk":
                    reply.append_content(event.text)
                case "error":
                    reply.content = f"Error: {event.message}"
        if is_terminal(event):
            if reply is not None:
                reply.finish_streaming()
            self._mode = IDLE
            self._task = None

    # -- teardown -----------------------------------------------------------

    def clear_transcript(self) -> None:
        self.messages.clear()
        self.scroll.reset()

    async def close(self) -> None:
        """Cancel the outstanding reply task and close the event queue."""
        self.queue.close()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._mode = IDLE
