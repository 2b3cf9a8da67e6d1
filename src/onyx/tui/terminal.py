"""Raw-mode terminal used by the chat UI.

``Terminal`` is the structural interface the renderer and app loop depend
on; ``ProcessTerminal`` drives the real tty. Tests substitute an in-memory
implementation of the same protocol.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import sys
import termios
import tty
from typing import Protocol

from onyx.tui.keys import KeyEvent
from onyx.tui.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

CSI = "\x1b["

# Mode toggles written on start and undone on stop
ENTER_SEQUENCE = f"{CSI}?1049h{CSI}?2004h"
LEAVE_SEQUENCE = f"{CSI}0 q{CSI}?25h{CSI}?2004l{CSI}?1049l"

CURSOR_HIDDEN = f"{CSI}?25l"
CURSOR_VISIBLE = f"{CSI}?25h"
ERASE_DISPLAY = f"{CSI}2J{CSI}H"

# Seconds to wait before treating a trailing ESC as the Escape key
ESC_TIMEOUT = 0.01

_READ_CHUNK = 4096
_FALLBACK_SIZE = (80, 24)


class Terminal(Protocol):
    """What the app needs from a terminal."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    async def read_key(self, timeout: float) -> KeyEvent | None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def set_cursor_shape(self, shape: int) -> None: ...


class ProcessTerminal:
    """The controlling tty of this process.

    Input is read with ``loop.add_reader`` and decoded into :class:`KeyEvent`
    objects which queue up until :meth:`read_key` collects them. There is no
    resize signal handling; callers compare :attr:`columns` and :attr:`rows`
    between frames instead. :meth:`start` needs a running event loop.
    """

    def __init__(self) -> None:
        self._pending_keys: asyncio.Queue[KeyEvent] = asyncio.Queue()
        self._decoder = StdinBuffer()
        # Multi-byte characters may straddle two reads
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._saved_mode: list | None = None
        self._reading = False
        self._esc_timer: asyncio.TimerHandle | None = None

    def _size(self) -> tuple[int, int]:
        try:
            size = os.get_terminal_size(sys.stdout.fileno())
        except (ValueError, OSError):
            return _FALLBACK_SIZE
        return size.columns, size.lines

    @property
    def columns(self) -> int:
        return self._size()[0]

    @property
    def rows(self) -> int:
        return self._size()[1]

    def start(self) -> None:
        """Switch to raw mode on the alternate screen and watch stdin."""
        stdin_fd = sys.stdin.fileno()
        self._saved_mode = termios.tcgetattr(stdin_fd)
        tty.setraw(stdin_fd)

        self._emit(ENTER_SEQUENCE)
        self.clear_screen()

        asyncio.get_running_loop().add_reader(stdin_fd, self._read_stdin)
        self._reading = True
        logger.debug("Entered raw mode at %dx%d", self.columns, self.rows)

    def stop(self) -> None:
        """Undo everything :meth:`start` did. Safe to call more than once."""
        self._cancel_esc_timer()

        if self._reading:
            self._reading = False
            try:
                asyncio.get_running_loop().remove_reader(sys.stdin.fileno())
            except (RuntimeError, ValueError):
                logger.debug("stdin reader already gone")

        self._emit(LEAVE_SEQUENCE)

        saved, self._saved_mode = self._saved_mode, None
        if saved is not None:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, saved)
        self._decoder.clear()
        self._utf8.reset()
        logger.debug("Left raw mode")

    async def read_key(self, timeout: float) -> KeyEvent | None:
        try:
            return await asyncio.wait_for(self._pending_keys.get(), timeout)
        except TimeoutError:
            return None

    def write(self, data: str) -> None:
        self._emit(data)

    def hide_cursor(self) -> None:
        self._emit(CURSOR_HIDDEN)

    def show_cursor(self) -> None:
        self._emit(CURSOR_VISIBLE)

    def set_cursor_shape(self, shape: int) -> None:
        """DECSCUSR: 1/2 block, 3/4 underline, 5/6 bar (odd values blink)."""
        self._emit(f"{CSI}{shape} q")

    def clear_screen(self) -> None:
        self._emit(ERASE_DISPLAY)

    def set_title(self, title: str) -> None:
        self._emit(f"\x1b]0;{title}\x07")

    def _read_stdin(self) -> None:
        try:
            chunk = os.read(sys.stdin.fileno(), _READ_CHUNK)
        except OSError:
            return
        if not chunk:
            return

        text = self._utf8.decode(chunk)
        if text:
            self._enqueue(self._decoder.feed(text))

        # A partial escape sequence may never be completed by the terminal
        self._cancel_esc_timer()
        if self._decoder.pending:
            self._esc_timer = asyncio.get_running_loop().call_later(ESC_TIMEOUT, self._release_pending)

    def _release_pending(self) -> None:
        self._esc_timer = None
        self._enqueue(self._decoder.flush())

    def _enqueue(self, events: list[KeyEvent]) -> None:
        for event in events:
            self._pending_keys.put_nowait(event)

    def _cancel_esc_timer(self) -> None:
        if self._esc_timer is not None:
            self._esc_timer.cancel()
            self._esc_timer = None

    def _emit(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            # stdout closed underneath us; nothing left to draw on
            pass
