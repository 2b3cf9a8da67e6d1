"""Turn a complete backend reply into a paced stream of session events.

The decoder separates an in-band thinking section, delimited by literal
open/close markers, from ordinary content, and releases text in small
chunks with a short sleep between them so the transcript fills in at a
readable cadence.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from onyx.ai.events import (
    ContentChunkEvent,
    DoneEvent,
    ErrorEvent,
    SessionEvent,
    ThinkingChunkEvent,
    ThinkingEndEvent,
    ThinkingStartEvent,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from onyx.ai.backend import Backend

logger = logging.getLogger(__name__)

THINKING_OPEN = "<thinking>"
THINKING_CLOSE = "</thinking>"
FLUSH_SIZE = 5
CHUNK_DELAY = 0.01  # seconds


class EventSink(Protocol):
    @property
    def closed(self) -> bool: ...

    def push(self, event: SessionEvent) -> bool: ...


def _pending_marker_length(text: str, markers: tuple[str, ...]) -> int:
    """Length of the longest suffix of *text* that starts one of *markers*."""
    longest = 0
    for marker in markers:
        for size in range(min(len(marker) - 1, len(text)), longest, -1):
            if text.endswith(marker[:size]):
                longest = size
                break
    return longest


class StreamDecoder:
    """Character-level state machine with two states, normal and thinking.

    A possible marker prefix at the end of the rolling buffer is held back
    on flush, so markers split across chunk boundaries are still recognised
    and concatenating the chunks of each kind reproduces the input exactly.
    """

    def __init__(
        self,
        sink: EventSink,
        *,
        flush_size: int = FLUSH_SIZE,
        delay: float = CHUNK_DELAY,
        open_marker: str = THINKING_OPEN,
        close_marker: str = THINKING_CLOSE,
    ) -> None:
        if flush_size < 1:
            raise ValueError("flush_size must be at least 1")
        self._sink = sink
        self._flush_size = flush_size
        self._delay = delay
        self._open = open_marker
        self._close = close_marker
        self._buffer = ""
        self._thinking = False

    @property
    def in_thinking(self) -> bool:
        return self._thinking

    def _emit(self, event: SessionEvent) -> bool:
        return self._sink.push(event)

    def _chunk(self, text: str) -> SessionEvent:
        if self._thinking:
            return ThinkingChunkEvent(text=text)
        return ContentChunkEvent(text=text)

    async def feed(self, ch: str) -> bool:
        """Consume one character. Returns ``False`` once the sink is closed."""
        if self._sink.closed:
            return False

        self._buffer += ch

        if self._buffer.endswith(self._open):
            before = self._buffer[: -len(self._open)]
            self._buffer = ""
            if before and not self._emit(self._chunk(before)):
                return False
            self._thinking = True
            return self._emit(ThinkingStartEvent())

        if self._thinking and self._buffer.endswith(self._close):
            before = self._buffer[: -len(self._close)]
            self._buffer = ""
            if before and not self._emit(ThinkingChunkEvent(text=before)):
                return False
            self._thinking = False
            return self._emit(ThinkingEndEvent())

        if len(self._buffer) >= self._flush_size:
            markers = (self._open, self._close) if self._thinking else (self._open,)
            held = _pending_marker_length(self._buffer, markers)
            ready = self._buffer[: len(self._buffer) - held]
            if ready:
                self._buffer = self._buffer[len(ready) :]
                if not self._emit(self._chunk(ready)):
                    return False
                await asyncio.sleep(self._delay)

        return True

    def finish(self) -> None:
        """Flush residue and emit the terminal ``Done`` event."""
        if self._sink.closed:
            return
        if self._buffer:
            self._emit(self._chunk(self._buffer))
            self._buffer = ""
        if self._thinking:
            self._emit(ThinkingEndEvent())
            self._thinking = False
        self._emit(DoneEvent())

    async def run(self, reply: str) -> None:
        """Decode a complete reply string."""
        for ch in reply:
            if not await self.feed(ch):
                logger.debug("Event sink closed; stopping decode early")
                return
        self.finish()

    async def run_stream(self, pieces: AsyncIterable[str]) -> None:
        """Decode text arriving incrementally from an async iterable."""
        async for piece in pieces:
            for ch in piece:
                if not await self.feed(ch):
                    logger.debug("Event sink closed; stopping decode early")
                    return
        self.finish()


async def run_backend(
    backend: Backend,
    prompt: str,
    sink: EventSink,
    *,
    flush_size: int = FLUSH_SIZE,
    delay: float = CHUNK_DELAY,
) -> None:
    """Ask *backend* for a reply and decode it into *sink*.

    A failing backend call produces exactly one :class:`ErrorEvent` and no
    decoding.
    """
    try:
        reply = await backend.complete(prompt)
    except Exception as exc:
        logger.warning("Backend call failed: %s", exc)
        sink.push(ErrorEvent(message=str(exc)))
        return

    logger.debug("Decoding reply of %d characters", len(reply))
    await StreamDecoder(sink, flush_size=flush_size, delay=delay).run(reply)
