"""Session events and the queue that carries them to the UI loop.

The decoder task only ever pushes; the UI loop drains without blocking.
Events are delivered in push order.
"""

from __future__ import annotations

import asyncio
from typing import Annotated, Literal

from pydantic import BaseModel, Field

# --- Session events ---


class ThinkingStartEvent(BaseModel):
    type: Literal["thinking_start"] = "thinking_start"


class ThinkingChunkEvent(BaseModel):
    type: Literal["thinking_chunk"] = "thinking_chunk"
    text: str


class ThinkingEndEvent(BaseModel):
    type: Literal["thinking_end"] = "thinking_end"


class ContentChunkEvent(BaseModel):
    type: Literal["content_chunk"] = "content_chunk"
    text: str


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


SessionEvent = Annotated[
    ThinkingStartEvent
    | ThinkingChunkEvent
    | ThinkingEndEvent
    | ContentChunkEvent
    | DoneEvent
    | ErrorEvent,
    Field(discriminator="type"),
]

def is_terminal(event: SessionEvent) -> bool:
    """``True`` for the event that ends a run."""
    return event.type in ("done", "error")


# --- Event queue ---


class EventQueue:
    """Unbounded FIFO of :data:`SessionEvent` with an explicit closed state.

    :meth:`push` never blocks. Once closed, pushes are dropped and reported
    as ``False`` so producers can stop early.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[SessionEvent] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, event: SessionEvent) -> bool:
        """Append *event*; returns ``False`` if the queue is closed."""
        if self._closed:
            return False
        self._queue.put_nowait(event)
        return True

    def close(self) -> None:
        self._closed = True

    def drain(self) -> list[SessionEvent]:
        """Remove and return every queued event without waiting."""
        events: list[SessionEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return events

    def __len__(self) -> int:
        return self._queue.qsize()
