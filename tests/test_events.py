"""Tests for onyx.ai.events."""

from __future__ import annotations

from onyx.ai.events import (
    ContentChunkEvent,
    DoneEvent,
    ErrorEvent,
    EventQueue,
    ThinkingStartEvent,
    is_terminal,
)


class TestSessionEvents:
    def test_events_carry_type_tag(self) -> None:
        assert ContentChunkEvent(text="hi").type == "content_chunk"
        assert ErrorEvent(message="boom").model_dump() == {"type": "error", "message": "boom"}

    def test_terminal_events(self) -> None:
        assert is_terminal(DoneEvent())
        assert is_terminal(ErrorEvent(message="x"))
        assert not is_terminal(ThinkingStartEvent())
        assert not is_terminal(ContentChunkEvent(text="x"))


class TestEventQueue:
    def test_drain_preserves_push_order(self) -> None:
        queue = EventQueue()
        events = [ContentChunkEvent(text="a"), ContentChunkEvent(text="b"), DoneEvent()]
        for event in events:
            assert queue.push(event)
        assert len(queue) == 3
        assert queue.drain() == events
        assert queue.drain() == []

    def test_push_after_close_is_rejected(self) -> None:
        queue = EventQueue()
        queue.close()
        assert queue.closed
        assert not queue.push(DoneEvent())
        assert len(queue) == 0
