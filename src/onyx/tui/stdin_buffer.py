"""Split raw stdin data into complete key sequences.

Terminal reads can deliver partial escape sequences, several keys at once,
or a bracketed paste spread over multiple reads. :class:`StdinBuffer`
accumulates raw data and yields :class:`~onyx.tui.keys.KeyEvent` objects
once a sequence is complete.
"""

from __future__ import annotations

from onyx.tui.keys import KeyEvent, key_event_from_input

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"


def sequence_length(data: str) -> int | None:
    """Length of the complete sequence at the start of *data*.

    Returns ``None`` when *data* starts with an escape sequence that needs
    more input.
    """
    if not data.startswith(ESC):
        return 1
    if len(data) == 1:
        return None

    intro = data[1]
    if intro == "[":
        # CSI: parameters then a final byte in 0x40..0x7E
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return None
    if intro == "O":
        return 3 if len(data) >= 3 else None
    if intro in ("]", "P", "_"):
        # OSC / DCS / APC: terminated by BEL or ST
        for i in range(2, len(data)):
            if data[i] == "\x07":
                return i + 1
            if data[i] == "\\" and data[i - 1] == ESC:
                return i + 1
        return None
    # Meta key: ESC + one character
    return 2


def split_sequences(data: str) -> tuple[list[str], str]:
    """Split *data* into complete sequences and an incomplete remainder."""
    sequences: list[str] = []
    pos = 0
    while pos < len(data):
        length = sequence_length(data[pos:])
        if length is None:
            return sequences, data[pos:]
        sequences.append(data[pos : pos + length])
        pos += length
    return sequences, ""


class StdinBuffer:
    """Accumulates stdin data and emits key events for complete sequences."""

    def __init__(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    @property
    def in_paste(self) -> bool:
        return self._paste_mode

    def feed(self, data: str) -> list[KeyEvent]:
        """Add *data* and return every event that is now complete."""
        events: list[KeyEvent] = []

        if self._paste_mode:
            self._paste_buffer += data
            return self._finish_paste(events)

        self._buffer += data
        start = self._buffer.find(BRACKETED_PASTE_START)
        if start != -1:
            before = self._buffer[:start]
            sequences, _ = split_sequences(before)
            events.extend(self._to_events(sequences))

            self._paste_mode = True
            self._paste_buffer = self._buffer[start + len(BRACKETED_PASTE_START) :]
            self._buffer = ""
            return self._finish_paste(events)

        sequences, self._buffer = split_sequences(self._buffer)
        events.extend(self._to_events(sequences))
        return events

    def flush(self) -> list[KeyEvent]:
        """Emit a dangling incomplete sequence as-is (e.g. a lone ESC)."""
        if not self._buffer:
            return []
        data, self._buffer = self._buffer, ""
        event = key_event_from_input(data)
        return [event] if event is not None else []

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def _finish_paste(self, events: list[KeyEvent]) -> list[KeyEvent]:
        end = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end == -1:
            return events

        content = self._paste_buffer[:end]
        remaining = self._paste_buffer[end + len(BRACKETED_PASTE_END) :]
        self._paste_mode = False
        self._paste_buffer = ""

        if content:
            events.append(KeyEvent.paste(content))
        if remaining:
            events.extend(self.feed(remaining))
        return events

    @staticmethod
    def _to_events(sequences: list[str]) -> list[KeyEvent]:
        events: list[KeyEvent] = []
        for seq in sequences:
            event = key_event_from_input(seq)
            if event is not None:
                events.append(event)
        return events
