"""Tests for onyx.tui.terminal.ProcessTerminal input decoding."""

from __future__ import annotations

import io
from types import SimpleNamespace

import pytest

from onyx.tui import terminal as terminal_module
from onyx.tui.keys import KeyEvent
from onyx.tui.terminal import ProcessTerminal


@pytest.fixture
def reads(monkeypatch: pytest.MonkeyPatch) -> list[bytes]:
    """Chunks handed out one per ``os.read`` call."""
    chunks: list[bytes] = []
    fake_sys = SimpleNamespace(stdin=SimpleNamespace(fileno=lambda: 0), stdout=io.StringIO())
    monkeypatch.setattr(terminal_module, "sys", fake_sys)
    monkeypatch.setattr(terminal_module, "os", SimpleNamespace(read=lambda fd, n: chunks.pop(0)))
    return chunks


async def _collect(term: ProcessTerminal) -> list[KeyEvent]:
    keys: list[KeyEvent] = []
    while (key := await term.read_key(0.01)) is not None:
        keys.append(key)
    return keys


class TestReadStdin:
    @pytest.mark.asyncio
    async def test_character_split_across_reads(self, reads: list[bytes]) -> None:
        encoded = "中".encode()
        reads.extend([encoded[:1], encoded[1:]])
        term = ProcessTerminal()

        term._read_stdin()
        assert await _collect(term) == []
        term._read_stdin()
        assert await _collect(term) == [KeyEvent.char("中")]

    @pytest.mark.asyncio
    async def test_ascii_and_multibyte_in_one_read(self, reads: list[bytes]) -> None:
        reads.append("aé".encode())
        term = ProcessTerminal()
        term._read_stdin()
        assert await _collect(term) == [KeyEvent.char("a"), KeyEvent.char("é")]

    @pytest.mark.asyncio
    async def test_stop_discards_partial_character(self, reads: list[bytes]) -> None:
        reads.extend(["中".encode()[:2], b"a"])
        term = ProcessTerminal()
        term._read_stdin()
        term.stop()

        term._read_stdin()
        assert await _collect(term) == [KeyEvent.char("a")]

    @pytest.mark.asyncio
    async def test_invalid_bytes_are_replaced(self, reads: list[bytes]) -> None:
        reads.append(b"\xff")
        term = ProcessTerminal()
        term._read_stdin()
        assert await _collect(term) == [KeyEvent.char("\ufffd")]
