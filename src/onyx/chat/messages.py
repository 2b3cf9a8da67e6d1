"""Transcript messages."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """One transcript entry.

    Assistant replies are created empty with ``is_streaming`` set, grow as
    session events arrive, and are frozen by :meth:`finish_streaming`.
    """

    role: Role
    content: str = ""
    thinking: str | None = None
    is_streaming: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role="assistant", content=content)

    @classmethod
    def assistant_streaming(cls) -> Message:
        return cls(role="assistant", is_streaming=True)

    def append_content(self, text: str) -> None:
        if self.is_streaming:
            self.content += text

    def append_thinking(self, text: str) -> None:
        if self.is_streaming:
            self.thinking = (self.thinking or "") + text

    def finish_streaming(self) -> None:
        self.is_streaming = False
