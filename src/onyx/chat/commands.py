"""Slash commands run locally after submission."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from onyx.chat.config import Config
    from onyx.chat.messages import Message

logger = logging.getLogger(__name__)

NOW_TOKEN = "/now"
NOW_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_RULE = "=" * 80
LOG_SEPARATOR = "-" * 80

HELP_TEXT = """Commands:
  /help - Show this help
  /config - Show the active configuration
  /clear - Clear the conversation
  /now - Insert current date and time
  /save - Save conversation to log file
  /quit - Exit Onyx

Navigation:
  ↑/↓ - Scroll up/down
  PgUp/PgDn - Scroll page up/down
  Home/End - Jump to top/bottom

Editing:
  Tab - Complete command
  Ctrl+Home/Ctrl+End - Cursor to start/end of input
  Shift+Home/Shift+End - Select to start/end of input
  Ctrl+A - Select all
  Ctrl+Z - Undo
  Ctrl+D - Clear input (quit when empty)

Actions:
  Ctrl+L - Clear chat
  Ctrl+C - Quit"""


def expand_now(text: str, now: datetime | None = None) -> str:
    """Replace every ``/now`` token with the current local time."""
    if NOW_TOKEN not in text:
        return text
    stamp = (now or datetime.now()).strftime(NOW_FORMAT)
    return text.replace(NOW_TOKEN, stamp)


def format_conversation_log(messages: Iterable[Message], config: Config, generated: datetime | None = None) -> str:
    parts = [
        "Onyx Conversation Log\n",
        f"Generated: {config.format_timestamp(generated)}\n",
        f"{LOG_RULE}\n\n",
    ]
    for msg in messages:
        role = msg.role.upper()
        parts.append(f"[{role}] {role} at {config.format_timestamp(msg.timestamp)}\n")
        parts.append(f"{LOG_SEPARATOR}\n")
        parts.append(msg.content)
        parts.append(f"\n\n{LOG_RULE}\n\n")
    return "".join(parts)


def save_conversation_log(messages: Iterable[Message], config: Config, directory: str | None = None) -> str:
    """Write the transcript to ``onyx-conversation-<unix-ts>.log``; returns the path."""
    filename = f"onyx-conversation-{int(time.time())}.log"
    path = os.path.join(directory, filename) if directory else filename
    Path(path).write_text(format_conversation_log(messages, config), encoding="utf-8")
    logger.info("Saved conversation log to %s", path)
    return path


CommandAction = Literal["reply", "clear", "quit"]


@dataclass
class CommandResult:
    """What the session should do after a command ran."""

    action: CommandAction
    text: str = ""


def run_command(
    command: str,
    messages: list[Message],
    config: Config,
    *,
    config_path: str | None = None,
    log_dir: str | None = None,
) -> CommandResult:
    command = command.strip()

    if command == "/help":
        return CommandResult("reply", HELP_TEXT)

    if command == "/config":
        lines = list(config.summary())
        if config_path:
            lines.append(f"Config file: {config_path}")
        return CommandResult("reply", "\n".join(lines))

    if command == "/save":
        try:
            path = save_conversation_log(messages, config, log_dir)
        except OSError as e:
            logger.warning("Failed to save conversation: %s", e)
            return CommandResult("reply", f"Failed to save conversation: {e}")
        return CommandResult("reply", f"Conversation saved to: {path}")

    if command == "/clear":
        return CommandResult("clear")

    if command == "/quit":
        return CommandResult("quit")

    return CommandResult("reply", f"Unknown command: {command}")
