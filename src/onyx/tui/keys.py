"""Keyboard input parsing for terminal applications.

Translates raw terminal input (legacy xterm escape sequences, control bytes
and printable characters) into key identifiers such as ``"a"``,
``"ctrl+z"``, ``"shift+left"`` or ``"pageUp"``, and wraps them in
:class:`KeyEvent` objects consumed by the session engine.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

PASTE = "paste"


class Key:
    """Named key constants."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> KeyId:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> KeyId:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> KeyId:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Legacy escape sequences
# ---------------------------------------------------------------------------

# CSI final byte -> key name (``ESC [ <final>`` and ``ESC [ 1 ; <mod> <final>``)
_CSI_FINAL_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# ``ESC [ <code> ~`` -> key name
_TILDE_KEYS: dict[str, str] = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageUp",
    "6": "pageDown",
    "7": "home",
    "8": "end",
}

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}


def _modifier_prefix(param: int) -> str:
    """Build ``ctrl+shift+alt+``-style prefix from an xterm modifier param."""
    bits = max(param - 1, 0)
    prefix = ""
    if bits & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if bits & MODIFIERS["shift"]:
        prefix += "shift+"
    if bits & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix


def _build_legacy_table() -> dict[str, KeyId]:
    table: dict[str, KeyId] = {}
    for final, name in _CSI_FINAL_KEYS.items():
        table[f"\x1b[{final}"] = name
        table[f"\x1bO{final}"] = name
        for param in range(2, 9):
            table[f"\x1b[1;{param}{final}"] = _modifier_prefix(param) + name
    for code, name in _TILDE_KEYS.items():
        table[f"\x1b[{code}~"] = name
        for param in range(2, 9):
            table[f"\x1b[{code};{param}~"] = _modifier_prefix(param) + name
    table["\x1b[Z"] = "shift+tab"
    return table


LEGACY_SEQUENCES: dict[str, KeyId] = _build_legacy_table()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:
    """Parse one complete input sequence and return its key identifier."""
    if not data:
        return None

    legacy = LEGACY_SEQUENCES.get(data)
    if legacy is not None:
        return legacy

    if data == "\x1b":
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data == "\x00":
        return "ctrl+space"
    if data == "\x1f":
        return "ctrl+-"

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch in ("\r", "\n"):
            return "alt+enter"
        if ch in ("\x7f", "\x08"):
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isprintable():
            return "alt+" + ch.lower()

    if len(data) == 1 and data.isprintable():
        return data

    return None


@dataclass(frozen=True)
class KeyEvent:
    """A discrete keyboard event.

    ``key`` is the identifier produced by :func:`parse_key` (or
    :data:`PASTE`); ``text`` carries the characters to insert for printable
    keys and pastes.
    """

    key: KeyId
    text: str = ""

    @property
    def is_text(self) -> bool:
        return bool(self.text)

    @classmethod
    def char(cls, ch: str) -> KeyEvent:
        return cls(key="space" if ch == " " else ch, text=ch)

    @classmethod
    def paste(cls, text: str) -> KeyEvent:
        return cls(key=PASTE, text=text)


def key_event_from_input(data: str) -> KeyEvent | None:
    """Convert one complete input sequence into a :class:`KeyEvent`."""
    key = parse_key(data)
    if key is None:
        return None
    if key == "space":
        return KeyEvent(key=key, text=" ")
    if len(data) == 1 and data.isprintable():
        return KeyEvent(key=key, text=data)
    return KeyEvent(key=key)
