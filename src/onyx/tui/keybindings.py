"""Chat keybindings manager."""

from __future__ import annotations

from typing import Literal

from onyx.tui.keys import KeyId

ChatAction = Literal[
    # Application
    "quit",
    "clearOrQuit",
    "clearTranscript",
    # Cursor movement / selection
    "cursorLeft",
    "cursorRight",
    "selectLeft",
    "selectRight",
    "cursorLineStart",
    "cursorLineEnd",
    "selectLineStart",
    "selectLineEnd",
    "selectAll",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    # Undo
    "undo",
    # Palette navigation or line scrolling
    "up",
    "down",
    # Transcript scrolling
    "pageUp",
    "pageDown",
    "scrollTop",
    "scrollBottom",
    # Completion / submission
    "tab",
    "submit",
]

ChatKeybindingsConfig = dict[ChatAction, KeyId | list[KeyId]]

DEFAULT_CHAT_KEYBINDINGS: dict[ChatAction, KeyId | list[KeyId]] = {
    "quit": "ctrl+c",
    "clearOrQuit": "ctrl+d",
    "clearTranscript": "ctrl+l",
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "selectLeft": "shift+left",
    "selectRight": "shift+right",
    "cursorLineStart": "ctrl+home",
    "cursorLineEnd": ["ctrl+end", "ctrl+e"],
    "selectLineStart": "shift+home",
    "selectLineEnd": "shift+end",
    "selectAll": "ctrl+a",
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "undo": ["ctrl+z", "ctrl+-"],
    "up": "up",
    "down": "down",
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    "scrollTop": "home",
    "scrollBottom": "end",
    "tab": "tab",
    "submit": "enter",
}


class ChatKeybindingsManager:
    """Maps key identifiers to chat actions."""

    def __init__(self, config: ChatKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ChatAction, list[KeyId]] = {}
        self._key_to_action: dict[KeyId, ChatAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ChatKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        merged: dict[ChatAction, KeyId | list[KeyId]] = {**DEFAULT_CHAT_KEYBINDINGS, **config}
        for action, keys in merged.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)
            for key in key_array:
                self._key_to_action[key] = action

    def action_for(self, key: KeyId) -> ChatAction | None:
        """Return the action bound to *key*, if any."""
        return self._key_to_action.get(key)

    def matches(self, key: KeyId, action: ChatAction) -> bool:
        return key in self._action_to_keys.get(action, [])

    def get_keys(self, action: ChatAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: ChatKeybindingsConfig) -> None:
        self._build_maps(config)
