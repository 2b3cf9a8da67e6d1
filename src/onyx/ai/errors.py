"""Exception types raised by the chat client."""

from __future__ import annotations


class OnyxError(Exception):
    """Base class for all client errors."""


class ConfigError(OnyxError, ValueError):
    """The configuration file is unreadable or invalid."""


class MissingApiKeyError(ConfigError):
    """The active provider needs an API key and none is configured."""

    def __init__(self, provider: str, config_path: str | None = None) -> None:
        where = config_path or "~/.onyx/config.json"
        super().__init__(
            f"{provider} API key not configured. Please edit {where} and add your API key for {provider}."
        )
        self.provider = provider


class BackendError(OnyxError, RuntimeError):
    """A language-model provider call failed."""
