"""Client configuration with JSON persistence.

The file lives at ``~/.onyx/config.json``. A missing file is created with
defaults; a file that fails to parse or validate is copied aside to
``config.json.backup.<unix-ts>`` and replaced with defaults.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from onyx.ai.env import get_env_api_key
from onyx.ai.errors import ConfigError, MissingApiKeyError
from onyx.tui.cursor import CursorStyle
from onyx.tui.widgets import DEFAULT_TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".onyx"
CONFIG_FILE_NAME = "config.json"

Provider = Literal["openai", "anthropic", "ollama"]


class ProviderConfig(BaseModel):
    api_key: str | None = None
    model: str
    url: str | None = None


def _openai_defaults() -> ProviderConfig:
    return ProviderConfig(model="gpt-5-nano")


def _anthropic_defaults() -> ProviderConfig:
    return ProviderConfig(model="claude-3-5-sonnet-20241022")


def _ollama_defaults() -> ProviderConfig:
    return ProviderConfig(model="llama3.2", url="http://localhost:11434")


class Config(BaseModel):
    active_provider: Provider = "openai"
    openai: ProviderConfig = Field(default_factory=_openai_defaults)
    anthropic: ProviderConfig = Field(default_factory=_anthropic_defaults)
    ollama: ProviderConfig = Field(default_factory=_ollama_defaults)
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    cursor_style: CursorStyle = "block_blinking"
    cursor_blink_interval: int = Field(default=500, ge=0)
    system_prompt: str | None = None

    def get_active_provider(self) -> ProviderConfig:
        return getattr(self, self.active_provider)

    def validate_credentials(self, config_path: str | None = None) -> None:
        """Raise :class:`MissingApiKeyError` if the active provider lacks a key."""
        if self.active_provider == "ollama":
            return
        if self.get_active_provider().api_key or get_env_api_key(self.active_provider):
            return
        raise MissingApiKeyError(self.active_provider, config_path)

    def format_timestamp(self, when: datetime | None = None) -> str:
        when = when or datetime.now()
        try:
            return when.strftime(self.timestamp_format)
        except ValueError:
            return when.strftime(DEFAULT_TIMESTAMP_FORMAT)

    def summary(self) -> list[str]:
        """Human-readable description with API keys masked."""
        provider = self.get_active_provider()
        lines = [
            f"Active provider: {self.active_provider}",
            f"Model: {provider.model}",
        ]
        if provider.url:
            lines.append(f"URL: {provider.url}")
        if self.active_provider != "ollama":
            has_key = bool(provider.api_key or get_env_api_key(self.active_provider))
            lines.append(f"API key: {'configured' if has_key else 'missing'}")
        lines.append(f"Timestamp format: {self.timestamp_format}")
        lines.append(f"Cursor: {self.cursor_style} ({self.cursor_blink_interval} ms)")
        if self.system_prompt:
            lines.append(f"System prompt: {self.system_prompt}")
        return lines


# --- Persistence ---


def default_config_dir() -> str:
    """Default config directory (~/.onyx)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def default_config_path() -> str:
    return os.path.join(default_config_dir(), CONFIG_FILE_NAME)


def backup_path_for(path: str) -> str:
    return f"{path}.backup.{int(time.time())}"


def save_config(config: Config, path: str | None = None) -> str:
    """Write *config* as pretty JSON and return the path written."""
    path = path or default_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        Path(path).write_text(config.model_dump_json(indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file {path}: {e}") from e
    return path


def load_config(path: str | None = None) -> Config:
    """Load the config at *path*, creating or repairing it as needed."""
    path = path or default_config_path()

    if not os.path.exists(path):
        config = Config()
        save_config(config, path)
        logger.info("Created default config at %s", path)
        return config

    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        return Config.model_validate_json(content)
    except ValidationError as e:
        logger.warning("Config file %s is corrupted or outdated: %s", path, e)

    backup = backup_path_for(path)
    try:
        shutil.copyfile(path, backup)
    except OSError as e:
        raise ConfigError(f"Failed to back up config file {path}: {e}") from e
    logger.warning("Backed up old config to %s", backup)

    config = Config()
    save_config(config, path)
    return config
