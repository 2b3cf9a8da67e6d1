"""onyx.chat: configuration, commands, the session engine and the CLI."""

from onyx.chat.config import Config, ProviderConfig, load_config, save_config
from onyx.chat.messages import Message, Role
from onyx.chat.session import AWAITING_REPLY, IDLE, SessionEngine, SessionMode

__all__ = [
    "AWAITING_REPLY",
    "IDLE",
    "Config",
    "Message",
    "ProviderConfig",
    "Role",
    "SessionEngine",
    "SessionMode",
    "load_config",
    "save_config",
]
