"""onyx.ai: session events, the stream decoder and language-model backends."""

from onyx.ai.backend import AnthropicBackend, Backend, OpenAIBackend, create_backend
from onyx.ai.decoder import StreamDecoder, run_backend
from onyx.ai.env import get_env_api_key
from onyx.ai.errors import BackendError, ConfigError, MissingApiKeyError, OnyxError
from onyx.ai.events import (
    ContentChunkEvent,
    DoneEvent,
    ErrorEvent,
    EventQueue,
    SessionEvent,
    ThinkingChunkEvent,
    ThinkingEndEvent,
    ThinkingStartEvent,
)

__all__ = [
    "AnthropicBackend",
    "Backend",
    "BackendError",
    "ConfigError",
    "ContentChunkEvent",
    "DoneEvent",
    "ErrorEvent",
    "EventQueue",
    "MissingApiKeyError",
    "OnyxError",
    "OpenAIBackend",
    "SessionEvent",
    "StreamDecoder",
    "ThinkingChunkEvent",
    "ThinkingEndEvent",
    "ThinkingStartEvent",
    "create_backend",
    "get_env_api_key",
    "run_backend",
]
