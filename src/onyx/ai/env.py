"""Environment-based API key resolution for LLM providers."""

from __future__ import annotations

import os

_ENV_KEYS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def get_env_api_key(provider: str) -> str | None:
    """Get API key for a provider from environment variables.

    Returns None for providers without a key variable (ollama) or when the
    variable is unset or empty.
    """
    var = _ENV_KEYS.get(provider)
    if var is None:
        return None
    return os.environ.get(var) or None
