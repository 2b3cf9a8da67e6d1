"""Language-model backends.

Each backend answers one prompt with one complete reply string. Provider
errors are re-raised as :class:`~onyx.ai.errors.BackendError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import anthropic
import openai

from onyx.ai.env import get_env_api_key
from onyx.ai.errors import BackendError, MissingApiKeyError

if TYPE_CHECKING:
    from onyx.chat.config import Config

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 4096
# The OpenAI client refuses an empty key; Ollama ignores whatever is sent.
_OLLAMA_PLACEHOLDER_KEY = "ollama"


@runtime_checkable
class Backend(Protocol):
    async def complete(self, prompt: str) -> str: ...


class OpenAIBackend:
    """Chat Completions backend, also used for Ollama's OpenAI-compatible API."""

    def __init__(
        self,
        *,
        model: str,
        api_key: str,
        base_url: str | None = None,
        system_prompt: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.system_prompt = system_prompt
        self._client = client or openai.AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def complete(self, prompt: str) -> str:
        messages: list[dict[str, str]] = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(model=self.model, messages=messages)
        except openai.OpenAIError as e:
            raise BackendError(str(e)) from e

        if not response.choices:
            raise BackendError("Provider returned no choices")
        return response.choices[0].message.content or ""


class AnthropicBackend:
    """Messages API backend.

    Thinking blocks in the response are wrapped in ``<thinking>`` markers so
    the decoder can route them to the thinking section.
    """

    def __init__(
        self,
        *,
        model: str,
        api_key: str,
        base_url: str | None = None,
        system_prompt: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key, base_url=base_url)

    async def complete(self, prompt: str) -> str:
        params: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.system_prompt:
            params["system"] = self.system_prompt

        try:
            response = await self._client.messages.create(**params)
        except anthropic.AnthropicError as e:
            raise BackendError(str(e)) from e

        parts: list[str] = []
        for block in response.content:
            if block.type == "text":
                parts.append(block.text)
            elif block.type == "thinking":
                parts.append(f"<thinking>{block.thinking}</thinking>")
        return "".join(parts)


def create_backend(config: Config) -> Backend:
    """Build the backend for ``config.active_provider``.

    Raises :class:`MissingApiKeyError` when a keyed provider has no key in
    the config or the environment.
    """
    provider = config.active_provider
    settings = config.get_active_provider()

    if provider == "ollama":
        base_url = f"{(settings.url or 'http://localhost:11434').rstrip('/')}/v1"
        logger.info("Using Ollama backend %s at %s", settings.model, base_url)
        return OpenAIBackend(
            model=settings.model,
            api_key=_OLLAMA_PLACEHOLDER_KEY,
            base_url=base_url,
            system_prompt=config.system_prompt,
        )

    api_key = settings.api_key or get_env_api_key(provider)
    if not api_key:
        raise MissingApiKeyError(provider)

    if provider == "anthropic":
        logger.info("Using Anthropic backend %s", settings.model)
        return AnthropicBackend(
            model=settings.model,
            api_key=api_key,
            base_url=settings.url,
            system_prompt=config.system_prompt,
        )

    logger.info("Using OpenAI backend %s", settings.model)
    return OpenAIBackend(
        model=settings.model,
        api_key=api_key,
        base_url=settings.url,
        system_prompt=config.system_prompt,
    )
