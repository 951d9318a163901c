"""Suggestion providers backed by the Anthropic and OpenAI APIs."""

import logging
import os

import anthropic
import openai

from tf_refactor.providers.base import SuggestionProvider, build_prompt, strip_code_fence
from tf_refactor.providers.exceptions import (
    ProviderConfigError,
    ProviderExecutionError,
    ProviderResponseError,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_API_TIMEOUT = 120
MAX_API_TOKENS = 8192


class AnthropicProvider(SuggestionProvider):
    """Asks a Claude model for the rewritten file."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        timeout: int = DEFAULT_API_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            model: Model ID to use.
            timeout: Request timeout in seconds.

        Raises:
            ProviderConfigError: If no API key is found.
        """
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ProviderConfigError(
                "No Anthropic API key found. Set the ANTHROPIC_API_KEY env var."
            )
        self.model = model
        self._client = anthropic.Anthropic(api_key=self.api_key, timeout=timeout)

    def complete(self, instruction: str, content: str) -> str:
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=MAX_API_TOKENS,
                messages=[{"role": "user", "content": build_prompt(instruction, content)}],
            )
        except anthropic.APITimeoutError as exc:
            raise ProviderTimeoutError(f"Anthropic request timed out: {exc}") from exc
        except anthropic.APIError as exc:
            raise ProviderExecutionError(f"Anthropic request failed: {exc}") from exc

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise ProviderResponseError("Anthropic returned an empty response")
        return strip_code_fence(text)


class OpenAIProvider(SuggestionProvider):
    """Asks an OpenAI chat model for the rewritten file."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_OPENAI_MODEL,
        timeout: int = DEFAULT_API_TIMEOUT,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ProviderConfigError(
                "No OpenAI API key found. Set the OPENAI_API_KEY env var."
            )
        # Claude model IDs are meaningless to OpenAI
        if model.startswith("claude-"):
            model = DEFAULT_OPENAI_MODEL
        self.model = model
        self._client = openai.OpenAI(api_key=self.api_key, timeout=timeout)

    def complete(self, instruction: str, content: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=MAX_API_TOKENS,
                messages=[{"role": "user", "content": build_prompt(instruction, content)}],
            )
        except openai.APITimeoutError as exc:
            raise ProviderTimeoutError(f"OpenAI request timed out: {exc}") from exc
        except openai.OpenAIError as exc:
            raise ProviderExecutionError(f"OpenAI request failed: {exc}") from exc

        if not response.choices:
            raise ProviderResponseError("OpenAI returned no choices")
        text = response.choices[0].message.content or ""
        if not text.strip():
            raise ProviderResponseError("OpenAI returned an empty response")
        return strip_code_fence(text)
