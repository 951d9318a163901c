"""Suggestion providers for the refactor session."""

from tf_refactor.providers.base import (
    DEFAULT_INSTRUCTION,
    SuggestionProvider,
    build_prompt,
    strip_code_fence,
)
from tf_refactor.providers.exceptions import (
    ProviderConfigError,
    ProviderError,
    ProviderExecutionError,
    ProviderNotInstalledError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from tf_refactor.providers.q_chat import DEFAULT_Q_TIMEOUT, QChatProvider

PROVIDER_NAMES = ("q", "anthropic", "openai")


def create_provider(
    name: str,
    model: str | None = None,
    timeout: int | None = None,
) -> SuggestionProvider:
    """Build a provider by name.

    API-backed providers are imported lazily so the ``q`` path does not
    load the SDKs.

    Raises:
        ProviderConfigError: If the name is unknown or the provider lacks configuration.
    """
    if name == "q":
        return QChatProvider(timeout=timeout or DEFAULT_Q_TIMEOUT)

    if name in ("anthropic", "openai"):
        from tf_refactor.providers import llm

        kwargs: dict = {}
        if model:
            kwargs["model"] = model
        if timeout:
            kwargs["timeout"] = timeout
        if name == "anthropic":
            return llm.AnthropicProvider(**kwargs)
        return llm.OpenAIProvider(**kwargs)

    raise ProviderConfigError(
        f"Unsupported provider: {name}. Choose one of: {', '.join(PROVIDER_NAMES)}"
    )


__all__ = [
    "DEFAULT_INSTRUCTION",
    "PROVIDER_NAMES",
    "ProviderConfigError",
    "ProviderError",
    "ProviderExecutionError",
    "ProviderNotInstalledError",
    "ProviderResponseError",
    "ProviderTimeoutError",
    "QChatProvider",
    "SuggestionProvider",
    "build_prompt",
    "create_provider",
    "strip_code_fence",
]
