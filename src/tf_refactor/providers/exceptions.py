"""Exceptions for suggestion providers."""


class ProviderError(Exception):
    """Base exception for all suggestion provider operations."""


class ProviderConfigError(ProviderError):
    """Raised when a provider cannot be constructed (unknown name, missing API key)."""


class ProviderNotInstalledError(ProviderError):
    """Raised when the external assistant executable is not on PATH."""


class ProviderTimeoutError(ProviderError):
    """Raised when the external assistant does not answer in time."""


class ProviderExecutionError(ProviderError):
    """Raised when the external assistant exits with an error."""


class ProviderResponseError(ProviderError):
    """Raised when the assistant answers with nothing usable."""
