# src/llm/errors.py — v1
"""Exceptions raised by provider adapters."""

from __future__ import annotations


class LLMClientError(RuntimeError):
    """Base class for every adapter failure."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(f"{provider}: {message}" if provider else message)


class ProviderConfigurationError(LLMClientError):
    """Credentials or options are missing, or the client is not initialized."""


class ProviderRequestError(LLMClientError):
    """The request could not be built or the provider call failed."""


class ProviderResponseError(LLMClientError):
    """The provider answered with a payload that could not be decoded."""


class ProviderNotImplementedError(LLMClientError, NotImplementedError):
    """The operation is not available for this provider."""

    def __init__(self, operation: str, provider: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is not implemented", provider=provider)
