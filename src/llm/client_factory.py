# src/llm/client_factory.py — v3
"""Factory: instantiate and initialize an LLM client from a provider name."""

from __future__ import annotations

import importlib
import logging
from typing import Any

from llmbridge.config.settings import Settings, load_settings
from llmbridge.llm.base_client import BaseLLMClient
from llmbridge.llm.config import resolve_client_options, resolve_default
from llmbridge.llm.errors import LLMClientError
from llmbridge.llm.models import ClientOptions

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "llmbridge.llm.adapters.openai_adapter.OpenAIAdapter",
    "gemini": "llmbridge.llm.adapters.gemini_adapter.GeminiAdapter",
    "bedrock": "llmbridge.llm.adapters.bedrock_adapter.BedrockAdapter",
}

# Adapters that download URL images accept this constructor argument.
_IMAGE_FETCHING = {"gemini", "bedrock"}


class UnsupportedProviderError(LLMClientError, ValueError):
    """Raised when a provider is not registered."""


def _normalize(provider: str) -> str:
    return (provider or "").strip().lower()


def available_providers() -> list[str]:
    """Registered provider identifiers, sorted."""
    return sorted(_PROVIDER_REGISTRY)


def new_client(provider: str, **kwargs: Any) -> BaseLLMClient:
    """Construct the adapter for a provider without initializing it.

    Args:
        provider: Provider identifier (openai, gemini, bedrock).
        **kwargs: Adapter constructor arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    name = _normalize(provider)
    if name not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"unsupported provider: {provider!r}. "
            f"Available: {', '.join(available_providers())}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[name])
    return adapter_cls(**kwargs)


def initialize_client(
    provider: str, options: ClientOptions, **kwargs: Any,
) -> BaseLLMClient:
    """Construct and initialize a client in one step.

    Initialization errors from the adapter propagate unchanged.
    """
    client = new_client(provider, **kwargs)
    client.initialize(options)
    logger.debug("Created LLM client: provider=%s, model=%s", client.provider_name, client.model_id)
    return client


def create_llm_client(
    provider: str | None = None,
    settings: Settings | None = None,
    model: str | None = None,
) -> BaseLLMClient:
    """Build a ready client with credentials taken from Settings.

    Args:
        provider: Provider identifier; the configured default when omitted.
        settings: Application settings; loaded from the environment when omitted.
        model: Model id overriding the configured one.
    """
    settings = settings or load_settings()
    if provider is None:
        assignment = resolve_default(settings)
        logger.info("Default LLM %s (source=%s)", assignment.key, assignment.source)
        provider = assignment.provider
        model = model or assignment.model

    name = _normalize(provider)
    options = resolve_client_options(name, settings, model=model)
    kwargs: dict[str, Any] = {}
    if name in _IMAGE_FETCHING:
        kwargs["image_fetch_timeout"] = settings.image_fetch_timeout
    return initialize_client(name, options, **kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[_normalize(name)] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
