# src/llm/config.py — v2
"""Resolve ClientOptions and the default provider from Settings.

Default resolution order:
  1. LLM_DEFAULT=provider:model (e.g. bedrock:amazon.nova-lite-v1:0)
  2. LLM_DEFAULT_PROVIDER with that provider's configured model
"""

from __future__ import annotations

from dataclasses import dataclass

from llmbridge.config.settings import Settings
from llmbridge.llm.models import ClientOptions


@dataclass(frozen=True)
class LLMAssignment:
    """Resolved provider:model pair."""

    provider: str
    model: str
    source: str  # "explicit" or "provider_default"

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"


def _parse_assignment(value: str) -> tuple[str, str] | None:
    """Parse 'provider:model'. Model ids may themselves contain ':'."""
    if not value or ":" not in value:
        return None
    provider, model = value.split(":", 1)
    return (provider.strip().lower(), model.strip())


def configured_model(provider: str, settings: Settings) -> str:
    """Model id configured for a provider, empty if none."""
    return {
        "openai": settings.openai_model,
        "gemini": settings.gemini_model,
        "bedrock": settings.bedrock_model,
    }.get(provider.strip().lower(), "")


def resolve_default(settings: Settings) -> LLMAssignment:
    """Resolve the default provider and model."""
    parsed = _parse_assignment(settings.llm_default)
    if parsed:
        return LLMAssignment(provider=parsed[0], model=parsed[1], source="explicit")

    provider = settings.llm_default_provider.strip().lower()
    return LLMAssignment(
        provider=provider,
        model=configured_model(provider, settings),
        source="provider_default",
    )


def resolve_client_options(
    provider: str, settings: Settings, model: str | None = None,
) -> ClientOptions:
    """Build ClientOptions for a provider from Settings.

    Unknown providers get options carrying only the model and timeout; the
    factory rejects them before they are used.
    """
    name = provider.strip().lower()
    model_id = model or configured_model(name, settings)
    timeout = settings.llm_request_timeout

    if name == "openai":
        return ClientOptions(
            api_key=settings.openai_api_key,
            endpoint_url=settings.openai_base_url,
            model_id=model_id,
            timeout=timeout,
        )
    if name == "gemini":
        return ClientOptions(
            api_key=settings.gemini_api_key,
            model_id=model_id,
            timeout=timeout,
        )
    if name == "bedrock":
        return ClientOptions(
            access_key=settings.aws_access_key,
            secret_key=settings.aws_secret_key,
            region=settings.aws_region,
            endpoint_url=settings.bedrock_endpoint_url,
            model_id=model_id,
            timeout=timeout,
        )
    return ClientOptions(model_id=model_id, timeout=timeout)
