"""llmbridge: one client interface over OpenAI, Google Gemini and AWS Bedrock."""

from __future__ import annotations

__version__ = "0.1.0"

from llmbridge.llm.client_factory import (
    UnsupportedProviderError,
    create_llm_client,
    initialize_client,
    new_client,
)
from llmbridge.llm.errors import (
    LLMClientError,
    ProviderConfigurationError,
    ProviderNotImplementedError,
    ProviderRequestError,
    ProviderResponseError,
)
from llmbridge.llm.models import (
    ClientOptions,
    ImageInput,
    LLMResponse,
    Message,
    ModelConfig,
    TokenUsage,
)
from llmbridge.logging.logger import setup_logging, setup_logging_from_settings

__all__ = [
    "ClientOptions",
    "ImageInput",
    "LLMClientError",
    "LLMResponse",
    "Message",
    "ModelConfig",
    "ProviderConfigurationError",
    "ProviderNotImplementedError",
    "ProviderRequestError",
    "ProviderResponseError",
    "TokenUsage",
    "UnsupportedProviderError",
    "create_llm_client",
    "initialize_client",
    "new_client",
    "setup_logging",
    "setup_logging_from_settings",
]
