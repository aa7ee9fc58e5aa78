# src/llm/base_client.py — v2
"""Abstract LLM client interface shared by the provider adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from llmbridge.llm.errors import ProviderConfigurationError, ProviderRequestError
from llmbridge.llm.models import ClientOptions, LLMResponse, Message, ModelConfig
from llmbridge.logging.context import clear_context, set_call_context

logger = logging.getLogger(__name__)


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers.

    Lifecycle: construct, ``initialize(options)``, call operations, ``close()``.
    Instances also work as context managers.
    """

    default_model: str = ""

    def __init__(self) -> None:
        self._options: ClientOptions | None = None
        self._model_id: str = ""

    def __enter__(self) -> BaseLLMClient:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    @abstractmethod
    def initialize(self, options: ClientOptions) -> None:
        """Create the SDK handle from credentials and model id."""

    @abstractmethod
    def text_completion(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        """Text completion."""

    @abstractmethod
    def image_recognition(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        """Multimodal completion over the images attached to the last message."""

    @abstractmethod
    def close(self) -> None:
        """Release the SDK handle. Safe to call more than once."""

    @property
    @abstractmethod
    def supports_vision(self) -> bool:
        """Whether image_recognition is available for this provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, gemini, bedrock)."""

    @property
    def model_id(self) -> str:
        """Model used for calls; empty until initialized."""
        return self._model_id

    @property
    def is_initialized(self) -> bool:
        return self._options is not None

    # --- Helpers for subclasses ---

    def _store_options(self, options: ClientOptions) -> None:
        self._options = options
        self._model_id = options.model_id or self.default_model

    def _require_ready(self) -> ClientOptions:
        if self._options is None:
            raise ProviderConfigurationError(
                "client used before initialize()", provider=self.provider_name
            )
        return self._options

    def _last_message(self, messages: Sequence[Message]) -> Message:
        if not messages:
            raise ProviderRequestError("no messages provided", provider=self.provider_name)
        return messages[-1]

    @contextmanager
    def _call_scope(self, operation: str) -> Iterator[None]:
        """Tag log records with the call context for the duration of a request.

        The context is cleared however the block exits.
        """
        set_call_context(self.provider_name, operation, self._model_id)
        logger.debug("%s %s request (model=%s)", self.provider_name, operation, self._model_id)
        try:
            yield
        except Exception as e:
            logger.warning("%s %s failed: %s", self.provider_name, operation, e)
            raise
        finally:
            clear_context()

    def _log_usage(self, response: LLMResponse) -> LLMResponse:
        logger.debug(
            "%s response: %d input / %d output tokens",
            self.provider_name,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return response
