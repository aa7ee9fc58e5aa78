# src/llm/adapters/openai_adapter.py — v2
"""OpenAI GPT adapter implementing BaseLLMClient.

Uses the official openai SDK (Chat Completions). Image recognition is not
wired for this provider and raises ProviderNotImplementedError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import openai

from llmbridge.llm.base_client import BaseLLMClient
from llmbridge.llm.errors import (
    ProviderConfigurationError,
    ProviderNotImplementedError,
    ProviderRequestError,
    ProviderResponseError,
)
from llmbridge.llm.models import (
    ClientOptions,
    LLMResponse,
    Message,
    ModelConfig,
    TokenUsage,
    normalize_role,
)

logger = logging.getLogger(__name__)

PROVIDER = "openai"


def build_openai_request(
    messages: Sequence[Message], config: ModelConfig, model: str,
) -> dict[str, Any]:
    """Build keyword arguments for ``chat.completions.create``.

    The system prompt, when set, goes first. top_k has no Chat Completions
    counterpart and is dropped.
    """
    oai_messages: list[dict[str, str]] = []
    if config.system_prompt:
        oai_messages.append({"role": "system", "content": config.system_prompt})
    for m in messages:
        oai_messages.append({"role": normalize_role(m.role), "content": m.content})

    kwargs: dict[str, Any] = {"model": model, "messages": oai_messages}
    if config.temperature is not None:
        kwargs["temperature"] = config.temperature
    if config.top_p is not None:
        kwargs["top_p"] = config.top_p
    if config.max_tokens is not None:
        kwargs["max_tokens"] = config.max_tokens
    if config.stop_sequences:
        kwargs["stop"] = list(config.stop_sequences)
    return kwargs


def parse_openai_response(
    data: Mapping[str, Any], model: str, raw: Any = None,
) -> LLMResponse:
    """Normalize a chat-completion payload (dict form)."""
    choices = data.get("choices")
    if choices is None:
        raise ProviderResponseError("response missing choices", provider=PROVIDER)

    text = ""
    if choices:
        message = choices[0].get("message") or {}
        text = message.get("content") or ""

    usage = data.get("usage") or {}
    return LLMResponse(
        text=text,
        usage=TokenUsage(
            input_tokens=usage.get("prompt_tokens") or 0,
            output_tokens=usage.get("completion_tokens") or 0,
            total_tokens=usage.get("total_tokens") or 0,
        ),
        model=data.get("model") or model,
        provider=PROVIDER,
        raw_response=raw if raw is not None else data,
    )


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    default_model = "gpt-4o-mini"

    def __init__(self) -> None:
        super().__init__()
        self._client: openai.OpenAI | None = None

    def initialize(self, options: ClientOptions) -> None:
        if not options.api_key:
            raise ProviderConfigurationError("api_key is required", provider=PROVIDER)

        client_kwargs: dict[str, Any] = {"api_key": options.api_key}
        if options.endpoint_url:
            client_kwargs["base_url"] = options.endpoint_url
        if options.timeout is not None:
            client_kwargs["timeout"] = options.timeout

        self._client = openai.OpenAI(**client_kwargs)
        self._store_options(options)
        logger.debug("OpenAI client ready (model=%s)", self._model_id)

    def text_completion(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        self._require_ready()
        if not messages:
            raise ProviderRequestError("no messages provided", provider=PROVIDER)

        kwargs = build_openai_request(messages, config or ModelConfig(), self._model_id)

        with self._call_scope("text_completion"):
            try:
                resp = self._client.chat.completions.create(**kwargs)
            except openai.OpenAIError as e:
                raise ProviderRequestError(
                    f"chat completion failed: {e}", provider=PROVIDER
                ) from e
            result = parse_openai_response(resp.model_dump(), self._model_id, raw=resp)
        return self._log_usage(result)

    def image_recognition(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        raise ProviderNotImplementedError("image_recognition", PROVIDER)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        self._options = None

    @property
    def supports_vision(self) -> bool:
        return False

    @property
    def provider_name(self) -> str:
        return PROVIDER
