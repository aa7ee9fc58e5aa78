# src/llm/adapters/gemini_adapter.py — v3
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. Only the last message is sent: its text for
text completion, its images followed by its text for image recognition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import google.ai.generativelanguage as glm
import google.generativeai as genai
from google.api_core import client_options as client_options_lib
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import BlockedPromptException, StopCandidateException

from llmbridge.llm.base_client import BaseLLMClient
from llmbridge.llm.errors import ProviderConfigurationError, ProviderRequestError
from llmbridge.llm.images import load_image_bytes
from llmbridge.llm.models import (
    ClientOptions,
    ImageInput,
    LLMResponse,
    Message,
    ModelConfig,
    TokenUsage,
)

logger = logging.getLogger(__name__)

PROVIDER = "gemini"

_SDK_ERRORS = (
    google_exceptions.GoogleAPIError,
    BlockedPromptException,
    StopCandidateException,
)


def build_generation_config(config: ModelConfig) -> dict[str, Any]:
    """Map ModelConfig onto Gemini generation_config keys (set values only)."""
    gen_config: dict[str, Any] = {}
    if config.temperature is not None:
        gen_config["temperature"] = config.temperature
    if config.top_p is not None:
        gen_config["top_p"] = config.top_p
    if config.top_k is not None:
        gen_config["top_k"] = config.top_k
    if config.max_tokens is not None:
        gen_config["max_output_tokens"] = config.max_tokens
    if config.stop_sequences:
        gen_config["stop_sequences"] = list(config.stop_sequences)
    return gen_config


def build_gemini_parts(
    message: Message,
    include_images: bool = False,
    image_loader: Callable[[ImageInput], bytes] | None = None,
) -> list[dict[str, Any]]:
    """Build the content parts for one message.

    Images come first as inline blobs, then the text when non-empty. Without
    images, the text part is always sent.
    """
    parts: list[dict[str, Any]] = []
    if include_images:
        loader = image_loader or load_image_bytes
        for img in message.images:
            parts.append(
                {"inline_data": {"mime_type": img.mime_type, "data": loader(img)}}
            )
        if message.content:
            parts.append({"text": message.content})
    else:
        parts.append({"text": message.content})
    return parts


def parse_gemini_response(
    data: Mapping[str, Any], model: str, raw: Any = None,
) -> LLMResponse:
    """Normalize a generate-content payload (dict form).

    Only the first part of the first candidate is read.
    """
    text = ""
    candidates = data.get("candidates") or []
    if candidates:
        parts = (candidates[0].get("content") or {}).get("parts") or []
        if parts:
            text = parts[0].get("text") or ""

    usage = data.get("usage_metadata") or {}
    return LLMResponse(
        text=text,
        usage=TokenUsage(
            input_tokens=usage.get("prompt_token_count") or 0,
            output_tokens=usage.get("candidates_token_count") or 0,
            total_tokens=usage.get("total_token_count") or 0,
        ),
        model=model,
        provider=PROVIDER,
        raw_response=raw if raw is not None else data,
    )


class GeminiAdapter(BaseLLMClient):
    """Google Gemini adapter.

    Each instance owns its GenerativeServiceClient, so adapters with different
    API keys can live in one process. ``genai.configure`` is never called.
    """

    default_model = "models/gemini-2.0-flash-lite-preview-02-05"

    def __init__(self, image_fetch_timeout: float | None = None) -> None:
        super().__init__()
        self._client: Any = None
        self._image_fetch_timeout = image_fetch_timeout

    def initialize(self, options: ClientOptions) -> None:
        if not options.api_key:
            raise ProviderConfigurationError("api_key is required", provider=PROVIDER)

        client_options = client_options_lib.ClientOptions(
            api_key=options.api_key,
            api_endpoint=options.endpoint_url or None,
        )
        try:
            self._client = glm.GenerativeServiceClient(client_options=client_options)
        except google_exceptions.GoogleAPIError as e:
            raise ProviderConfigurationError(
                f"unable to create Gemini client: {e}", provider=PROVIDER
            ) from e

        self._store_options(options)
        logger.debug("Gemini client ready (model=%s)", self._model_id)

    def text_completion(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        self._require_ready()
        message = self._last_message(messages)
        return self._generate(
            "text_completion", build_gemini_parts(message), config or ModelConfig()
        )

    def image_recognition(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        self._require_ready()
        message = self._last_message(messages)
        parts = build_gemini_parts(
            message, include_images=True, image_loader=self._load_image,
        )
        return self._generate("image_recognition", parts, config or ModelConfig())

    def close(self) -> None:
        if self._client is not None:
            self._client.transport.close()
            self._client = None
        self._options = None

    @property
    def supports_vision(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return PROVIDER

    # --- Internal helpers ---

    def _load_image(self, image: ImageInput) -> bytes:
        return load_image_bytes(image, provider=PROVIDER, timeout=self._image_fetch_timeout)

    def _build_model(self, config: ModelConfig) -> genai.GenerativeModel:
        model = genai.GenerativeModel(
            self._model_id,
            system_instruction=config.system_prompt or None,
            generation_config=build_generation_config(config) or None,
        )
        # GenerativeModel falls back to the module-level client when unset.
        model._client = self._client
        return model

    def _generate(
        self, operation: str, parts: list[dict[str, Any]], config: ModelConfig,
    ) -> LLMResponse:
        model = self._build_model(config)
        request_options: dict[str, Any] = {}
        if self._options is not None and self._options.timeout is not None:
            request_options["timeout"] = self._options.timeout

        with self._call_scope(operation):
            try:
                resp = model.generate_content(parts, request_options=request_options or None)
            except _SDK_ERRORS as e:
                raise ProviderRequestError(
                    f"generate_content failed: {e}", provider=PROVIDER
                ) from e
            result = parse_gemini_response(resp.to_dict(), self._model_id, raw=resp)
        return self._log_usage(result)
