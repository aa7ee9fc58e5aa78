# src/llm/adapters/bedrock_adapter.py — v1
"""AWS Bedrock adapter implementing BaseLLMClient.

Calls ``InvokeModel`` on the bedrock-runtime client (boto3) with a
``messages-v1`` JSON body, the schema used by the Amazon Nova models.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from llmbridge.llm.base_client import BaseLLMClient
from llmbridge.llm.errors import (
    ProviderConfigurationError,
    ProviderRequestError,
    ProviderResponseError,
)
from llmbridge.llm.images import encode_base64, load_image_bytes
from llmbridge.llm.models import (
    ClientOptions,
    ImageInput,
    LLMResponse,
    Message,
    ModelConfig,
    TokenUsage,
    normalize_role,
)

logger = logging.getLogger(__name__)

PROVIDER = "bedrock"
SCHEMA_VERSION = "messages-v1"


def _inference_config(config: ModelConfig) -> dict[str, Any]:
    inference: dict[str, Any] = {}
    if config.max_tokens is not None:
        inference["maxTokens"] = config.max_tokens
    if config.top_p is not None:
        inference["topP"] = config.top_p
    if config.top_k is not None:
        inference["topK"] = config.top_k
    if config.temperature is not None:
        inference["temperature"] = config.temperature
    if config.stop_sequences:
        inference["stopSequences"] = list(config.stop_sequences)
    return inference


def _assemble_body(
    bedrock_messages: list[dict[str, Any]],
    system_texts: list[str],
    config: ModelConfig,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "schemaVersion": SCHEMA_VERSION,
        "messages": bedrock_messages,
    }
    if system_texts:
        body["system"] = [{"text": text} for text in system_texts]
    inference = _inference_config(config)
    if inference:
        body["inferenceConfig"] = inference
    return body


def build_bedrock_text_body(
    messages: Sequence[Message], config: ModelConfig,
) -> dict[str, Any]:
    """Build the request body for a text completion.

    System-role messages join the system prompt; every other message is sent
    in order with a single text block.
    """
    system_texts = [config.system_prompt] if config.system_prompt else []
    bedrock_messages: list[dict[str, Any]] = []
    for m in messages:
        role = normalize_role(m.role)
        if role == "system":
            if m.content:
                system_texts.append(m.content)
            continue
        bedrock_messages.append({"role": role, "content": [{"text": m.content}]})
    return _assemble_body(bedrock_messages, system_texts, config)


def build_bedrock_image_body(
    message: Message,
    config: ModelConfig,
    image_loader: Callable[[ImageInput], bytes] | None = None,
) -> dict[str, Any]:
    """Build the request body for image recognition from one message.

    Image blocks come first, then the text block when the message has text.
    """
    loader = image_loader or load_image_bytes
    content: list[dict[str, Any]] = [
        {
            "image": {
                "format": img.format_tag,
                "source": {"bytes": encode_base64(loader(img))},
            }
        }
        for img in message.images
    ]
    if message.content:
        content.append({"text": message.content})

    role = normalize_role(message.role)
    if role == "system":
        role = "user"
    system_texts = [config.system_prompt] if config.system_prompt else []
    return _assemble_body([{"role": role, "content": content}], system_texts, config)


def parse_bedrock_response(
    payload: bytes | str | Mapping[str, Any], model: str,
) -> LLMResponse:
    """Normalize an InvokeModel response body.

    Raises:
        ProviderResponseError: If the body is not valid JSON or does not have
            the ``output.message.content`` shape.
    """
    if isinstance(payload, Mapping):
        data = payload
    else:
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ProviderResponseError(
                f"error unmarshaling response: {e}", provider=PROVIDER
            ) from e
        if not isinstance(data, Mapping):
            raise ProviderResponseError("response body is not a JSON object", provider=PROVIDER)

    try:
        output_message = (data.get("output") or {}).get("message") or {}
        content = output_message.get("content") or []
        text = (content[0].get("text") or "") if content else ""

        usage_data = data.get("usage") or {}
        input_tokens = usage_data.get("inputTokens") or 0
        output_tokens = usage_data.get("outputTokens") or 0
        usage = TokenUsage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )
        return LLMResponse(
            text=text, usage=usage, model=model, provider=PROVIDER, raw_response=data,
        )
    except (AttributeError, TypeError, IndexError, KeyError, ValueError) as e:
        raise ProviderResponseError(
            f"unexpected response structure: {e}", provider=PROVIDER
        ) from e


class BedrockAdapter(BaseLLMClient):
    """AWS Bedrock runtime adapter."""

    default_model = "amazon.nova-lite-v1:0"

    def __init__(self, image_fetch_timeout: float | None = None) -> None:
        super().__init__()
        self._client: Any = None
        self._image_fetch_timeout = image_fetch_timeout

    def initialize(self, options: ClientOptions) -> None:
        if bool(options.access_key) != bool(options.secret_key):
            raise ProviderConfigurationError(
                "access_key and secret_key must be provided together", provider=PROVIDER
            )

        session_kwargs: dict[str, Any] = {}
        if options.access_key:
            session_kwargs["aws_access_key_id"] = options.access_key
            session_kwargs["aws_secret_access_key"] = options.secret_key
        if options.region:
            session_kwargs["region_name"] = options.region

        client_kwargs: dict[str, Any] = {}
        if options.endpoint_url:
            client_kwargs["endpoint_url"] = options.endpoint_url
        if options.timeout is not None:
            client_kwargs["config"] = BotoConfig(read_timeout=options.timeout)

        try:
            session = boto3.Session(**session_kwargs)
            self._client = session.client("bedrock-runtime", **client_kwargs)
        except BotoCoreError as e:
            raise ProviderConfigurationError(
                f"unable to load AWS SDK config: {e}", provider=PROVIDER
            ) from e

        self._store_options(options)
        logger.debug("Bedrock client ready (model=%s)", self._model_id)

    def text_completion(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        self._require_ready()
        if not messages:
            raise ProviderRequestError("no messages provided", provider=PROVIDER)
        body = build_bedrock_text_body(messages, config or ModelConfig())
        return self._invoke("text_completion", body)

    def image_recognition(
        self, messages: Sequence[Message], config: ModelConfig | None = None,
    ) -> LLMResponse:
        self._require_ready()
        message = self._last_message(messages)
        body = build_bedrock_image_body(
            message, config or ModelConfig(), image_loader=self._load_image,
        )
        return self._invoke("image_recognition", body)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
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

    def _invoke(self, operation: str, body: dict[str, Any]) -> LLMResponse:
        with self._call_scope(operation):
            try:
                response = self._client.invoke_model(
                    modelId=self._model_id,
                    body=json.dumps(body),
                    contentType="application/json",
                    accept="application/json",
                )
                payload = response["body"].read()
            except (BotoCoreError, ClientError) as e:
                raise ProviderRequestError(
                    f"error calling Bedrock API: {e}", provider=PROVIDER
                ) from e
            result = parse_bedrock_response(payload, self._model_id)
        return self._log_usage(result)
