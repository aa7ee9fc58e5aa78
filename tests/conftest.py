# tests/conftest.py — v2
"""Shared test fixtures for unit tests.

Provides sample messages, literal provider payloads and a clean environment.
No network access: SDK clients are always mocked.
"""

from __future__ import annotations

import pytest

from llmbridge.llm.models import ImageInput, Message, ModelConfig

_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "AWS_ACCESS_KEY",
    "AWS_SECRET_KEY",
    "AWS_REGION",
    "BEDROCK_MODEL",
    "BEDROCK_ENDPOINT_URL",
    "LLM_DEFAULT",
    "LLM_DEFAULT_PROVIDER",
    "LLM_REQUEST_TIMEOUT",
    "IMAGE_FETCH_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials out of Settings-based tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# === FIXTURES: Generic requests ===


@pytest.fixture
def conversation() -> list[Message]:
    """Three-turn conversation ending with a user question."""
    return [
        Message(role="user", content="Hi there"),
        Message(role="assistant", content="Hello! How can I help?"),
        Message(role="user", content="Name three primary colours."),
    ]


@pytest.fixture
def full_config() -> ModelConfig:
    """ModelConfig with every field set."""
    return ModelConfig(
        temperature=0.3,
        top_p=0.9,
        top_k=20,
        max_tokens=300,
        system_prompt="You are an expert artist.",
        stop_sequences=("END",),
    )


@pytest.fixture
def image_message() -> Message:
    """User message carrying two inline JPEG images."""
    return Message(
        role="user",
        content="What are the images",
        images=[
            ImageInput(format="jpeg", data=b"\xff\xd8first"),
            ImageInput(format="jpeg", data=b"\xff\xd8second"),
        ],
    )


# === FIXTURES: Literal provider payloads ===


@pytest.fixture
def openai_payload() -> dict:
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini-2024-07-18",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Red, yellow and blue."},
                "finish_reason": "stop",
            },
            {
                "index": 1,
                "message": {"role": "assistant", "content": "ignored"},
                "finish_reason": "stop",
            },
        ],
        "usage": {"prompt_tokens": 21, "completion_tokens": 7, "total_tokens": 28},
    }


@pytest.fixture
def gemini_payload() -> dict:
    return {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [{"text": "Hmm, red, yellow and blue they are."}, {"text": "extra"}],
                },
                "finish_reason": 1,
            }
        ],
        "usage_metadata": {
            "prompt_token_count": 12,
            "candidates_token_count": 9,
            "total_token_count": 21,
        },
    }


@pytest.fixture
def bedrock_payload() -> dict:
    return {
        "output": {
            "message": {
                "role": "assistant",
                "content": [{"text": "A dog sitting on grass."}, {"text": "ignored"}],
            }
        },
        "stopReason": "end_turn",
        "usage": {"inputTokens": 1540, "outputTokens": 11, "totalTokens": 1551},
    }
