# src/llm/models.py — v2
"""Provider-neutral types: Message, ImageInput, ModelConfig, LLMResponse.

Every adapter consumes and produces these types only; provider SDK objects
never leak out except through ``LLMResponse.raw_response``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Role = Literal["user", "assistant", "system"]

_KNOWN_ROLES: frozenset[str] = frozenset({"user", "assistant", "system"})


def normalize_role(role: str | None) -> Role:
    """Map a free-form role onto a known one. Unrecognized roles become "user"."""
    value = (role or "").strip().lower()
    if value in _KNOWN_ROLES:
        return value  # type: ignore[return-value]
    return "user"


class ImageInput(BaseModel):
    """Image payload for multimodal requests.

    Either ``data`` (inline bytes) or ``url`` must be set. When both are
    present the inline bytes are used.
    """

    format: str
    data: bytes | None = None
    url: str | None = None

    @model_validator(mode="after")
    def _require_source(self) -> ImageInput:
        if not self.data and not self.url:
            raise ValueError("ImageInput needs inline data or a url")
        return self

    @property
    def mime_type(self) -> str:
        """MIME type derived from the format tag (``jpeg`` -> ``image/jpeg``)."""
        fmt = self.format.strip().lower()
        if "/" in fmt:
            return fmt
        if fmt == "jpg":
            fmt = "jpeg"
        return f"image/{fmt}"

    @property
    def format_tag(self) -> str:
        """Short format name (``image/jpeg`` -> ``jpeg``)."""
        return self.mime_type.split("/", 1)[1]


class Message(BaseModel):
    """Single message in a conversation."""

    role: str = "user"
    content: str = ""
    images: list[ImageInput] = Field(default_factory=list)


class ModelConfig(BaseModel):
    """Sampling parameters for one call. Unset fields are not sent."""

    model_config = ConfigDict(frozen=True)

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_tokens: int | None = None
    system_prompt: str | None = None
    stop_sequences: tuple[str, ...] = ()


class TokenUsage(BaseModel):
    """Token accounting reported by the provider."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    """Normalized response from any provider."""

    text: str
    usage: TokenUsage = Field(default_factory=TokenUsage)
    model: str
    provider: str
    raw_response: Any = None


class ClientOptions(BaseModel):
    """Credentials and model selection handed to ``initialize``."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", repr=False)
    access_key: str = ""
    secret_key: str = Field(default="", repr=False)
    region: str = ""
    endpoint_url: str = ""
    model_id: str = ""
    timeout: float | None = None
