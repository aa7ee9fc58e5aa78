# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider credentials, default models and logging.
Variable names match the plain environment names (OPENAI_API_KEY,
AWS_ACCESS_KEY, ...); no prefix is applied.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Default routing ===
    llm_default: str = ""  # "provider:model", e.g. "bedrock:amazon.nova-lite-v1:0"
    llm_default_provider: str = "openai"
    llm_request_timeout: float | None = None
    image_fetch_timeout: float = 30.0

    # === OpenAI ===
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = ""

    # === Gemini ===
    gemini_api_key: str = ""
    gemini_model: str = "models/gemini-2.0-flash-lite-preview-02-05"

    # === Bedrock ===
    aws_access_key: str = ""
    aws_secret_key: str = ""
    aws_region: str = "us-east-1"
    bedrock_model: str = "amazon.nova-lite-v1:0"
    bedrock_endpoint_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Reject half-configured credentials and malformed routing."""
        errors: list[str] = []

        if bool(self.aws_access_key) != bool(self.aws_secret_key):
            errors.append("AWS_ACCESS_KEY and AWS_SECRET_KEY must be set together")

        if self.llm_default and ":" not in self.llm_default:
            errors.append("LLM_DEFAULT must have the form provider:model")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
