# src/logging/context.py — v2
"""Contextual logging support: attach provider, operation and model to records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set by an adapter for the duration of one provider call.
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_model: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)


@dataclass
class LogContext:
    """Snapshot of the current logging context."""

    provider: str | None = None
    operation: str | None = None
    model: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        provider=_provider.get(),
        operation=_operation.get(),
        model=_model.get(),
    )


def set_call_context(provider: str, operation: str, model: str | None = None) -> None:
    """Set the context for one provider call."""
    _provider.set(provider)
    _operation.set(operation)
    _model.set(model or None)


def clear_context() -> None:
    """Reset all context variables."""
    _provider.set(None)
    _operation.set(None)
    _model.set(None)
