# src/logging/context.py - v2
"""Contextual logging support: attach run_id, preset identifier and stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set per run, then per preset while it is being reconciled.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_preset: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "preset", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    preset: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        preset=_preset.get(),
        stage=_stage.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per catalog build)."""
    _run_id.set(run_id)


def set_preset_context(preset: str, stage: str | None = None) -> None:
    """Set preset-level context (called per reconciled preset)."""
    _preset.set(preset)
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _preset.set(None)
    _stage.set(None)
