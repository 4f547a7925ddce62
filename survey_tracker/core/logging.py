"""Structured logging helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

CONTEXT_FIELDS = ("user_id", "role", "survey_id", "trace_id")


@dataclass(frozen=True)
class LogContext:
    """Normalized context fields expected in structured logs."""

    user_id: int | None = None
    role: str | None = None
    survey_id: int | None = None
    trace_id: str | None = None


def build_log_event(event: str, context: LogContext | None = None, **fields: Any) -> dict[str, Any]:
    """Build a normalized structured log payload for ``logger.*(extra=...)``."""
    context = context or LogContext()
    payload: dict[str, Any] = {
        "event": event,
        "event_timestamp": datetime.now(timezone.utc).isoformat(),
    }
    for name in CONTEXT_FIELDS:
        value = getattr(context, name)
        if value is not None:
            payload[name] = value
    payload.update(fields)
    return payload
