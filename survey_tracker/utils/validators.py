"""Deterministic validators and sanitizers applied before any mutation."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from survey_tracker.core.exceptions import ValidationError

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence/display."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    return cleaned[:max_len]


def require_text(value: str | None, field: str, max_len: int = 20000) -> str:
    cleaned = sanitize_text(value, max_len=max_len)
    if not cleaned:
        raise ValidationError(f"{field} is required.", field=field)
    return cleaned


def validate_http_url(value: str | None, field: str = "url") -> str:
    """Accept only absolute http(s) URLs."""
    cleaned = sanitize_text(value, max_len=2048)
    parsed = urlparse(cleaned)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValidationError(f"{field} must be an absolute http(s) URL.", field=field)
    return cleaned


def validate_hex_color(value: str | None, field: str = "color") -> str:
    cleaned = sanitize_text(value, max_len=16)
    if not HEX_COLOR_RE.match(cleaned):
        raise ValidationError(f"{field} must be a #RRGGBB color.", field=field)
    return cleaned


def internal_name(display_name: str) -> str:
    """Lower-cased display name with whitespace runs replaced by ``_``."""
    return _WHITESPACE_RE.sub("_", display_name.strip().lower())
