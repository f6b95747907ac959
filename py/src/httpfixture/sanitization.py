from __future__ import annotations

import json as jsonlib
from typing import Any

_REDACTED_VALUE = "[REDACTED]"

_MAX_DESCRIBE_LENGTH = 120

_SENSITIVE_HEADERS: set[str] = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
}

_BLOCKED_SUBSTRINGS = (
    "secret",
    "token",
    "password",
    "api-key",
    "api_key",
    "apikey",
)


def sanitize_log_string(value: str) -> str:
    v = str(value or "")
    if not v:
        return v
    return v.replace("\r", "").replace("\n", "")


def is_sensitive_name(name: str) -> bool:
    k = str(name or "").strip().lower()
    if not k:
        return False
    if k in _SENSITIVE_HEADERS:
        return True
    return any(s in k for s in _BLOCKED_SUBSTRINGS)


def sanitize_field_value(key: str, value: Any) -> Any:
    if is_sensitive_name(key):
        return _REDACTED_VALUE
    return _sanitize_value(value)


def _sanitize_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return sanitize_log_string(value)
    if isinstance(value, (bytes, bytearray)):
        return sanitize_log_string(bytes(value).decode("utf-8", errors="replace"))
    if isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, list):
        return [_sanitize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_field_value(str(k), v) for k, v in value.items()}
    return sanitize_log_string(str(value))


def describe_value(value: Any, *, limit: int = _MAX_DESCRIBE_LENGTH) -> str:
    """Render an actual value as compact JSON for failure reports."""
    try:
        out = jsonlib.dumps(value, ensure_ascii=False, separators=(", ", ": "), sort_keys=True)
    except (TypeError, ValueError):
        out = repr(value)
    out = sanitize_log_string(out)
    if limit > 0 and len(out) > limit:
        return out[: max(limit - 3, 0)] + "..."
    return out
