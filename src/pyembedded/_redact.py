"""Helpers for safe debug logging.

Requests carry the project API key, optional JWTs and user identifiers,
both in JSON bodies and in query parameter pairs. This module masks
those before they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "api-key",
        "api_key",
        "apikey",
        "authorization",
        "auth_token",
        "authtoken",
        "token",
        "email",
        "userid",
        "user_id",
        "cookie",
    }
)


def is_sensitive_key(key: object) -> bool:
    return str(key).lower() in _SENSITIVE_KEYS


def _is_param_pair(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], str)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mappings have sensitive keys masked. ``(name, value)`` tuples, as
    used for query parameters, are treated as single-key mappings.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        return f"{value[:max_string]}…<truncated>" if len(value) > max_string else value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED if is_sensitive_key(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if _is_param_pair(value):
        name, item = value
        return (name, _REDACTED if is_sensitive_key(name) else redact_for_log(item, max_string=max_string))

    if isinstance(value, Sequence) and not isinstance(value, bytearray):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
