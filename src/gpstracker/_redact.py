"""Helpers for safe debug logging.

The endpoint token travels as a query parameter, so URLs and payloads
are redacted before they are emitted to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "auth",
        "token",
        "authorization",
        "password",
        "cookie",
    }
)


def redact_url(url: str) -> str:
    """Return *url* with sensitive query parameters replaced."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (key, "<redacted>" if key.lower() in _SENSITIVE_VALUE_KEYS else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="<>")))


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return *value* with sensitive mapping keys masked and long strings cut.

    Nested mappings are redacted too. Anything else is returned unchanged.
    """
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            masked = name.lower() in _SENSITIVE_VALUE_KEYS
            redacted[name] = "<redacted>" if masked else redact_for_log(item, max_string=max_string)
        return redacted
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}...<truncated>"
    return value
