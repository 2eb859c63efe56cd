"""Mask weather-provider credentials before text reaches logs or the journal.

Weatherstack and OpenWeatherMap both authenticate with a query parameter, so
the realistic leak path is a request URL echoed inside an httpx error or a
provider's error body.
"""

from __future__ import annotations

import re
from typing import Any

import httpx

REDACTED = "[REDACTED]"

SENSITIVE_PARAMS: tuple[str, ...] = ("access_key", "appid", "api_key", "apikey", "token", "secret")

_PARAM_ALTERNATION = "|".join(re.escape(name) for name in SENSITIVE_PARAMS)
_SENSITIVE_NAME_RE = re.compile(rf"({_PARAM_ALTERNATION}|authorization|bearer)", re.IGNORECASE)
_ASSIGNMENT_RE = re.compile(
    rf"(?i)\b({_PARAM_ALTERNATION}|authorization)\s*[:=]\s*[^\s,;&\"']+"
)
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9\-._~+/]+=*")


def is_sensitive_name(name: str) -> bool:
    return bool(_SENSITIVE_NAME_RE.search(name))


def redact_url(url: str | httpx.URL) -> str:
    """Return ``url`` with every credential query parameter replaced."""
    parsed = httpx.URL(str(url))
    if not parsed.params:
        return str(parsed)
    safe = [
        (name, REDACTED if is_sensitive_name(name) else value)
        for name, value in parsed.params.multi_items()
    ]
    return str(parsed.copy_with(params=safe))


def sanitize_text(text: str) -> str:
    """Redact ``key=value`` credentials and bearer tokens embedded in free text."""
    masked = _BEARER_RE.sub(f"Bearer {REDACTED}", text)
    return _ASSIGNMENT_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", masked)


def sanitize_for_logging(value: Any) -> Any:
    """Walk dicts/lists/tuples, masking values under credential-like keys."""
    if isinstance(value, dict):
        return {
            key: REDACTED if is_sensitive_name(str(key)) else sanitize_for_logging(child)
            for key, child in value.items()
        }
    if isinstance(value, (list, tuple)):
        cleaned = [sanitize_for_logging(item) for item in value]
        return cleaned if isinstance(value, list) else tuple(cleaned)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
