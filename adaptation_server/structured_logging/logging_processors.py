"""
structlog processors applied before rendering.

sanitize_sensitive_data runs first in the chain so that configuration
dumps and error details never write the blob store token, or anything
else that looks like a credential, to the log.
"""

import re
from typing import Any

REDACTED = "[REDACTED]"

# Whole words or key suffixes; "tokens_used" and "image_key" stay readable
_SENSITIVE_KEY = re.compile(r"\b(password|token|secret|credential|authorization|bearer)\b|_token$|_key$|^key$")

SAFE_FIELDS = frozenset({"image_key", "environment_key"})


def _is_sensitive(key: object) -> bool:
    key_lower = str(key).lower()
    return key_lower not in SAFE_FIELDS and _SENSITIVE_KEY.search(key_lower) is not None


def _redact(values: dict[str, Any]) -> dict[str, Any]:
    return {
        key: _redact(value) if isinstance(value, dict) else REDACTED if _is_sensitive(key) else value
        for key, value in values.items()
    }


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Redact credential-like keys, recursing into nested dicts."""
    return _redact(event_dict)
