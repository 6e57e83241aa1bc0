"""Secret sanitization utilities for logging and error messages.

Provider plugins carry credentials inside URLs and configuration blobs
(bot tokens, webhook tokens, access tokens). This module redacts them from
strings and structured data before anything reaches a log handler or an
audit entry.

Plugins register their own URL patterns at import time through
``register_sanitization_pattern`` so that this module stays free of
provider-specific knowledge.

Examples:
    >>> sanitize_url("https://api.example.com/data?token=secret123")
    'https://api.example.com/data?token=<REDACTED>'

    >>> sanitize_value({"access_token": "abc", "count": 42})
    {'access_token': '<REDACTED>', 'count': 42}
"""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping, Sequence
from typing import TypeIs

# Redaction marker for sanitized values
REDACTED = "<REDACTED>"

# Generic patterns for common secret-bearing URL structures
_GENERIC_TOKEN_IN_PATH = re.compile(
    r"(/(?:token|api[-_]?key|auth|secret|bearer)[=/])([^/?#]+)",
    re.IGNORECASE,
)
_GENERIC_TOKEN_IN_QUERY = re.compile(
    r"([?&](?:token|access_token|api[-_]?key|auth|secret|bearer)=)([^&]+)",
    re.IGNORECASE,
)

_SENSITIVE_FIELD_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in [
        r".*token.*",
        r".*key.*",
        r".*secret.*",
        r".*password.*",
        r".*credential.*",
        r".*auth.*",
        r".*bearer.*",
        r".*webhook.*",
    ]
]

# Plugin-provided (pattern, replacement) pairs, applied before generic ones
_registered_patterns: list[tuple[re.Pattern[str], str]] = []
_registry_lock = threading.Lock()


def register_sanitization_pattern(pattern: re.Pattern[str], replacement: str) -> None:
    """Register a provider-specific URL pattern to redact.

    Registering the same pattern twice is a no-op, so plugin modules can be
    re-imported safely.

    Args:
        pattern: Compiled pattern matching the secret-bearing part of a URL
        replacement: Replacement string, typically keeping group 1
    """
    with _registry_lock:
        if any(existing.pattern == pattern.pattern for existing, _ in _registered_patterns):
            return
        _registered_patterns.append((pattern, replacement))


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates sensitive data.

    Examples:
        >>> is_sensitive_field("bot_token")
        True
        >>> is_sensitive_field("chat_id")
        False
    """
    return any(pattern.match(field_name) for pattern in _SENSITIVE_FIELD_PATTERNS)


def sanitize_url(url: str) -> str:
    """Sanitize sensitive tokens from URLs while preserving structure.

    Args:
        url: The URL (or any free text containing URLs) to sanitize

    Returns:
        Text with tokens replaced by the REDACTED marker
    """
    if not url:
        return url

    with _registry_lock:
        patterns = list(_registered_patterns)

    sanitized = url
    for pattern, replacement in patterns:
        sanitized = pattern.sub(replacement, sanitized)

    sanitized = _GENERIC_TOKEN_IN_PATH.sub(rf"\1{REDACTED}", sanitized)
    sanitized = _GENERIC_TOKEN_IN_QUERY.sub(rf"\1{REDACTED}", sanitized)
    return sanitized


def _is_primitive(value: object) -> TypeIs[str | int | float | bool | None]:
    return isinstance(value, (str, int, float, bool, type(None)))


def _is_mapping(value: object) -> TypeIs[Mapping[str, object]]:
    return isinstance(value, Mapping)


def _is_sequence(value: object) -> TypeIs[Sequence[object]]:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def sanitize_value(
    value: object,
    *,
    field_name: str | None = None,
) -> object:
    """Recursively sanitize sensitive values from structured data.

    Values are redacted entirely when their field name looks sensitive;
    strings are otherwise passed through ``sanitize_url``.

    Examples:
        >>> sanitize_value({"bot_token": "secret", "count": 42})
        {'bot_token': '<REDACTED>', 'count': 42}
    """
    if field_name and is_sensitive_field(field_name):
        return REDACTED

    if _is_primitive(value):
        if type(value) is str:
            return sanitize_url(value)
        return value

    if _is_mapping(value):
        return {key: sanitize_value(val, field_name=str(key)) for key, val in value.items()}

    if _is_sequence(value):
        sanitized_items: list[object] = [sanitize_value(item) for item in value]
        if isinstance(value, tuple):
            return tuple(sanitized_items)
        return sanitized_items

    return sanitize_url(str(value))


def sanitize_exception(exc: BaseException) -> str:
    """Sanitize an exception into ``"<Type>: <message>"`` safe for logging.

    Examples:
        >>> sanitize_exception(ValueError("bad url https://x.io/a?token=abc"))
        'ValueError: bad url https://x.io/a?token=<REDACTED>'
    """
    return f"{type(exc).__name__}: {sanitize_url(str(exc))}"


def sanitize_args(args: tuple[object, ...]) -> tuple[object, ...]:
    """Sanitize a tuple of logging arguments."""
    return tuple(sanitize_value(arg) for arg in args)
