"""Shared utility modules.

This package provides provider-agnostic helpers:
- Event template rendering (placeholder substitution)
- Secret sanitization for logs and error messages
- Structured logging setup with correlation IDs
- The shared aiohttp client used by HTTP-based plugins
"""

from message_sender.utils.template import (
    DEFAULT_EVENT_TEMPLATE,
    KNOWN_PLACEHOLDERS,
    format_rfc3339,
    identify_placeholders,
    join_client_names,
    render_event,
    replace_placeholders,
)

__all__ = [
    "DEFAULT_EVENT_TEMPLATE",
    "KNOWN_PLACEHOLDERS",
    "format_rfc3339",
    "identify_placeholders",
    "join_client_names",
    "render_event",
    "replace_placeholders",
]
