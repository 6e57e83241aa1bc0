"""Event template rendering for text-only providers.

Providers that cannot deliver structured events receive the event flattened
into text. The template uses ``{{name}}`` placeholders; this module performs
a pure, single-pass substitution so that values containing placeholder-like
text are never expanded a second time.

The template system is provider-agnostic.
"""

import re
from collections.abc import Mapping, Set
from datetime import UTC, datetime, timedelta
from typing import Final

from message_sender.types.models import EventMessage

KNOWN_PLACEHOLDERS: Final[Set[str]] = frozenset({
    "event",
    "client",
    "time",
    "message",
    "emoji",
})

DEFAULT_EVENT_TEMPLATE: Final[str] = (
    "{{emoji}}{{emoji}}{{emoji}}\n"
    "Event: {{event}}\n"
    "Clients: {{client}}\n"
    "Message: {{message}}\n"
    "Time: {{time}}"
)

CLIENT_SEPARATOR: Final[str] = ", "

# Matches only the known placeholders; anything else stays verbatim
PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\{\{(" + "|".join(sorted(KNOWN_PLACEHOLDERS)) + r")\}\}"
)


def identify_placeholders(template: str) -> Set[str]:
    """Identify the known placeholders used by a template.

    Example:
        >>> sorted(identify_placeholders("{{event}} at {{time}} {{other}}"))
        ['event', 'time']
    """
    return frozenset(PLACEHOLDER_PATTERN.findall(template))


def format_rfc3339(timestamp: datetime) -> str:
    """Format a timestamp as RFC 3339 with second precision.

    UTC is written as ``Z``; naive datetimes are treated as UTC.

    Example:
        >>> format_rfc3339(datetime(2024, 5, 1, 12, 30, tzinfo=UTC))
        '2024-05-01T12:30:00Z'
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    offset = timestamp.utcoffset()
    if offset == timedelta(0):
        return timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")
    return timestamp.isoformat(timespec="seconds")


def join_client_names(event: EventMessage) -> str:
    """Join client display names, falling back to the UUID for blank names."""
    names = [client.name if client.name.strip() else client.uuid for client in event.clients]
    return CLIENT_SEPARATOR.join(names)


def replace_placeholders(template: str, values: Mapping[str, str]) -> str:
    """Replace known placeholders in a single pass.

    Placeholders without a value in ``values`` are left as they are.
    """

    def _substitute(match: re.Match[str]) -> str:
        return values.get(match.group(1), match.group(0))

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def render_event(template: str | None, event: EventMessage) -> str:
    """Render an event into a text message.

    Args:
        template: Template string; None or empty selects DEFAULT_EVENT_TEMPLATE
        event: Event to render

    Returns:
        Rendered message

    Example:
        >>> render_event("{{emoji}} {{event}}: {{client}}", event)
        '🔴 offline: web-1, 5f0c...'
    """
    values = {
        "event": event.event,
        "client": join_client_names(event),
        "time": format_rfc3339(event.time),
        "message": event.message,
        "emoji": event.emoji,
    }
    return replace_placeholders(template or DEFAULT_EVENT_TEMPLATE, values)
