"""Data models for message-sender.

This module defines immutable dataclasses passed between the dispatch core,
the storage adapters and the provider plugins.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class EventClient:
    """Monitored client that originated an event."""

    name: str
    uuid: str


@dataclass(slots=True, frozen=True)
class EventMessage:
    """Structured event notification.

    Carries the event name, a free-text message, an emoji used as the visual
    marker, the time the event happened and the ordered list of clients that
    triggered it.
    """

    event: str
    message: str
    emoji: str
    time: datetime
    clients: tuple[EventClient, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class SenderConfigRecord:
    """Persisted configuration row for one provider kind.

    ``addition`` holds the provider configuration serialized as JSON; the
    core never inspects it, only the owning plugin parses it.
    """

    name: str
    addition: str


@dataclass(slots=True, frozen=True)
class AuditEntry:
    """Single audit log entry."""

    actor: str
    target: str
    message: str
    severity: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Response:
    """HTTP response returned by the shared HTTP client."""

    status: int
    body: object
    text: str
