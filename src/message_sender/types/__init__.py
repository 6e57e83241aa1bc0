"""Type definitions and protocols for message-sender.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (provider capabilities, storage, audit, settings)
- Type aliases (PEP 695 syntax)
"""

from message_sender.types.aliases import AuditSeverity, ProviderFactory
from message_sender.types.models import (
    AuditEntry,
    EventClient,
    EventMessage,
    Response,
    SenderConfigRecord,
)
from message_sender.types.protocols import (
    AuditLog,
    BenignFailureAware,
    EventMessageSender,
    MessageSender,
    SenderConfigStore,
    SettingsSource,
    as_event_sender,
)

__all__ = [
    # Type aliases
    "AuditSeverity",
    "ProviderFactory",
    # Data models
    "AuditEntry",
    "EventClient",
    "EventMessage",
    "Response",
    "SenderConfigRecord",
    # Protocols
    "AuditLog",
    "BenignFailureAware",
    "EventMessageSender",
    "MessageSender",
    "SenderConfigStore",
    "SettingsSource",
    "as_event_sender",
]
