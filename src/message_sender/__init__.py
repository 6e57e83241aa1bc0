"""message-sender - notification dispatch for a monitoring service.

This package selects one active message sender provider out of a plugin
set, bootstraps default provider configuration into storage and delivers
text messages and structured events with bounded retry and audit logging.
"""

from message_sender.core.config import NotificationSettings
from message_sender.core.dispatcher import MessageDispatcher
from message_sender.core.errors import (
    MessageSenderError,
    ProviderLoadError,
    ProviderNotInitializedError,
)
from message_sender.core.holder import ActiveProviderHolder
from message_sender.core.runtime import Runtime, build_runtime
from message_sender.types import EventClient, EventMessage

__all__ = [
    "ActiveProviderHolder",
    "EventClient",
    "EventMessage",
    "MessageDispatcher",
    "MessageSenderError",
    "NotificationSettings",
    "ProviderLoadError",
    "ProviderNotInitializedError",
    "Runtime",
    "build_runtime",
]
