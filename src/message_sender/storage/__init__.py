"""Storage adapters for provider configuration rows and the audit log."""

from message_sender.storage.audit import InMemoryAuditLog, LoggingAuditLog
from message_sender.storage.config_store import (
    InMemorySenderConfigStore,
    StorageError,
    YamlSenderConfigStore,
)

__all__ = [
    "InMemoryAuditLog",
    "InMemorySenderConfigStore",
    "LoggingAuditLog",
    "StorageError",
    "YamlSenderConfigStore",
]
