"""Protocol definitions for component interfaces.

This module defines the structural contracts between the dispatch core and
its collaborators: provider capabilities, configuration storage, the audit
log sink and the global settings source.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel

from message_sender.types.models import EventMessage, SenderConfigRecord

if TYPE_CHECKING:
    from message_sender.core.config import NotificationSettings


@runtime_checkable
class MessageSender(Protocol):
    """Base capability every provider implements: plain text delivery."""

    @property
    def name(self) -> str:
        """Stable provider identifier."""
        ...

    @property
    def configuration(self) -> BaseModel:
        """Validated provider configuration currently in use."""
        ...

    async def send_text_message(self, message: str, title: str) -> None:
        """Deliver a text message.

        Args:
            message: Message body
            title: Short title; providers without titles may ignore it

        Raises:
            Exception: Any delivery failure
        """
        ...


@runtime_checkable
class EventMessageSender(MessageSender, Protocol):
    """Optional capability for providers that understand structured events."""

    async def send_event(self, event: EventMessage) -> None:
        """Deliver a structured event natively.

        Raises:
            Exception: Any delivery failure
        """
        ...


def as_event_sender(provider: MessageSender) -> EventMessageSender | None:
    """Return the provider as an event sender if it supports events natively."""
    if isinstance(provider, EventMessageSender):
        return provider
    return None


class SenderConfigStore(Protocol):
    """Storage for persisted provider configuration rows."""

    def get(self, name: str) -> SenderConfigRecord | None:
        """Return the row for ``name`` or None when it does not exist."""
        ...

    def save(self, record: SenderConfigRecord) -> None:
        """Create or replace the row for ``record.name``."""
        ...

    def save_if_absent(self, record: SenderConfigRecord) -> bool:
        """Create the row only if none exists; return True when written."""
        ...

    def list(self) -> tuple[SenderConfigRecord, ...]:
        """Return all rows sorted by provider name."""
        ...


class AuditLog(Protocol):
    """Append-only audit log sink."""

    def log(self, actor: str, target: str, message: str, severity: str) -> None:
        """Append an entry."""
        ...


class SettingsSource(Protocol):
    """Source of the global notification settings."""

    def get(self) -> "NotificationSettings":
        """Return current settings.

        Raises:
            ConfigurationError: If settings cannot be read
        """
        ...


@runtime_checkable
class BenignFailureAware(Protocol):
    """Provider that recognizes its own errors which still mean "delivered"."""

    def is_benign_failure(self, error: BaseException) -> bool:
        """Return True if ``error`` was raised although delivery succeeded."""
        ...
