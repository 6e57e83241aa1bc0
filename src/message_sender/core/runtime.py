"""Assembly of the dispatch components for one process."""

from __future__ import annotations

from dataclasses import dataclass

from message_sender.core.bootstrap import BootstrapTask
from message_sender.core.dispatcher import MessageDispatcher
from message_sender.core.holder import ActiveProviderHolder
from message_sender.core.initializer import Initializer, load_provider
from message_sender.plugins.loader import SenderFactory
from message_sender.storage.audit import LoggingAuditLog
from message_sender.types import AuditLog, MessageSender, SenderConfigStore, SettingsSource

__all__ = ["Runtime", "build_runtime"]


@dataclass(slots=True, frozen=True)
class Runtime:
    """The holder and the components sharing it."""

    holder: ActiveProviderHolder
    factory: SenderFactory
    store: SenderConfigStore
    bootstrap: BootstrapTask
    initializer: Initializer
    dispatcher: MessageDispatcher

    def initialize(self) -> None:
        self.initializer.initialize()

    def load_provider(self, name: str, addition: str) -> MessageSender:
        """Hot-swap the active provider."""
        return load_provider(self.holder, self.factory, name, addition)


def build_runtime(
    settings_source: SettingsSource,
    store: SenderConfigStore,
    *,
    audit_log: AuditLog | None = None,
    factory: SenderFactory | None = None,
) -> Runtime:
    """Create one holder and wire the initializer and dispatcher to it."""
    resolved_factory = factory or SenderFactory()
    holder = ActiveProviderHolder()
    bootstrap = BootstrapTask(store, resolved_factory)
    initializer = Initializer(
        holder,
        settings_source,
        store,
        resolved_factory,
        bootstrap=bootstrap,
    )
    dispatcher = MessageDispatcher(holder, settings_source, audit_log or LoggingAuditLog())
    return Runtime(
        holder=holder,
        factory=resolved_factory,
        store=store,
        bootstrap=bootstrap,
        initializer=initializer,
        dispatcher=dispatcher,
    )
