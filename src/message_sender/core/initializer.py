"""Start-up selection of the active provider.

The initializer starts the configuration bootstrap in the background, reads
the global settings and installs the selected provider. Whenever the
selected provider cannot be built (nothing selected, no stored row yet,
invalid configuration) the no-op provider is installed instead, so the
dispatch layer always finds a provider after start-up.
"""

from __future__ import annotations

import logging
from typing import Final

from message_sender.core.bootstrap import BootstrapTask
from message_sender.core.config import ConfigurationError, NotificationSettings
from message_sender.core.errors import ProviderLoadError
from message_sender.core.holder import ActiveProviderHolder
from message_sender.plugins.loader import SenderFactory
from message_sender.storage.config_store import StorageError
from message_sender.types import MessageSender, SenderConfigStore, SettingsSource
from message_sender.utils.logging import get_logger, log_with_context

__all__ = ["EMPTY_CONFIGURATION", "EMPTY_PROVIDER", "Initializer", "load_provider"]

EMPTY_PROVIDER: Final[str] = "empty"
EMPTY_CONFIGURATION: Final[str] = "{}"


def load_provider(
    holder: ActiveProviderHolder,
    factory: SenderFactory,
    name: str,
    addition: str,
) -> MessageSender:
    """Build the named provider from its configuration blob and install it.

    The holder is left untouched when construction fails.

    Raises:
        ProviderLoadError: Unknown provider or invalid configuration
    """
    provider = factory.create(name, addition)
    holder.install(provider)
    return provider


class Initializer:
    """Selects and installs the active provider at start-up."""

    def __init__(
        self,
        holder: ActiveProviderHolder,
        settings_source: SettingsSource,
        store: SenderConfigStore,
        factory: SenderFactory,
        *,
        bootstrap: BootstrapTask | None = None,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        self._holder: ActiveProviderHolder = holder
        self._settings_source: SettingsSource = settings_source
        self._store: SenderConfigStore = store
        self._factory: SenderFactory = factory
        self._bootstrap: BootstrapTask = bootstrap or BootstrapTask(store, factory)
        self._logger: logging.Logger = logger_obj or get_logger(__name__)

    @property
    def bootstrap(self) -> BootstrapTask:
        return self._bootstrap

    def initialize(self) -> None:
        """Start the bootstrap and install the configured provider."""
        _ = self._bootstrap.start()

        settings = self._read_settings()
        if not settings.provider_selected:
            self._install_empty()
            return

        method = settings.notification_method
        try:
            record = self._store.get(method)
        except StorageError as exc:
            log_with_context(
                self._logger,
                logging.WARNING,
                "Failed to read provider configuration, using no-op provider",
                extra={"provider_name": method, "error_message": str(exc)},
            )
            record = None

        if record is None:
            log_with_context(
                self._logger,
                logging.INFO,
                "No stored configuration for selected provider, using no-op provider",
                extra={"provider_name": method},
            )
            self._install_empty()
            return

        try:
            _ = load_provider(self._holder, self._factory, method, record.addition)
        except ProviderLoadError as exc:
            log_with_context(
                self._logger,
                logging.ERROR,
                "Failed to load selected provider, using no-op provider",
                extra={"provider_name": method, "error_message": str(exc)},
            )
            self._install_empty()

    def _read_settings(self) -> NotificationSettings:
        try:
            return self._settings_source.get()
        except ConfigurationError as exc:
            log_with_context(
                self._logger,
                logging.WARNING,
                "Failed to read notification settings, using defaults",
                extra={"error_message": str(exc)},
            )
            return NotificationSettings()

    def _install_empty(self) -> None:
        _ = load_provider(self._holder, self._factory, EMPTY_PROVIDER, EMPTY_CONFIGURATION)
