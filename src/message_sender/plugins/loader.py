"""Provider factory backed by the plugin registry.

The factory enumerates known provider kinds, supplies each kind's default
configuration for bootstrap and constructs providers from persisted
configuration blobs. Construction validates the blob with the plugin's
Pydantic model first, so a provider that comes out of the factory is always
ready to use.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import TypeIs

from pydantic import BaseModel, ValidationError

from message_sender.core.errors import ProviderLoadError
from message_sender.plugins.discovery import PluginMetadata, get_registered_plugins
from message_sender.types import MessageSender
from message_sender.utils.sanitization import sanitize_exception

__all__ = ["SenderFactory"]

logger = logging.getLogger(__name__)


def _is_message_sender(candidate: object) -> TypeIs[MessageSender]:
    return isinstance(candidate, MessageSender)


class SenderFactory:
    """Creates message sender providers by identifier.

    Args:
        plugins: Plugins to expose. Defaults to every discovered plugin.
    """

    def __init__(self, plugins: Iterable[PluginMetadata] | None = None) -> None:
        resolved = get_registered_plugins() if plugins is None else tuple(plugins)
        self._plugins: MappingProxyType[str, PluginMetadata] = MappingProxyType(
            {metadata.identifier: metadata for metadata in resolved}
        )

    def identifiers(self) -> tuple[str, ...]:
        """Return known provider identifiers sorted alphabetically."""
        return tuple(sorted(self._plugins))

    def get_metadata(self, identifier: str) -> PluginMetadata | None:
        return self._plugins.get(identifier)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._plugins

    def default_configuration(self, identifier: str) -> BaseModel:
        """Return a fresh default configuration for the provider kind."""
        metadata = self._require(identifier)
        return metadata.config_model()

    def iter_defaults(self) -> Iterator[tuple[str, BaseModel]]:
        """Yield ``(identifier, default configuration)`` for every provider kind."""
        for identifier in self.identifiers():
            yield identifier, self.default_configuration(identifier)

    def create(self, identifier: str, addition: str) -> MessageSender:
        """Construct a provider from its serialized configuration.

        Args:
            identifier: Provider identifier
            addition: JSON configuration blob; empty means ``{}``

        Raises:
            ProviderLoadError: Unknown provider, invalid blob or failing factory
        """
        metadata = self._require(identifier)
        try:
            config = metadata.config_model.model_validate_json(addition.strip() or "{}")
        except ValidationError as exc:
            raise ProviderLoadError(identifier, f"invalid configuration ({exc.error_count()} errors)") from exc

        try:
            provider = metadata.factory(config)
        except Exception as exc:
            raise ProviderLoadError(identifier, sanitize_exception(exc)) from exc

        if not _is_message_sender(provider):
            raise ProviderLoadError(identifier, "factory did not return a message sender")

        logger.debug("Created provider instance: %s", identifier)
        return provider

    def _require(self, identifier: str) -> PluginMetadata:
        metadata = self._plugins.get(identifier)
        if metadata is None:
            msg = f"unknown provider (available: {', '.join(self.identifiers()) or 'none'})"
            raise ProviderLoadError(identifier, msg)
        return metadata
