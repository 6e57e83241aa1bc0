"""Tests for start-up provider selection."""

from __future__ import annotations

import pytest

from message_sender.core.config import ConfigurationError, NotificationSettings, StaticSettingsSource
from message_sender.core.errors import ProviderLoadError
from message_sender.core.holder import ActiveProviderHolder
from message_sender.core.initializer import Initializer, load_provider
from message_sender.plugins import SenderFactory
from message_sender.storage import InMemorySenderConfigStore, StorageError
from message_sender.types import SenderConfigRecord
from tests.fixtures.sender_mocks import StubTextProvider


class BrokenSettingsSource:
    def get(self) -> NotificationSettings:
        raise ConfigurationError("unreadable")


class BrokenStore(InMemorySenderConfigStore):
    def get(self, name: str) -> SenderConfigRecord | None:
        raise StorageError(f"cannot read {name}")


def _initialize(
    holder: ActiveProviderHolder,
    factory: SenderFactory,
    store: InMemorySenderConfigStore,
    method: str,
) -> Initializer:
    source = StaticSettingsSource(NotificationSettings(notification_method=method, notification_enabled=True))
    initializer = Initializer(holder, source, store, factory)
    initializer.initialize()
    return initializer


def _active_name(holder: ActiveProviderHolder) -> str:
    provider = holder.get()
    assert provider is not None
    return provider.name


class TestInitializer:
    @pytest.mark.parametrize("method", ["none", "", "  NONE  "])
    def test_no_selection_installs_empty_provider(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
        store: InMemorySenderConfigStore,
        method: str,
    ) -> None:
        _ = _initialize(holder, factory, store, method)

        assert _active_name(holder) == "empty"

    def test_selected_provider_with_row_is_installed(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
    ) -> None:
        store = InMemorySenderConfigStore((SenderConfigRecord(name="stub", addition='{"greeting": "hi"}'),))

        _ = _initialize(holder, factory, store, "stub")

        provider = holder.get()
        assert isinstance(provider, StubTextProvider)
        assert provider.configuration.greeting == "hi"

    def test_missing_row_installs_empty_provider(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
    ) -> None:
        class NoWriteStore(InMemorySenderConfigStore):
            def save_if_absent(self, record: SenderConfigRecord) -> bool:
                return False

        _ = _initialize(holder, factory, NoWriteStore(), "stub")

        assert _active_name(holder) == "empty"

    def test_invalid_configuration_installs_empty_provider(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
    ) -> None:
        store = InMemorySenderConfigStore((SenderConfigRecord(name="stub", addition="{not json"),))

        _ = _initialize(holder, factory, store, "stub")

        assert _active_name(holder) == "empty"

    def test_unknown_provider_installs_empty_provider(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
    ) -> None:
        store = InMemorySenderConfigStore((SenderConfigRecord(name="pager", addition="{}"),))

        _ = _initialize(holder, factory, store, "pager")

        assert _active_name(holder) == "empty"

    def test_storage_error_installs_empty_provider(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
    ) -> None:
        initializer = Initializer(
            holder,
            StaticSettingsSource(NotificationSettings(notification_method="stub")),
            BrokenStore(),
            factory,
        )

        initializer.initialize()

        assert _active_name(holder) == "empty"

    def test_unreadable_settings_fall_back_to_defaults(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
        store: InMemorySenderConfigStore,
    ) -> None:
        initializer = Initializer(holder, BrokenSettingsSource(), store, factory)

        initializer.initialize()

        assert _active_name(holder) == "empty"

    def test_bootstrap_is_started(
        self,
        holder: ActiveProviderHolder,
        factory: SenderFactory,
        store: InMemorySenderConfigStore,
    ) -> None:
        initializer = _initialize(holder, factory, store, "none")

        initializer.bootstrap.run()

        assert initializer.bootstrap.completed is True
        assert {record.name for record in store.list()} == {"empty", "stub"}


class TestLoadProvider:
    def test_installs_new_provider(self, holder: ActiveProviderHolder, factory: SenderFactory) -> None:
        provider = load_provider(holder, factory, "stub", "")

        assert holder.get() is provider
        assert provider.name == "stub"

    def test_failure_leaves_holder_untouched(self, holder: ActiveProviderHolder, factory: SenderFactory) -> None:
        current = load_provider(holder, factory, "empty", "{}")

        with pytest.raises(ProviderLoadError) as exc_info:
            _ = load_provider(holder, factory, "stub", '{"fail_times": "many"}')

        assert exc_info.value.provider == "stub"
        assert holder.get() is current
