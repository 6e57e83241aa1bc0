"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from message_sender.core.config import NotificationSettings, StaticSettingsSource
from message_sender.core.holder import ActiveProviderHolder
from message_sender.plugins import PluginMetadata, SenderFactory, get_plugin
from message_sender.storage import InMemoryAuditLog, InMemorySenderConfigStore
from tests.fixtures.sender_mocks import make_stub_plugin


@pytest.fixture
def empty_plugin() -> PluginMetadata:
    metadata = get_plugin("empty")
    assert metadata is not None
    return metadata


@pytest.fixture
def factory(empty_plugin: PluginMetadata) -> SenderFactory:
    """Factory exposing the no-op plugin and a stub plugin."""
    return SenderFactory([empty_plugin, make_stub_plugin()])


@pytest.fixture
def holder() -> ActiveProviderHolder:
    return ActiveProviderHolder()


@pytest.fixture
def store() -> InMemorySenderConfigStore:
    return InMemorySenderConfigStore()


@pytest.fixture
def audit_log() -> InMemoryAuditLog:
    return InMemoryAuditLog()


@pytest.fixture
def enabled_settings() -> StaticSettingsSource:
    return StaticSettingsSource(NotificationSettings(notification_method="stub", notification_enabled=True))
