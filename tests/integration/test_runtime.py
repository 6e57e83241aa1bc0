"""End-to-end tests of the assembled runtime with real plugins and a mocked transport."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest

from message_sender.core.config import NotificationSettings, StaticSettingsSource
from message_sender.core.errors import ProviderLoadError
from message_sender.core.runtime import build_runtime
from message_sender.plugins.qq import SHORT_RESPONSE_SIGNATURE
from message_sender.storage import InMemoryAuditLog, InMemorySenderConfigStore
from message_sender.types import Response, SenderConfigRecord
from message_sender.utils.http_client import AIOHTTPClient, SenderDeliveryError
from tests.fixtures.sender_mocks import make_event

DISCORD_URL = "https://discord.com/api/webhooks/42/token-value"


@pytest.fixture
def mock_post() -> Iterator[AsyncMock]:
    with patch.object(AIOHTTPClient, "post", new_callable=AsyncMock) as post:
        post.return_value = Response(status=200, body=None, text="")
        yield post


async def test_first_start_installs_empty_provider_then_bootstrap_fills_rows(mock_post: AsyncMock) -> None:
    store = InMemorySenderConfigStore()
    settings = StaticSettingsSource(NotificationSettings(notification_method="discord", notification_enabled=True))
    audit = InMemoryAuditLog()
    runtime = build_runtime(settings, store, audit_log=audit)

    runtime.initialize()
    runtime.bootstrap.run()
    active = runtime.holder.get()

    assert active is not None
    assert active.name in {"empty", "discord"}
    assert {record.name for record in store.list()} == {"discord", "empty", "qq", "telegram", "webhook"}


async def test_hot_swap_to_discord_sends_event_embed(mock_post: AsyncMock) -> None:
    store = InMemorySenderConfigStore()
    audit = InMemoryAuditLog()
    settings = StaticSettingsSource(NotificationSettings(notification_method="none", notification_enabled=True))
    runtime = build_runtime(settings, store, audit_log=audit)
    runtime.initialize()

    _ = runtime.load_provider("discord", f'{{"webhook_url": "{DISCORD_URL}"}}')
    await runtime.dispatcher.send_event(make_event())

    payload = mock_post.await_args.args[1]
    assert "embeds" in payload
    assert audit.entries[-1].message == "Event message sent: offline"


async def test_failed_hot_swap_keeps_current_provider() -> None:
    runtime = build_runtime(StaticSettingsSource(), InMemorySenderConfigStore(), audit_log=InMemoryAuditLog())
    runtime.initialize()
    current = runtime.holder.get()

    with pytest.raises(ProviderLoadError):
        _ = runtime.load_provider("discord", '{"webhook_url": "https://example.com/not-discord"}')

    assert runtime.holder.get() is current


async def test_qq_short_response_counts_as_delivered(mock_post: AsyncMock) -> None:
    row = SenderConfigRecord(name="qq", addition='{"endpoint": "http://127.0.0.1:5700", "target_id": "10001"}')
    audit = InMemoryAuditLog()
    runtime = build_runtime(
        StaticSettingsSource(NotificationSettings(notification_method="qq", notification_enabled=True)),
        InMemorySenderConfigStore((row,)),
        audit_log=audit,
    )
    runtime.initialize()
    error = SenderDeliveryError("Request failed")
    error.__cause__ = OSError(SHORT_RESPONSE_SIGNATURE)
    mock_post.side_effect = error

    await runtime.dispatcher.send_event(make_event())

    assert mock_post.await_count == 1
    assert [(e.message, e.severity) for e in audit.entries] == [("Event message sent: offline", "info")]


async def test_telegram_failure_audit_does_not_leak_bot_token(mock_post: AsyncMock) -> None:
    token = "123456789:ABCdefGHIjklMNOpqrSTUvwxYZ0123456789_"
    row = SenderConfigRecord(name="telegram", addition=f'{{"bot_token": "{token}", "chat_id": "42"}}')
    audit = InMemoryAuditLog()
    runtime = build_runtime(
        StaticSettingsSource(NotificationSettings(notification_method="telegram", notification_enabled=True)),
        InMemorySenderConfigStore((row,)),
        audit_log=audit,
    )
    runtime.initialize()
    mock_post.side_effect = SenderDeliveryError(f"cannot reach https://api.telegram.org/bot{token}/sendMessage")

    with pytest.raises(SenderDeliveryError):
        await runtime.dispatcher.send_text("body", "title")

    assert mock_post.await_count == 3
    assert token not in audit.entries[-1].message
    assert audit.entries[-1].severity == "error"
