"""Tests for the MessageDispatcher core component."""

from __future__ import annotations

import logging

import pytest
from _pytest.logging import LogCaptureFixture

from message_sender.core.config import ConfigurationError, NotificationSettings, StaticSettingsSource
from message_sender.core.dispatcher import MAX_ATTEMPTS, MessageDispatcher
from message_sender.core.errors import ProviderNotInitializedError
from message_sender.core.holder import ActiveProviderHolder
from message_sender.storage import InMemoryAuditLog
from message_sender.utils.logging import get_correlation_id
from message_sender.utils.template import DEFAULT_EVENT_TEMPLATE, render_event
from tests.fixtures.sender_mocks import (
    StubBenignProvider,
    StubEventProvider,
    StubTextProvider,
    make_event,
)


class FailingSettingsSource:
    """Settings source that cannot be read."""

    def get(self) -> NotificationSettings:
        raise ConfigurationError("settings store unavailable")


def _dispatcher(
    provider: StubTextProvider | None,
    *,
    settings: NotificationSettings | None = None,
    audit_log: InMemoryAuditLog | None = None,
) -> tuple[MessageDispatcher, InMemoryAuditLog]:
    holder = ActiveProviderHolder()
    if provider is not None:
        holder.install(provider)
    resolved_audit = audit_log or InMemoryAuditLog()
    source = StaticSettingsSource(settings or NotificationSettings(notification_method="stub", notification_enabled=True))
    return MessageDispatcher(holder, source, resolved_audit), resolved_audit


class TestSendText:
    async def test_success_on_first_attempt_writes_info_audit(self) -> None:
        provider = StubTextProvider()
        dispatcher, audit = _dispatcher(provider)

        await dispatcher.send_text("disk almost full", "Storage")

        assert provider.text_calls == [("disk almost full", "Storage")]
        assert [(e.message, e.severity) for e in audit.entries] == [("Message sent: Storage", "info")]

    async def test_disabled_notifications_skip_provider_and_audit(self) -> None:
        provider = StubTextProvider()
        dispatcher, audit = _dispatcher(
            provider,
            settings=NotificationSettings(notification_method="stub", notification_enabled=False),
        )

        await dispatcher.send_text("ignored", "Title")

        assert provider.text_calls == []
        assert audit.entries == ()

    async def test_two_failures_then_success_uses_three_attempts(self) -> None:
        provider = StubTextProvider(fail_times=2)
        dispatcher, audit = _dispatcher(provider)

        await dispatcher.send_text("body", "Retry")

        assert len(provider.text_calls) == 3
        assert len(audit.entries) == 1
        assert audit.entries[0].severity == "info"
        assert audit.entries[0].message == "Message sent: Retry"

    async def test_persistent_failure_raises_last_error_after_three_attempts(self) -> None:
        error = RuntimeError("gateway unreachable")
        provider = StubTextProvider(fail_times=10, error=error)
        dispatcher, audit = _dispatcher(provider)

        with pytest.raises(RuntimeError) as exc_info:
            await dispatcher.send_text("body", "Down")

        assert exc_info.value is error
        assert len(provider.text_calls) == MAX_ATTEMPTS
        assert len(audit.entries) == 1
        entry = audit.entries[0]
        assert entry.severity == "error"
        assert entry.message == "Failed to send message after 3 attempts: gateway unreachable,Down"
        assert (entry.actor, entry.target) == ("", "")

    async def test_failure_audit_redacts_tokens(self) -> None:
        provider = StubTextProvider(
            fail_times=10,
            error=RuntimeError("POST https://example.com/hook?token=s3cr3t failed"),
        )
        dispatcher, audit = _dispatcher(provider)

        with pytest.raises(RuntimeError):
            await dispatcher.send_text("body", "Down")

        assert "s3cr3t" not in audit.entries[0].message

    async def test_text_path_does_not_tolerate_benign_errors(self) -> None:
        provider = StubBenignProvider(fail_times=10)
        dispatcher, audit = _dispatcher(provider)

        with pytest.raises(RuntimeError):
            await dispatcher.send_text("body", "Title")

        assert len(provider.text_calls) == MAX_ATTEMPTS
        assert audit.entries[0].severity == "error"

    async def test_uninitialized_holder_raises(self) -> None:
        dispatcher, audit = _dispatcher(None)

        with pytest.raises(ProviderNotInitializedError, match="not initialized"):
            await dispatcher.send_text("body", "Title")

        assert audit.entries == ()

    async def test_settings_error_propagates(self) -> None:
        provider = StubTextProvider()
        holder = ActiveProviderHolder()
        holder.install(provider)
        dispatcher = MessageDispatcher(holder, FailingSettingsSource(), InMemoryAuditLog())

        with pytest.raises(ConfigurationError):
            await dispatcher.send_text("body", "Title")

        assert provider.text_calls == []

    async def test_failed_attempts_are_logged_with_context(self, caplog: LogCaptureFixture) -> None:
        provider = StubTextProvider(fail_times=1)
        dispatcher, _ = _dispatcher(provider)
        caplog.set_level(logging.WARNING, logger="message_sender.core.dispatcher")

        await dispatcher.send_text("body", "Title")

        failures = [record for record in caplog.records if record.message == "Delivery attempt failed"]
        assert len(failures) == 1
        assert failures[0].attempt == 1  # pyright: ignore[reportAttributeAccessIssue]
        assert failures[0].provider_name == "stub"  # pyright: ignore[reportAttributeAccessIssue]
        assert failures[0].correlation_id  # pyright: ignore[reportAttributeAccessIssue]

    async def test_correlation_id_is_scoped_to_the_call(self) -> None:
        dispatcher, _ = _dispatcher(StubTextProvider())

        await dispatcher.send_text("body", "Title")

        assert get_correlation_id() is None

    def test_rejects_non_positive_attempt_limit(self) -> None:
        with pytest.raises(ValueError, match="max_attempts"):
            _ = MessageDispatcher(ActiveProviderHolder(), StaticSettingsSource(), InMemoryAuditLog(), max_attempts=0)


class TestSendEvent:
    async def test_native_event_provider_receives_event(self) -> None:
        provider = StubEventProvider()
        dispatcher, audit = _dispatcher(provider)
        event = make_event()

        await dispatcher.send_event(event)

        assert provider.event_calls == [event]
        assert provider.text_calls == []
        assert [(e.message, e.severity) for e in audit.entries] == [("Event message sent: offline", "info")]

    async def test_text_only_provider_receives_rendered_default_template(self) -> None:
        provider = StubTextProvider()
        dispatcher, _ = _dispatcher(provider)
        event = make_event()

        await dispatcher.send_event(event)

        assert provider.text_calls == [(render_event(DEFAULT_EVENT_TEMPLATE, event), "offline")]
        message, _title = provider.text_calls[0]
        assert message.startswith("🔴🔴🔴\nEvent: offline\nClients: web-1\n")
        assert message.endswith("Time: 2024-05-01T12:30:00Z")

    async def test_text_only_provider_uses_configured_template(self) -> None:
        provider = StubTextProvider()
        dispatcher, _ = _dispatcher(
            provider,
            settings=NotificationSettings(
                notification_method="stub",
                notification_enabled=True,
                notification_template="[{{event}}] {{client}}: {{message}}",
            ),
        )

        await dispatcher.send_event(make_event())

        assert provider.text_calls == [("[offline] web-1: client went offline", "offline")]

    async def test_disabled_notifications_skip_event(self) -> None:
        provider = StubEventProvider()
        dispatcher, audit = _dispatcher(provider, settings=NotificationSettings(notification_method="stub_events"))

        await dispatcher.send_event(make_event())

        assert provider.event_calls == []
        assert audit.entries == ()

    async def test_benign_failure_counts_as_success_after_one_attempt(self) -> None:
        provider = StubBenignProvider(fail_times=10)
        dispatcher, audit = _dispatcher(provider)

        await dispatcher.send_event(make_event())

        assert len(provider.event_calls) == 1
        assert [(e.message, e.severity) for e in audit.entries] == [("Event message sent: offline", "info")]

    async def test_persistent_failure_raises_and_audits(self) -> None:
        error = ConnectionError("refused")
        provider = StubEventProvider(fail_times=10, error=error)
        dispatcher, audit = _dispatcher(provider)

        with pytest.raises(ConnectionError) as exc_info:
            await dispatcher.send_event(make_event(event="disk_full"))

        assert exc_info.value is error
        assert len(provider.event_calls) == MAX_ATTEMPTS
        assert audit.entries[0].message == "Failed to send event message after 3 attempts: refused,disk_full"
        assert audit.entries[0].severity == "error"

    async def test_event_fails_twice_then_succeeds(self) -> None:
        provider = StubEventProvider(fail_times=2)
        dispatcher, audit = _dispatcher(provider)

        await dispatcher.send_event(make_event())

        assert len(provider.event_calls) == 3
        assert audit.entries[0].severity == "info"

    async def test_uninitialized_holder_raises(self) -> None:
        dispatcher, _ = _dispatcher(None)

        with pytest.raises(ProviderNotInitializedError):
            await dispatcher.send_event(make_event())

    async def test_hot_swapped_provider_is_used_by_next_call(self) -> None:
        first = StubTextProvider("first")
        second = StubTextProvider("second")
        holder = ActiveProviderHolder()
        holder.install(first)
        dispatcher = MessageDispatcher(
            holder,
            StaticSettingsSource(NotificationSettings(notification_method="first", notification_enabled=True)),
            InMemoryAuditLog(),
        )

        await dispatcher.send_text("one", "A")
        holder.install(second)
        await dispatcher.send_text("two", "B")

        assert first.text_calls == [("one", "A")]
        assert second.text_calls == [("two", "B")]
