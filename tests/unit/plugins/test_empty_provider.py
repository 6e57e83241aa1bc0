"""Tests for the no-op provider plugin."""

from __future__ import annotations

from message_sender.plugins.empty import EmptyConfig, EmptyProvider, create_provider
from message_sender.types import MessageSender, as_event_sender


async def test_accepts_messages_without_sending() -> None:
    provider = create_provider(EmptyConfig())

    await provider.send_text_message("body", "title")

    assert provider.name == "empty"
    assert isinstance(provider, MessageSender)
    assert as_event_sender(provider) is None


def test_configuration_round_trips_as_empty_object() -> None:
    assert EmptyProvider().configuration.model_dump_json() == "{}"
