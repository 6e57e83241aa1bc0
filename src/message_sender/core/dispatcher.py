"""Notification dispatch through the active provider.

This module implements the MessageDispatcher class, the public delivery
entry point. Each call checks that a provider is installed and that
notifications are enabled, tries the delivery a bounded number of times in
sequence and records the final outcome in the audit log.

Events go to providers that understand them natively; every other provider
receives the event rendered into text with the configured template.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Final

from message_sender.core.errors import ProviderNotInitializedError
from message_sender.core.holder import ActiveProviderHolder
from message_sender.types import (
    AuditLog,
    AuditSeverity,
    BenignFailureAware,
    EventMessage,
    MessageSender,
    SettingsSource,
    as_event_sender,
)
from message_sender.utils.logging import correlation_id_context, get_logger, log_with_context
from message_sender.utils.sanitization import sanitize_exception, sanitize_url
from message_sender.utils.template import render_event

__all__ = ["MAX_ATTEMPTS", "MessageDispatcher"]

MAX_ATTEMPTS: Final[int] = 3

type Delivery = Callable[[], Awaitable[None]]


class MessageDispatcher:
    """Deliver text messages and events through the active provider."""

    def __init__(
        self,
        holder: ActiveProviderHolder,
        settings_source: SettingsSource,
        audit_log: AuditLog,
        *,
        max_attempts: int = MAX_ATTEMPTS,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be >= 1"
            raise ValueError(msg)
        self._holder: ActiveProviderHolder = holder
        self._settings_source: SettingsSource = settings_source
        self._audit_log: AuditLog = audit_log
        self._max_attempts: int = max_attempts
        self._logger: logging.Logger = logger_obj or get_logger(__name__)

    async def send_text(self, message: str, title: str) -> None:
        """Send a text message.

        Returns without sending anything when notifications are disabled.

        Raises:
            ProviderNotInitializedError: No provider installed
            ConfigurationError: Settings could not be read
            Exception: The last delivery error once all attempts failed
        """
        provider = self._require_provider()
        settings = self._settings_source.get()
        if not settings.notification_enabled:
            return

        with correlation_id_context():
            error = await self._deliver(
                provider,
                lambda: provider.send_text_message(message, title),
                label=title,
                tolerate_benign=False,
            )

        if error is None:
            self._audit("Message sent: " + title, "info")
            return
        self._audit(
            f"Failed to send message after {self._max_attempts} attempts: {self._describe(error)},{title}",
            "error",
        )
        raise error

    async def send_event(self, event: EventMessage) -> None:
        """Send a structured event.

        Providers with native event support receive the event itself; others
        receive it rendered with the configured (or default) template.

        Raises:
            ProviderNotInitializedError: No provider installed
            ConfigurationError: Settings could not be read
            Exception: The last delivery error once all attempts failed
        """
        provider = self._require_provider()
        settings = self._settings_source.get()
        if not settings.notification_enabled:
            return

        delivery: Delivery
        event_sender = as_event_sender(provider)
        if event_sender is not None:
            delivery = lambda: event_sender.send_event(event)  # noqa: E731
        else:
            text = render_event(settings.notification_template, event)
            delivery = lambda: provider.send_text_message(text, event.event)  # noqa: E731

        with correlation_id_context():
            error = await self._deliver(provider, delivery, label=event.event, tolerate_benign=True)

        if error is None:
            self._audit("Event message sent: " + event.event, "info")
            return
        self._audit(
            f"Failed to send event message after {self._max_attempts} attempts: "
            f"{self._describe(error)},{event.event}",
            "error",
        )
        raise error

    def _require_provider(self) -> MessageSender:
        provider = self._holder.get()
        if provider is None:
            raise ProviderNotInitializedError()
        return provider

    async def _deliver(
        self,
        provider: MessageSender,
        delivery: Delivery,
        *,
        label: str,
        tolerate_benign: bool,
    ) -> Exception | None:
        """Run ``delivery`` up to the attempt limit; return the last error or None."""
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                await delivery()
            except Exception as exc:
                if tolerate_benign and self._is_benign(provider, exc):
                    log_with_context(
                        self._logger,
                        logging.INFO,
                        "Provider reported a benign failure, treating as delivered",
                        extra={"provider_name": provider.name, "attempt": attempt, "label": label},
                    )
                    return None
                last_error = exc
                log_with_context(
                    self._logger,
                    logging.WARNING,
                    "Delivery attempt failed",
                    extra={
                        "provider_name": provider.name,
                        "attempt": attempt,
                        "max_attempts": self._max_attempts,
                        "label": label,
                        "error_message": sanitize_exception(exc),
                    },
                )
            else:
                log_with_context(
                    self._logger,
                    logging.DEBUG,
                    "Delivery succeeded",
                    extra={"provider_name": provider.name, "attempt": attempt, "label": label},
                )
                return None
        return last_error

    @staticmethod
    def _is_benign(provider: MessageSender, error: Exception) -> bool:
        return isinstance(provider, BenignFailureAware) and provider.is_benign_failure(error)

    @staticmethod
    def _describe(error: Exception) -> str:
        return sanitize_url(str(error))

    def _audit(self, message: str, severity: AuditSeverity) -> None:
        self._audit_log.log("", "", message, severity)
