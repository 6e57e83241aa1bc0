"""Generic JSON webhook provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from message_sender.plugins.webhook.config import WebhookConfig
from message_sender.utils.http_client import AIOHTTPClient, SenderDeliveryError

__all__ = ["WebhookProvider", "create_provider"]

_PROVIDER_NAME: Final[str] = "webhook"


@dataclass(slots=True)
class WebhookProvider:
    """Posts ``{"title": ..., "message": ...}`` to the configured URL."""

    config: WebhookConfig
    http_client: AIOHTTPClient = field(default_factory=AIOHTTPClient)

    @property
    def name(self) -> str:
        return _PROVIDER_NAME

    @property
    def configuration(self) -> WebhookConfig:
        return self.config

    async def send_text_message(self, message: str, title: str) -> None:
        if not self.config.url:
            msg = "Webhook URL is not configured"
            raise SenderDeliveryError(msg)
        _ = await self.http_client.post(
            self.config.url,
            {"title": title, "message": message},
            headers=self.config.headers or None,
            timeout=self.config.timeout_seconds,
        )


def create_provider(config: WebhookConfig) -> WebhookProvider:
    """Plugin factory."""
    return WebhookProvider(config=config)
