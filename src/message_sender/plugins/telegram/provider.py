"""Telegram provider delivering text through the Bot API sendMessage call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from message_sender.plugins.telegram.config import TelegramConfig
from message_sender.utils.http_client import AIOHTTPClient, SenderDeliveryError

__all__ = ["TelegramProvider", "create_provider"]

_PROVIDER_NAME: Final[str] = "telegram"
_SEND_MESSAGE_METHOD: Final[str] = "sendMessage"


@dataclass(slots=True)
class TelegramProvider:
    """Telegram bot provider (text only)."""

    config: TelegramConfig
    http_client: AIOHTTPClient = field(default_factory=AIOHTTPClient)

    @property
    def name(self) -> str:
        return _PROVIDER_NAME

    @property
    def configuration(self) -> TelegramConfig:
        return self.config

    async def send_text_message(self, message: str, title: str) -> None:
        if not self.config.bot_token or not self.config.chat_id:
            msg = "Telegram bot_token and chat_id must be configured"
            raise SenderDeliveryError(msg)

        response = await self.http_client.post(
            f"{self.config.api_base_url}/bot{self.config.bot_token}/{_SEND_MESSAGE_METHOD}",
            self._build_payload(message, title),
        )
        body = response.body
        if isinstance(body, dict) and body.get("ok") is False:
            description = body.get("description") or "unknown error"  # pyright: ignore[reportUnknownMemberType]
            raise SenderDeliveryError(f"Telegram API error: {description}", status=response.status)

    def _build_payload(self, message: str, title: str) -> dict[str, object]:
        text = f"{title}\n{message}" if title else message
        payload: dict[str, object] = {
            "chat_id": self.config.chat_id,
            "text": text,
            "disable_notification": self.config.disable_notification,
        }
        if self.config.parse_mode is not None:
            payload["parse_mode"] = self.config.parse_mode
        if self.config.message_thread_id is not None:
            payload["message_thread_id"] = self.config.message_thread_id
        return payload


def create_provider(config: TelegramConfig) -> TelegramProvider:
    """Plugin factory."""
    return TelegramProvider(config=config)
