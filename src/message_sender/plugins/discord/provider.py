"""Discord webhook provider with native event embeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from message_sender.plugins.discord.config import DiscordConfig
from message_sender.types import EventMessage
from message_sender.utils.http_client import AIOHTTPClient, SenderDeliveryError
from message_sender.utils.template import format_rfc3339, join_client_names

__all__ = ["DiscordProvider", "create_provider"]

_PROVIDER_NAME: Final[str] = "discord"
# Discord API limits
_CONTENT_LIMIT: Final[int] = 2000
_EMBED_TITLE_LIMIT: Final[int] = 256
_EMBED_DESCRIPTION_LIMIT: Final[int] = 4096
_EMBED_FIELD_LIMIT: Final[int] = 1024


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


@dataclass(slots=True)
class DiscordProvider:
    """Discord provider; renders events as embeds instead of templated text."""

    config: DiscordConfig
    http_client: AIOHTTPClient = field(default_factory=AIOHTTPClient)

    @property
    def name(self) -> str:
        return _PROVIDER_NAME

    @property
    def configuration(self) -> DiscordConfig:
        return self.config

    async def send_text_message(self, message: str, title: str) -> None:
        content = f"**{title}**\n{message}" if title else message
        await self._post({"content": _truncate(content, _CONTENT_LIMIT)})

    async def send_event(self, event: EventMessage) -> None:
        clients = join_client_names(event) or "-"
        embed: dict[str, object] = {
            "title": _truncate(f"{event.emoji} {event.event}".strip(), _EMBED_TITLE_LIMIT),
            "description": _truncate(event.message, _EMBED_DESCRIPTION_LIMIT),
            "color": self.config.embed_color,
            "timestamp": format_rfc3339(event.time),
            "fields": [
                {"name": "Clients", "value": _truncate(clients, _EMBED_FIELD_LIMIT), "inline": False},
            ],
        }
        await self._post({"embeds": [embed]})

    async def _post(self, payload: dict[str, object]) -> None:
        if not self.config.webhook_url:
            msg = "Discord webhook_url is not configured"
            raise SenderDeliveryError(msg)
        if self.config.username:
            payload["username"] = self.config.username
        if self.config.avatar_url:
            payload["avatar_url"] = self.config.avatar_url
        _ = await self.http_client.post(self.config.webhook_url, payload)


def create_provider(config: DiscordConfig) -> DiscordProvider:
    """Plugin factory."""
    return DiscordProvider(config=config)
