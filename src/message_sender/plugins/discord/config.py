"""Discord provider configuration schema."""

from __future__ import annotations

import re
from typing import Annotated, Final, override

from pydantic import BaseModel, Field, field_validator

from message_sender.utils.sanitization import sanitize_url

_WEBHOOK_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^https://(?:ptb\.|canary\.)?discord(?:app)?\.com/api/webhooks/\d+/[\w-]+$"
)


class DiscordConfig(BaseModel):
    """Pydantic schema for Discord webhook configuration."""

    webhook_url: Annotated[
        str,
        Field(description="Discord webhook URL"),
    ] = ""
    username: Annotated[
        str,
        Field(description="Username override for the webhook"),
    ] = ""
    avatar_url: Annotated[
        str,
        Field(description="Avatar URL override for the webhook"),
    ] = ""
    embed_color: Annotated[
        int,
        Field(ge=0, le=0xFFFFFF, description="Embed color for event messages"),
    ] = 0x5865F2

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, value: str) -> str:
        cleaned = value.strip()
        if cleaned and not _WEBHOOK_URL_PATTERN.match(cleaned):
            msg = "Webhook URL must look like https://discord.com/api/webhooks/<id>/<token>"
            raise ValueError(msg)
        return cleaned

    @override
    def __repr__(self) -> str:
        return (
            f"DiscordConfig(webhook_url={sanitize_url(self.webhook_url)!r}, "
            f"username={self.username!r}, embed_color={self.embed_color!r})"
        )
