"""Telegram provider configuration schema."""

from __future__ import annotations

import re
from typing import Annotated, Final, Literal, override

from pydantic import BaseModel, Field, field_validator

from message_sender.utils.sanitization import REDACTED

_BOT_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+:[A-Za-z0-9_-]{35,}$")
_CHAT_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(@[a-zA-Z0-9_]{5,}|-?\d+)$")


class TelegramConfig(BaseModel):
    """Pydantic schema for Telegram bot configuration.

    Empty credentials are accepted so that bootstrap can persist a default
    row; sending with empty credentials fails at delivery time.
    """

    bot_token: Annotated[
        str,
        Field(description="Telegram bot token from BotFather"),
    ] = ""
    chat_id: Annotated[
        str,
        Field(description="Target chat ID (user, group, or channel)"),
    ] = ""
    message_thread_id: Annotated[
        int | None,
        Field(ge=1, description="Message thread ID for topic/forum messages"),
    ] = None
    parse_mode: Annotated[
        Literal["HTML", "Markdown", "MarkdownV2"] | None,
        Field(description="Message formatting mode"),
    ] = None
    disable_notification: Annotated[
        bool,
        Field(description="Send notification silently"),
    ] = False
    api_base_url: Annotated[
        str,
        Field(description="Bot API endpoint, for self-hosted API servers"),
    ] = "https://api.telegram.org"

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, value: str) -> str:
        cleaned = value.strip()
        if cleaned and not _BOT_TOKEN_PATTERN.match(cleaned):
            msg = "Bot token must be in format: <numeric_id>:<token> (token: 35+ alphanumeric chars, _, -)"
            raise ValueError(msg)
        return cleaned

    @field_validator("chat_id")
    @classmethod
    def validate_chat_id(cls, value: str) -> str:
        cleaned = value.strip()
        if cleaned and not _CHAT_ID_PATTERN.match(cleaned):
            msg = "Chat ID must be numeric (user/group) or @username (channel)"
            raise ValueError(msg)
        return cleaned

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @override
    def __repr__(self) -> str:
        return (
            f"TelegramConfig(bot_token={REDACTED!r}, chat_id={self.chat_id!r}, "
            f"message_thread_id={self.message_thread_id!r}, parse_mode={self.parse_mode!r})"
        )
