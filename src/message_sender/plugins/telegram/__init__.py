"""Telegram provider plugin metadata registration."""

import re
from typing import Final

from message_sender.plugins import PluginMetadata, register_plugin
from message_sender.plugins.telegram.config import TelegramConfig
from message_sender.plugins.telegram.provider import TelegramProvider, create_provider
from message_sender.utils.sanitization import REDACTED, register_sanitization_pattern

__all__ = ["TelegramConfig", "TelegramProvider", "create_provider"]

# Matches: https://<api-host>/bot<token>/<method>
_TELEGRAM_BOT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(https?://[^/\s]+/bot)(\d+:[^/?#\s]+)",
    re.IGNORECASE,
)

register_plugin(
    PluginMetadata(
        identifier="telegram",
        name="Telegram",
        package=__name__,
        version="0.1.0",
        config_model=TelegramConfig,
        factory=create_provider,  # pyright: ignore[reportArgumentType]
        description="Sends notifications through a Telegram bot.",
    )
)

register_sanitization_pattern(_TELEGRAM_BOT_PATTERN, rf"\1{REDACTED}")
