"""Discord provider plugin metadata registration."""

import re
from typing import Final

from message_sender.plugins import PluginMetadata, register_plugin
from message_sender.plugins.discord.config import DiscordConfig
from message_sender.plugins.discord.provider import DiscordProvider, create_provider
from message_sender.utils.sanitization import REDACTED, register_sanitization_pattern

__all__ = ["DiscordConfig", "DiscordProvider", "create_provider"]

# Matches: https://discord.com/api/webhooks/<id>/<token>
_DISCORD_WEBHOOK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(https?://(?:ptb\.|canary\.)?(?:discord(?:app)?\.com)/api/webhooks/\d+/)([^/?#\s]+)",
    re.IGNORECASE,
)

register_plugin(
    PluginMetadata(
        identifier="discord",
        name="Discord",
        package=__name__,
        version="0.1.0",
        config_model=DiscordConfig,
        factory=create_provider,  # pyright: ignore[reportArgumentType]
        description="Sends notifications to a Discord webhook, events as embeds.",
    )
)

register_sanitization_pattern(_DISCORD_WEBHOOK_PATTERN, rf"\1{REDACTED}")
