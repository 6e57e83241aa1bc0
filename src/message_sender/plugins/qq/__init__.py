"""QQ provider plugin metadata registration."""

from message_sender.plugins import PluginMetadata, register_plugin
from message_sender.plugins.qq.config import QQConfig
from message_sender.plugins.qq.provider import SHORT_RESPONSE_SIGNATURE, QQProvider, create_provider

__all__ = ["SHORT_RESPONSE_SIGNATURE", "QQConfig", "QQProvider", "create_provider"]

register_plugin(
    PluginMetadata(
        identifier="qq",
        name="QQ",
        package=__name__,
        version="0.1.0",
        config_model=QQConfig,
        factory=create_provider,  # pyright: ignore[reportArgumentType]
        description="Sends notifications to QQ through a OneBot v11 HTTP API.",
    )
)
