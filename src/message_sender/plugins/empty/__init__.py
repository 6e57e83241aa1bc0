"""No-op provider plugin used when no provider is selected."""

from message_sender.plugins import PluginMetadata, register_plugin
from message_sender.plugins.empty.provider import EmptyConfig, EmptyProvider, create_provider

__all__ = ["EmptyConfig", "EmptyProvider", "create_provider"]

register_plugin(
    PluginMetadata(
        identifier="empty",
        name="Empty",
        package=__name__,
        version="0.1.0",
        config_model=EmptyConfig,
        factory=create_provider,  # pyright: ignore[reportArgumentType]
        description="Accepts every message and sends nothing.",
    )
)
