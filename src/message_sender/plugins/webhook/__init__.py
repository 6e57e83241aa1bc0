"""Webhook provider plugin metadata registration."""

from message_sender.plugins import PluginMetadata, register_plugin
from message_sender.plugins.webhook.config import WebhookConfig
from message_sender.plugins.webhook.provider import WebhookProvider, create_provider

__all__ = ["WebhookConfig", "WebhookProvider", "create_provider"]

register_plugin(
    PluginMetadata(
        identifier="webhook",
        name="Webhook",
        package=__name__,
        version="0.1.0",
        config_model=WebhookConfig,
        factory=create_provider,  # pyright: ignore[reportArgumentType]
        description="Posts notifications as JSON to an HTTP endpoint.",
    )
)
