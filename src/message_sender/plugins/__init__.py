"""Plugin system public API exports."""

from message_sender.plugins.discovery import (
    ConfigField,
    PluginMetadata,
    describe_config_fields,
    get_plugin,
    get_registered_plugins,
    register_plugin,
)
from message_sender.plugins.loader import SenderFactory

__all__ = [
    "ConfigField",
    "PluginMetadata",
    "SenderFactory",
    "describe_config_fields",
    "get_plugin",
    "get_registered_plugins",
    "register_plugin",
]
