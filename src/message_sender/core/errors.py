"""Exceptions raised by the dispatch core."""

from __future__ import annotations


class MessageSenderError(Exception):
    """Base exception for message-sender failures."""


class ProviderNotInitializedError(MessageSenderError):
    """Raised when a dispatch is attempted before a provider is installed."""

    def __init__(self) -> None:
        super().__init__("message sender provider is not initialized")


class ProviderLoadError(MessageSenderError):
    """Raised when a provider cannot be constructed from its configuration."""

    provider: str

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"Failed to load provider {provider!r}: {message}")
        self.provider = provider
