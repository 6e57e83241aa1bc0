"""Lock-guarded holder for the active provider."""

from __future__ import annotations

import threading

from message_sender.types import MessageSender
from message_sender.utils.logging import get_logger

__all__ = ["ActiveProviderHolder"]

logger = get_logger(__name__)


class ActiveProviderHolder:
    """Owns the single provider currently used for all outbound notifications.

    Reads and writes serialize through one lock that is held only for the
    reference swap, never across provider I/O. Only fully constructed
    providers are passed to ``install``.
    """

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._provider: MessageSender | None = None

    def get(self) -> MessageSender | None:
        """Return the installed provider, or None before initialization."""
        with self._lock:
            return self._provider

    def install(self, provider: MessageSender) -> None:
        """Atomically replace the active provider."""
        with self._lock:
            previous = self._provider
            self._provider = provider
        logger.info(
            "Installed message sender provider %s (previous: %s)",
            provider.name,
            previous.name if previous is not None else "none",
        )
