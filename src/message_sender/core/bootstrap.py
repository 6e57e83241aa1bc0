"""One-time bootstrap of default provider configuration rows.

Every provider kind known to the factory gets a persisted configuration row
holding its default configuration, unless a row for that name exists
already. Existing rows are never overwritten.

Bootstrap runs detached from provider selection: the initializer starts it
and continues immediately. A provider selected before its row exists is
replaced by the no-op provider for that start-up.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from pydantic_core import PydanticSerializationError

from message_sender.plugins.loader import SenderFactory
from message_sender.storage.config_store import StorageError
from message_sender.types import SenderConfigRecord, SenderConfigStore
from message_sender.utils.logging import get_logger, log_with_context

__all__ = ["BootstrapTask", "OneShot"]


class OneShot:
    """Latch that runs a callable at most once.

    Concurrent callers block until the first execution finishes and then
    return without running it again. An execution that raises still counts.
    """

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._done: bool = False

    @property
    def done(self) -> bool:
        return self._done

    def do(self, func: Callable[[], None]) -> bool:
        """Run ``func`` unless it already ran; return True if it ran now."""
        if self._done:
            return False
        with self._lock:
            if self._done:
                return False
            try:
                func()
            finally:
                self._done = True
        return True


class BootstrapTask:
    """Writes default configuration rows for all provider kinds, once."""

    def __init__(
        self,
        store: SenderConfigStore,
        factory: SenderFactory,
        *,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        self._store: SenderConfigStore = store
        self._factory: SenderFactory = factory
        self._latch: OneShot = OneShot()
        self._logger: logging.Logger = logger_obj or get_logger(__name__)

    @property
    def completed(self) -> bool:
        return self._latch.done

    def start(self) -> threading.Thread:
        """Run the bootstrap on a daemon thread and return the thread."""
        thread = threading.Thread(target=self.run, name="message-sender-bootstrap", daemon=True)
        thread.start()
        return thread

    def run(self) -> None:
        """Run the bootstrap; later and concurrent calls are collapsed into the first."""
        _ = self._latch.do(self._bootstrap)

    def _bootstrap(self) -> None:
        created = 0
        for identifier in self._factory.identifiers():
            try:
                if self._store.get(identifier) is not None:
                    continue
                addition = self._factory.default_configuration(identifier).model_dump_json()
                if self._store.save_if_absent(SenderConfigRecord(name=identifier, addition=addition)):
                    created += 1
            except (PydanticSerializationError, StorageError, OSError, ValueError) as exc:
                log_with_context(
                    self._logger,
                    logging.ERROR,
                    "Failed to save default configuration for provider",
                    extra={"provider_name": identifier, "error_message": str(exc)},
                )
        self._logger.info("Provider configuration bootstrap finished (%d rows created)", created)
