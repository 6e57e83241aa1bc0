"""Audit log sinks."""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime

from message_sender.types import AuditEntry
from message_sender.utils.logging import get_logger

__all__ = ["InMemoryAuditLog", "LoggingAuditLog"]

_SEVERITY_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class InMemoryAuditLog:
    """Keeps audit entries in memory, newest last."""

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._entries: list[AuditEntry] = []

    def log(self, actor: str, target: str, message: str, severity: str) -> None:
        entry = AuditEntry(
            actor=actor,
            target=target,
            message=message,
            severity=severity,
            created_at=datetime.now(tz=UTC),
        )
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        with self._lock:
            return tuple(self._entries)


class LoggingAuditLog:
    """Writes audit entries to a dedicated logger."""

    def __init__(self, logger_obj: logging.Logger | None = None) -> None:
        self._logger: logging.Logger = logger_obj or get_logger("message_sender.audit")

    def log(self, actor: str, target: str, message: str, severity: str) -> None:
        level = _SEVERITY_LEVELS.get(severity.lower(), logging.INFO)
        self._logger.log(
            level,
            message,
            extra={"audit_actor": actor, "audit_target": target, "audit_severity": severity},
        )
