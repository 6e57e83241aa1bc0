"""Type aliases using modern PEP 695 syntax."""

from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel

from message_sender.types.protocols import MessageSender

# Factory a plugin exposes to build a provider from its validated configuration
type ProviderFactory = Callable[[BaseModel], MessageSender]

# Audit severities written by the dispatch core
type AuditSeverity = Literal["info", "error"]
