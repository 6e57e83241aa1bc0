"""No-op message sender."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Final

from pydantic import BaseModel

__all__ = ["EmptyConfig", "EmptyProvider", "create_provider"]

EMPTY_PROVIDER_NAME: Final[str] = "empty"


class EmptyConfig(BaseModel):
    """The no-op provider takes no configuration."""


@dataclass(slots=True)
class EmptyProvider:
    """Provider that accepts every message and delivers nothing."""

    config: EmptyConfig = field(default_factory=EmptyConfig)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return EMPTY_PROVIDER_NAME

    @property
    def configuration(self) -> EmptyConfig:
        return self.config

    async def send_text_message(self, message: str, title: str) -> None:
        self._logger.debug("Discarding message %r (no provider selected)", title)


def create_provider(config: EmptyConfig) -> EmptyProvider:
    """Plugin factory."""
    return EmptyProvider(config=config)
