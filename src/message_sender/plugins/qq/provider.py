"""QQ provider delivering text through a OneBot v11 HTTP API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from message_sender.plugins.qq.config import QQConfig
from message_sender.utils.http_client import AIOHTTPClient, SenderDeliveryError

__all__ = ["SHORT_RESPONSE_SIGNATURE", "QQProvider", "create_provider"]

_PROVIDER_NAME: Final[str] = "qq"
_SEND_MSG_ACTION: Final[str] = "send_msg"

# OneBot gateways answer some successful sends with a truncated binary frame,
# which surfaces as this exact error text although the message was delivered.
SHORT_RESPONSE_SIGNATURE: Final[str] = "short response: \x00\x00\x00\x1a\x00\x00\x00"


@dataclass(slots=True)
class QQProvider:
    """QQ provider (text only)."""

    config: QQConfig
    http_client: AIOHTTPClient = field(default_factory=AIOHTTPClient)

    @property
    def name(self) -> str:
        return _PROVIDER_NAME

    @property
    def configuration(self) -> QQConfig:
        return self.config

    def is_benign_failure(self, error: BaseException) -> bool:
        """Return True for the short-response error that accompanies a delivered message."""
        current: BaseException | None = error
        while current is not None:
            if str(current) == SHORT_RESPONSE_SIGNATURE:
                return True
            current = current.__cause__
        return False

    async def send_text_message(self, message: str, title: str) -> None:
        if not self.config.endpoint or not self.config.target_id:
            msg = "QQ endpoint and target_id must be configured"
            raise SenderDeliveryError(msg)

        headers = {"Authorization": f"Bearer {self.config.access_token}"} if self.config.access_token else None
        response = await self.http_client.post(
            f"{self.config.endpoint}/{_SEND_MSG_ACTION}",
            self._build_payload(message, title),
            headers=headers,
        )
        body = response.body
        if isinstance(body, dict) and body.get("retcode", 0) != 0:  # pyright: ignore[reportUnknownMemberType]
            wording = body.get("wording") or body.get("msg") or "unknown error"  # pyright: ignore[reportUnknownMemberType]
            raise SenderDeliveryError(f"OneBot API error: {wording}", status=response.status)

    def _build_payload(self, message: str, title: str) -> dict[str, object]:
        target_key = "user_id" if self.config.target_type == "private" else "group_id"
        return {
            "message_type": self.config.target_type,
            target_key: int(self.config.target_id),
            "message": f"{title}\n{message}" if title else message,
        }


def create_provider(config: QQConfig) -> QQProvider:
    """Plugin factory."""
    return QQProvider(config=config)
