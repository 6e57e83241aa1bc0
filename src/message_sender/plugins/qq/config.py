"""QQ (OneBot v11) provider configuration schema."""

from __future__ import annotations

from typing import Annotated, Literal, override

from pydantic import BaseModel, Field, field_validator

from message_sender.utils.sanitization import REDACTED


class QQConfig(BaseModel):
    """Pydantic schema for a OneBot v11 HTTP API endpoint."""

    endpoint: Annotated[
        str,
        Field(description="OneBot HTTP API base URL, e.g. http://127.0.0.1:5700"),
    ] = ""
    access_token: Annotated[
        str,
        Field(description="OneBot access token, sent as a bearer token"),
    ] = ""
    target_type: Annotated[
        Literal["private", "group"],
        Field(description="Deliver to a user (private) or a group"),
    ] = "private"
    target_id: Annotated[
        str,
        Field(description="QQ user ID or group ID"),
    ] = ""

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("target_id")
    @classmethod
    def validate_target_id(cls, value: str) -> str:
        cleaned = value.strip()
        if cleaned and not cleaned.isdigit():
            msg = "Target ID must be numeric"
            raise ValueError(msg)
        return cleaned

    @override
    def __repr__(self) -> str:
        return (
            f"QQConfig(endpoint={self.endpoint!r}, access_token={REDACTED!r}, "
            f"target_type={self.target_type!r}, target_id={self.target_id!r})"
        )
