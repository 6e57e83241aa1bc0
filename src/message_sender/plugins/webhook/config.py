"""Webhook provider configuration schema."""

from __future__ import annotations

from typing import Annotated, override

from pydantic import BaseModel, Field, field_validator

from message_sender.utils.sanitization import REDACTED, sanitize_url


class WebhookConfig(BaseModel):
    """Pydantic schema for a generic JSON webhook."""

    url: Annotated[
        str,
        Field(description="Endpoint receiving a JSON POST with title and message"),
    ] = ""
    headers: Annotated[
        dict[str, str],
        Field(description="Extra HTTP headers sent with every request"),
    ] = {}
    timeout_seconds: Annotated[
        float,
        Field(gt=0, description="Request timeout in seconds"),
    ] = 10.0

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Allow an empty URL (not configured yet) or an http(s) URL."""
        cleaned = value.strip()
        if cleaned and not cleaned.startswith(("http://", "https://")):
            msg = "Webhook URL must start with http:// or https://"
            raise ValueError(msg)
        return cleaned

    @override
    def __repr__(self) -> str:
        redacted_headers = {key: REDACTED for key in self.headers}
        return (
            f"WebhookConfig(url={sanitize_url(self.url)!r}, "
            f"headers={redacted_headers!r}, "
            f"timeout_seconds={self.timeout_seconds!r})"
        )
