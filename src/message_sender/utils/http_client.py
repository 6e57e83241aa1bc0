"""HTTP client shared by the HTTP-based provider plugins.

Wraps aiohttp with per-request timeouts and converts transport problems and
non-success statuses into ``SenderDeliveryError``. The client does not
retry: the dispatcher owns the retry policy so that every attempt is visible
in its logs and counted against its attempt ceiling.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Self

import aiohttp

from message_sender.types.models import Response
from message_sender.utils.sanitization import sanitize_url

__all__ = ["AIOHTTPClient", "SenderDeliveryError"]


class SenderDeliveryError(RuntimeError):
    """Raised when a provider could not deliver a message."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status: int | None = status


class AIOHTTPClient:
    """Async HTTP client for provider webhooks and bot APIs.

    Outside of ``async with`` every request opens a short-lived session, so a
    provider instance can be swapped out or used from different event loops
    without leaking connections. Inside ``async with`` one session is reused.

    Example:
        >>> async with AIOHTTPClient() as client:
        ...     response = await client.post("https://example.com/hook", {"text": "hi"})
    """

    def __init__(self, *, default_timeout_seconds: float = 10.0) -> None:
        if default_timeout_seconds <= 0:
            msg = "default_timeout_seconds must be greater than zero"
            raise ValueError(msg)
        self._default_timeout_seconds: float = default_timeout_seconds
        self._session: aiohttp.ClientSession | None = None
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def __aenter__(self) -> Self:
        if self._session is None:
            self._session = self._new_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _new_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._default_timeout_seconds),
            json_serialize=json.dumps,
        )

    async def post(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send a JSON POST request.

        Args:
            url: Target URL
            payload: JSON body
            headers: Optional extra request headers
            timeout: Request timeout in seconds; defaults to the client timeout

        Returns:
            Response with status, parsed JSON body (or None) and raw text

        Raises:
            SenderDeliveryError: On timeout, transport error or non-2xx status
        """
        effective_timeout = timeout if timeout is not None else self._default_timeout_seconds
        safe_url = sanitize_url(url)
        self._logger.debug("Initiating POST request to %s", safe_url)

        try:
            async with asyncio.timeout(effective_timeout):
                if self._session is not None:
                    status, text = await self._send(self._session, url, payload, headers)
                else:
                    async with self._new_session() as session:
                        status, text = await self._send(session, url, payload, headers)
        except TimeoutError as exc:
            self._logger.warning("Request to %s timed out after %.1fs", safe_url, effective_timeout)
            raise SenderDeliveryError(f"Request timed out after {effective_timeout:.1f}s") from exc
        except aiohttp.InvalidURL as exc:
            raise SenderDeliveryError(f"Malformed URL: {safe_url}") from exc
        except aiohttp.ClientError as exc:
            self._logger.warning("Client error for %s: %s", safe_url, exc)
            raise SenderDeliveryError(f"Request failed: {type(exc).__name__}: {sanitize_url(str(exc))}") from exc

        body: object
        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None

        if not 200 <= status < 300:
            raise SenderDeliveryError(
                f"Unexpected HTTP status {status}: {text[:200]}",
                status=status,
            )
        return Response(status=status, body=body, text=text)

    @staticmethod
    async def _send(
        session: aiohttp.ClientSession,
        url: str,
        payload: Mapping[str, object],
        headers: Mapping[str, str] | None,
    ) -> tuple[int, str]:
        async with session.post(url, json=dict(payload), headers=headers) as response:
            return response.status, await response.text()
