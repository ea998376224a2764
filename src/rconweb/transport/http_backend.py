"""HTTP command transport.

Posts each command to the rconweb endpoint and reads the reply payload.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from rconweb.domain.models import RconReply
from rconweb.transport.base import CommandTransport, CommandTransportError

logger = logging.getLogger(__name__)

RCON_PATH = "/api/rcon"


class HttpCommandTransport(CommandTransport):
    """Sends commands as ``POST /api/rcon`` requests with a text body."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
            logger.info("HTTP transport ready for %s", self._base_url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP transport closed")

    async def send(self, command: str) -> str:
        """Send a command via HTTP POST and return the reply payload."""
        if self._client is None:
            raise CommandTransportError("Not connected to endpoint", backend="http")
        try:
            resp = await self._client.post(
                RCON_PATH,
                content=command.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CommandTransportError(
                f"HTTP request to {RCON_PATH} failed: {e.response.status_code} {e.response.reason_phrase}",
                backend="http",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise CommandTransportError(
                f"HTTP request to {RCON_PATH} failed: {e}", backend="http"
            ) from e

        try:
            reply = RconReply.model_validate_json(resp.content)
        except ValidationError as e:
            raise CommandTransportError(
                f"Malformed reply from {RCON_PATH}", backend="http", status_code=resp.status_code
            ) from e

        logger.debug("Reply %d for %r: %s", reply.id, command, reply.payload[:50])
        return reply.payload
