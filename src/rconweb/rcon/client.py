"""Asynchronous RCON client.

Opens one TCP connection per command, the way the endpoint uses it:
connect, log in, execute, disconnect.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable
from typing import TypeVar

from rconweb.config.settings import RconConfig
from rconweb.rcon.errors import (
    RconAuthenticationError,
    RconConfigurationError,
    RconConnectionError,
    RconReceiveError,
    RconSendError,
    RconShutdownError,
    RconTimeoutError,
)
from rconweb.rcon.packet import (
    MAX_PACKET_SIZE,
    MIN_PACKET_SIZE,
    SIZE_FIELD,
    RconRequest,
    RconResponse,
    RequestType,
    ResponseType,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RconConnection:
    """A single authenticated-or-not TCP session with an RCON server."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        password: str,
        timeout_ms: int = 5000,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._password = password
        self._timeout_ms = timeout_ms
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def login(self) -> bool:
        """Authenticate with the configured password.

        Returns:
            True if the server accepted the password, False otherwise.
        """
        request = RconRequest(RequestType.AUTH, self._password)
        await self._send(request)
        # Some servers send an empty RESPONSE_VALUE before the auth response
        while True:
            response = await self._receive()
            if response.response_type == ResponseType.AUTH_RESPONSE:
                break
        accepted = response.response_id == request.request_id
        logger.debug("RCON login %s", "accepted" if accepted else "rejected")
        return accepted

    async def request(self, request: RconRequest) -> RconResponse:
        """Send a request and return the server's response packet."""
        await self._send(request)
        return await self._receive()

    async def disconnect(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._writer.close()
            await self._with_timeout(self._writer.wait_closed())
        except (OSError, RconTimeoutError) as e:
            raise RconShutdownError(str(e)) from e
        logger.debug("RCON connection closed")

    async def _send(self, request: RconRequest) -> None:
        try:
            self._writer.write(request.to_bytes())
            await self._with_timeout(self._writer.drain())
        except OSError as e:
            raise RconSendError(str(e)) from e

    async def _receive(self) -> RconResponse:
        try:
            raw_size = await self._with_timeout(self._reader.readexactly(SIZE_FIELD.size))
            (size,) = SIZE_FIELD.unpack(raw_size)
            if not MIN_PACKET_SIZE <= size <= MAX_PACKET_SIZE:
                raise RconReceiveError(f"Invalid packet size {size}")
            body = await self._with_timeout(self._reader.readexactly(size))
        except asyncio.IncompleteReadError as e:
            raise RconReceiveError(f"Connection closed after {len(e.partial)} bytes") from e
        except OSError as e:
            raise RconReceiveError(str(e)) from e
        return RconResponse.from_bytes(raw_size + body)

    async def _with_timeout(self, awaitable: Awaitable[T]) -> T:
        started = time.monotonic()
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            elapsed_ms = int((time.monotonic() - started) * 1000)
            raise RconTimeoutError(elapsed_ms) from e


class RconClient:
    """Creates RCON connections from configuration and executes commands.

    Commands are executed one at a time; concurrent callers wait for the
    previous exchange to finish.
    """

    def __init__(self, config: RconConfig) -> None:
        self._config = config
        self._lock = asyncio.Lock()

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    async def get_connection(self) -> RconConnection:
        """Open a new, not yet authenticated, connection."""
        if not self._config.host:
            raise RconConfigurationError("RCON host is not set")
        timeout = self._config.timeout_ms / 1000
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self._config.host, self._config.port),
                timeout=timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise RconConnectionError(str(e) or type(e).__name__) from e
        logger.debug("Connected to RCON server %s:%d", self._config.host, self._config.port)
        return RconConnection(
            reader,
            writer,
            password=self._config.password.get_secret_value(),
            timeout_ms=self._config.timeout_ms,
        )

    async def execute(self, command: str) -> RconResponse:
        """Run one command on a fresh connection.

        The connection is always closed, whatever the outcome.

        Raises:
            RconError: Any failure along the way; RconAuthenticationError
                when the password is rejected.
        """
        async with self._lock:
            connection = await self.get_connection()
            try:
                if not await connection.login():
                    raise RconAuthenticationError("The password was rejected")
                response = await connection.request(RconRequest(RequestType.EXEC_COMMAND, command))
                if response.response_type == ResponseType.AUTH_RESPONSE:
                    # Only happens if the server's auth changed between login and command
                    raise RconAuthenticationError("Unexpected auth response to a command")
            finally:
                await connection.disconnect()
        logger.info("Executed RCON command %r (%d bytes reply)", command, len(response.payload))
        return response
