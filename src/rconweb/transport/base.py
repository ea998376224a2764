"""Abstract base class for command transports.

A transport takes one command string and settles exactly once: it either
returns the server's raw reply or raises :class:`CommandTransportError`.
The console never depends on anything beyond that contract, so the HTTP
transport can be swapped for a direct RCON one or a test double.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class CommandTransport(ABC):
    """Abstract interface for sending console commands to a server.

    Example usage::

        async with HttpCommandTransport(base_url="http://localhost:8080") as transport:
            reply = await transport.send("list")
    """

    async def connect(self) -> None:
        """Prepare the transport for sending. The default does nothing."""

    async def disconnect(self) -> None:
        """Release transport resources. Safe to call multiple times."""

    @abstractmethod
    async def send(self, command: str) -> str:
        """Send one command and return the raw reply.

        Args:
            command: The command to execute, already normalized.

        Returns:
            The reply text, including any formatting codes.

        Raises:
            CommandTransportError: If the command could not be delivered
                or the reply could not be read.
        """
        ...

    async def __aenter__(self) -> CommandTransport:
        """Async context manager entry -- connects the transport."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- disconnects the transport."""
        await self.disconnect()


class CommandTransportError(Exception):
    """Raised when a command cannot be delivered or its reply read."""

    def __init__(self, message: str = "", backend: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.backend = backend
        self.status_code = status_code
