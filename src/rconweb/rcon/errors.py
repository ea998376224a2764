"""Exceptions raised by the RCON client."""

from __future__ import annotations


class RconError(Exception):
    """Base class for RCON failures."""

    prefix = "RCON failure"

    def __init__(self, cause: str = "") -> None:
        super().__init__(f"{self.prefix}: {cause}" if cause else self.prefix)
        self.cause = cause


class RconConfigurationError(RconError):
    prefix = "Invalid RCON configuration"


class RconConnectionError(RconError):
    prefix = "Failed to connect to the RCON server"


class RconSendError(RconError):
    prefix = "Failed to send data to the RCON server"


class RconReceiveError(RconError):
    prefix = "Failed to receive data from the RCON server"


class RconAuthenticationError(RconError):
    prefix = "RCON login failed"


class RconShutdownError(RconError):
    prefix = "Failed to shutdown the RCON connection"


class RconTimeoutError(RconError):
    """The server did not answer within the configured timeout."""

    prefix = "Timeout waiting for RCON response"

    def __init__(self, elapsed_ms: int) -> None:
        super().__init__(f"elapsed time: {elapsed_ms}ms")
        self.elapsed_ms = elapsed_ms


class RconPacketError(RconError):
    prefix = "Failed to decode RCON response"
