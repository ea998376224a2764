"""Minecraft RCON protocol support.

Public API:
    RconClient -- Executes commands on one connection per call
    RconConnection -- A single TCP session
    RconRequest / RconResponse -- Packet codec
    RconError and subclasses -- Failure taxonomy
"""

from rconweb.rcon.client import RconClient, RconConnection
from rconweb.rcon.errors import (
    RconAuthenticationError,
    RconConfigurationError,
    RconConnectionError,
    RconError,
    RconPacketError,
    RconReceiveError,
    RconSendError,
    RconShutdownError,
    RconTimeoutError,
)
from rconweb.rcon.packet import RconRequest, RconResponse, RequestType, ResponseType

__all__ = [
    "RconAuthenticationError",
    "RconClient",
    "RconConfigurationError",
    "RconConnection",
    "RconConnectionError",
    "RconError",
    "RconPacketError",
    "RconReceiveError",
    "RconRequest",
    "RconResponse",
    "RconSendError",
    "RconShutdownError",
    "RconTimeoutError",
    "RequestType",
    "ResponseType",
]
