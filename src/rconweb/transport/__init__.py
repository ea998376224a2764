"""Command transport module for rconweb.

Delivers console commands to the server and returns the raw reply.

Public API:
    CommandTransport -- Abstract base class
    CommandTransportError -- Raised when a command cannot be delivered
    HttpCommandTransport -- HTTP transport for the rconweb endpoint
"""

from rconweb.transport.base import CommandTransport, CommandTransportError

__all__ = ["CommandTransport", "CommandTransportError", "HttpCommandTransport"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "HttpCommandTransport":
        from rconweb.transport.http_backend import HttpCommandTransport
        return HttpCommandTransport
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
