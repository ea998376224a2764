"""Domain models shared across the rconweb console, transport and endpoint."""

from rconweb.domain.models import CommandResult, CommandStatus, RconReply, Shortcut

__all__ = ["CommandResult", "CommandStatus", "RconReply", "Shortcut"]
