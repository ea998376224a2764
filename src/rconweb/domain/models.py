"""Core domain models for the rconweb console.

These models represent the data flowing through the console pipeline:
finalized command/reply exchanges, their status tags, and the shortcut
entries offered to the operator.
"""

from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CommandStatus(str, enum.Enum):
    """Status tag attached to a finalized command exchange."""

    UNKNOWN = "unknown"  # Reply received, no rule matched
    ERROR = "error"  # Server reported an error
    INVALID = "invalid"  # Server rejected the command syntax/arguments
    COM = "com"  # The transport call itself failed

    @property
    def is_resendable(self) -> bool:
        """Whether a command settled with this status may be re-dispatched."""
        return self in (CommandStatus.UNKNOWN, CommandStatus.COM)


# ---------------------------------------------------------------------------
# Console Models
# ---------------------------------------------------------------------------


class CommandResult(BaseModel):
    """One finalized command/reply exchange.

    Created exactly once, when the dispatch settles, and never mutated
    afterwards. The id is only used for lookup and removal.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier, stable for the record's lifetime")
    source_command: str = Field(description="The normalized command that was sent")
    matched_status: CommandStatus = Field(description="Status assigned at settlement")
    decoded_reply: str = Field(
        description="Decoded reply markup, or the failure message for 'com' results"
    )
    raw_reply: str = Field(default="", description="Undecoded reply as received")
    created_at: datetime = Field(default_factory=datetime.now, description="When the dispatch settled")

    @property
    def is_resendable(self) -> bool:
        return self.matched_status.is_resendable


class Shortcut(BaseModel):
    """A preset command offered to the operator."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Label shown to the operator")
    command: str = Field(description="Command prefilled when the shortcut is selected")
    icon: str = Field(default="terminal", description="Icon name for graphical front ends")
    color: str = Field(default="secondary", description="Badge color for graphical front ends")


class RconReply(BaseModel):
    """JSON body returned by the HTTP endpoint for one executed command."""

    id: int = Field(description="Request id echoed by the RCON server")
    payload: str = Field(description="Raw reply text, including formatting codes")
