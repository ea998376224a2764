"""RCON packet encoding and decoding.

Every packet is a little-endian frame::

    [size:int32][id:int32][type:int32][payload bytes][0x00][0x00]

``size`` counts everything after itself: ``4 + 4 + len(payload) + 2``.
"""

from __future__ import annotations

import enum
import random
import struct
from dataclasses import dataclass, field

from rconweb.rcon.errors import RconPacketError

HEADER = struct.Struct("<iii")
SIZE_FIELD = struct.Struct("<i")
PADDING = b"\x00\x00"

# Smallest legal value of the size field (id + type + padding)
MIN_PACKET_SIZE = 4 + 4 + len(PADDING)
# Largest packet a server sends back in one frame
MAX_PACKET_SIZE = 4096 + MIN_PACKET_SIZE

# The id the server answers with when the password is rejected
AUTH_FAILED_ID = -1


class RequestType(enum.IntEnum):
    EXEC_COMMAND = 2
    AUTH = 3


class ResponseType(enum.IntEnum):
    RESPONSE_VALUE = 0
    AUTH_RESPONSE = 2


def new_request_id() -> int:
    """Random positive int32, never the auth failure marker."""
    return random.randint(1, 2**31 - 1)


@dataclass(frozen=True)
class RconRequest:
    request_type: RequestType
    payload: str
    request_id: int = field(default_factory=new_request_id)

    def to_bytes(self) -> bytes:
        body = self.payload.encode("utf-8")
        size = MIN_PACKET_SIZE + len(body)
        return HEADER.pack(size, self.request_id, int(self.request_type)) + body + PADDING


@dataclass(frozen=True)
class RconResponse:
    response_id: int
    response_type: ResponseType
    payload: str

    @classmethod
    def from_bytes(cls, data: bytes) -> RconResponse:
        """Decode one complete frame, size field included."""
        if len(data) < HEADER.size + len(PADDING):
            raise RconPacketError(f"Packet too short ({len(data)} bytes)")

        size, response_id, raw_type = HEADER.unpack_from(data)
        if size < MIN_PACKET_SIZE or size + SIZE_FIELD.size != len(data):
            raise RconPacketError(f"Packet size {size} does not match {len(data)} received bytes")

        try:
            response_type = ResponseType(raw_type)
        except ValueError as e:
            raise RconPacketError(f"Unknown RCON response type: {raw_type}") from e

        body = data[HEADER.size:len(data) - len(PADDING)]
        try:
            payload = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RconPacketError("Failed to decode response payload") from e

        return cls(response_id=response_id, response_type=response_type, payload=payload)

    @property
    def is_auth_failure(self) -> bool:
        return self.response_type == ResponseType.AUTH_RESPONSE and self.response_id == AUTH_FAILED_ID
