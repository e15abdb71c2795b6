"""Wire format shared by client and server.

Every frame is an op code and a payload size, both little-endian 32-bit
signed integers, followed by the payload itself. A package payload is a
sequence of length-prefixed values.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")
_HEADER = struct.Struct("<ii")

INT_SIZE = _INT.size
HEADER_SIZE = _HEADER.size


class OpCode(IntEnum):
    """Kinds of frame understood by the server."""

    MESSAGE = 0
    PACKAGE = 1


def _to_bytes(value: str | bytes | bytearray) -> bytes:
    """Strings travel NUL-terminated; raw bytes travel as given."""
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


def _c_string(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def serialize(op_code: int, payload: bytes | bytearray) -> bytes:
    """Build a frame from an op code and its payload."""
    body = bytes(payload)
    return _HEADER.pack(int(op_code), len(body)) + body


def encode_message(text: str | bytes) -> bytes:
    """Build a MESSAGE frame carrying ``text``."""
    return serialize(OpCode.MESSAGE, _to_bytes(text))


@dataclass
class Packet:
    """A frame whose payload is built up from length-prefixed values."""

    op_code: OpCode = OpCode.PACKAGE
    payload: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes | bytearray) -> None:
        """Append one value, prefixed with its size."""
        data = _to_bytes(value)
        self.payload += _INT.pack(len(data)) + data

    def serialize(self) -> bytes:
        """Return the whole frame as bytes."""
        return serialize(self.op_code, self.payload)


def decode_message(payload: bytes | bytearray) -> str:
    """Return the text carried by a MESSAGE payload."""
    return _c_string(bytes(payload))


def decode_values(payload: bytes | bytearray) -> list[str]:
    """Split a PACKAGE payload into its values."""
    data = bytes(payload)
    values: list[str] = []
    offset = 0
    while offset < len(data):
        if len(data) - offset < INT_SIZE:
            raise ValueError(f"truncated value size at offset {offset}")
        (size,) = _INT.unpack_from(data, offset)
        offset += INT_SIZE
        if size < 0 or offset + size > len(data):
            raise ValueError(f"value of size {size} at offset {offset} overruns payload")
        values.append(_c_string(data[offset:offset + size]))
        offset += size
    return values