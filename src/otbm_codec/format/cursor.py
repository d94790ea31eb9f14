"""
Little-endian read/write primitives over a byte buffer.

``ByteReader`` keeps a single monotonic position and raises
``MalformedNodeError`` on short reads, so callers never see ``struct.error``
or silently truncated values. ``ByteWriter`` validates widths and raises
``EncodeError`` for values that do not fit.
"""

import struct
from typing import Optional

from .errors import EncodeError, MalformedNodeError

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")

MAX_STRING_LENGTH = 0xFFFF


class ByteReader:
    """Sequential reader over an unescaped payload."""

    def __init__(self, data: bytes, position: int = 0, base_offset: int = 0):
        """Create a reader.

        Args:
            data: Buffer to read from
            position: Initial read position inside ``data``
            base_offset: Absolute offset of ``data[0]`` in the source stream,
                used only for error messages
        """
        self.data = data
        self.position = position
        self.base_offset = base_offset

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self.data) - self.position

    def _take(self, size: int, what: str) -> bytes:
        end = self.position + size
        if end > len(self.data):
            raise MalformedNodeError(
                f"Truncated {what}: need {size} bytes, {self.remaining} left",
                self.base_offset + self.position,
            )
        chunk = self.data[self.position:end]
        self.position = end
        return chunk

    def read_u8(self, what: str = "u8") -> int:
        return _U8.unpack(self._take(1, what))[0]

    def read_u16(self, what: str = "u16") -> int:
        return _U16.unpack(self._take(2, what))[0]

    def read_u32(self, what: str = "u32") -> int:
        return _U32.unpack(self._take(4, what))[0]

    def read_string(self, encoding: str, what: str = "string") -> str:
        """Read a u16 length prefix followed by that many string bytes."""
        length = self.read_u16(f"{what} length")
        start = self.base_offset + self.position
        raw = self._take(length, what)
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError as e:
            raise MalformedNodeError(f"Undecodable {what} as {encoding}: {e}", start)


class ByteWriter:
    """Append-only little-endian writer."""

    def __init__(self, context: Optional[str] = None):
        """Create an empty writer.

        Args:
            context: Short description used as prefix in error messages
        """
        self.buffer = bytearray()
        self.context = context

    def _fail(self, message: str) -> EncodeError:
        if self.context:
            message = f"{self.context}: {message}"
        return EncodeError(message)

    def _pack(self, packer: struct.Struct, value: Optional[int], what: str) -> None:
        if value is None:
            raise self._fail(f"missing required field '{what}'")
        try:
            self.buffer += packer.pack(value)
        except struct.error as e:
            raise self._fail(f"field '{what}' value {value!r} does not fit: {e}")

    def write_u8(self, value: Optional[int], what: str = "u8") -> None:
        self._pack(_U8, value, what)

    def write_u16(self, value: Optional[int], what: str = "u16") -> None:
        self._pack(_U16, value, what)

    def write_u32(self, value: Optional[int], what: str = "u32") -> None:
        self._pack(_U32, value, what)

    def write_string(self, value: Optional[str], encoding: str, what: str = "string") -> None:
        """Write a u16 length prefix followed by the encoded string."""
        if value is None:
            raise self._fail(f"missing required field '{what}'")
        try:
            raw = value.encode(encoding)
        except UnicodeEncodeError as e:
            raise self._fail(f"field '{what}' is not representable as {encoding}: {e}")
        if len(raw) > MAX_STRING_LENGTH:
            raise self._fail(
                f"field '{what}' is {len(raw)} bytes long, limit is {MAX_STRING_LENGTH}"
            )
        self._pack(_U16, len(raw), f"{what} length")
        self.buffer += raw

    def getvalue(self) -> bytes:
        return bytes(self.buffer)
