from __future__ import annotations

import struct
import uuid

from hyquery.transport.errors import BufferUnderrunError, ProtocolError

_U8 = struct.Struct("<B")
_U16_LE = struct.Struct("<H")
_I32_LE = struct.Struct("<i")
_I64_BE = struct.Struct(">q")

_MASK64 = (1 << 64) - 1
MAX_STRING_LEN = 0xFFFF


def format_uuid(msb: int, lsb: int) -> str:
    """
    Render two signed 64-bit halves as a canonical 8-4-4-4-12 UUID string.
    Negative halves are reduced into the unsigned 64-bit space first.
    """
    return str(uuid.UUID(int=((msb & _MASK64) << 64) | (lsb & _MASK64)))


def uuid_to_bits(text: str) -> tuple[int, int]:
    value = uuid.UUID(text).int
    msb, lsb = value >> 64, value & _MASK64
    # back to the signed representation used on the wire
    if msb >= 1 << 63:
        msb -= 1 << 64
    if lsb >= 1 << 63:
        lsb -= 1 << 64
    return msb, lsb


class BufferReader:
    """
    Sequential cursor over a received datagram.

    Every read checks the remaining length before slicing, so a truncated
    buffer raises BufferUnderrunError and never yields a short value. The
    offset only moves forward and is left untouched by a failed read.
    """

    def __init__(self, buf: bytes):
        self._buf = memoryview(bytes(buf))
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._offset

    def _take(self, n: int) -> memoryview:
        if n < 0:
            raise ValueError("read length must be non-negative")
        if n > self.remaining:
            raise BufferUnderrunError(n, self.remaining, self._offset)
        start = self._offset
        self._offset += n
        return self._buf[start:self._offset]

    def read_bytes(self, n: int) -> bytes:
        return bytes(self._take(n))

    def skip(self, n: int) -> None:
        self._take(n)

    def read_uint8(self) -> int:
        return _U8.unpack(self._take(_U8.size))[0]

    def read_bool(self) -> bool:
        return self.read_uint8() != 0

    def read_uint16_le(self) -> int:
        return _U16_LE.unpack(self._take(_U16_LE.size))[0]

    def read_int32_le(self) -> int:
        return _I32_LE.unpack(self._take(_I32_LE.size))[0]

    def read_int64_be(self) -> int:
        return _I64_BE.unpack(self._take(_I64_BE.size))[0]

    def read_string(self) -> str:
        start = self._offset
        length = self.read_uint16_le()
        if length > self.remaining:
            # rewind past the prefix so the failed read leaves no trace
            self._offset = start
            raise BufferUnderrunError(_U16_LE.size + length, self.remaining + _U16_LE.size, start)
        raw = self._take(length)
        try:
            return str(raw, "utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolError(f"invalid utf-8 in string at offset {start}: {e.reason}") from e

    def read_uuid(self) -> str:
        if self.remaining < 2 * _I64_BE.size:
            raise BufferUnderrunError(2 * _I64_BE.size, self.remaining, self._offset)
        msb = self.read_int64_be()
        lsb = self.read_int64_be()
        return format_uuid(msb, lsb)


class BufferWriter:
    """Append-only counterpart of BufferReader, used to build replies."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def write_bytes(self, data: bytes) -> BufferWriter:
        self._buf += data
        return self

    def write_uint8(self, value: int) -> BufferWriter:
        self._buf += _U8.pack(value)
        return self

    def write_bool(self, value: bool) -> BufferWriter:
        return self.write_uint8(1 if value else 0)

    def write_uint16_le(self, value: int) -> BufferWriter:
        self._buf += _U16_LE.pack(value)
        return self

    def write_int32_le(self, value: int) -> BufferWriter:
        self._buf += _I32_LE.pack(value)
        return self

    def write_int64_be(self, value: int) -> BufferWriter:
        self._buf += _I64_BE.pack(value)
        return self

    def write_string(self, value: str) -> BufferWriter:
        raw = value.encode("utf-8")
        if len(raw) > MAX_STRING_LEN:
            raise ValueError("string too large")
        self.write_uint16_le(len(raw))
        self._buf += raw
        return self

    def write_uuid(self, value: str) -> BufferWriter:
        msb, lsb = uuid_to_bits(value)
        return self.write_int64_be(msb).write_int64_be(lsb)

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)
