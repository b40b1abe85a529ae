from __future__ import annotations

import struct
from typing import Union

from .constants import MAX_STRING_BYTES, MAX_U16, MAX_U32
from .errors import StringTooLongError, UnexpectedEofError, Utf8DecodeError


_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_F64 = struct.Struct(">d")

BytesLike = Union[bytes, bytearray, memoryview]


class ByteReader:
    """Big-endian reads over an in-memory buffer with an explicit cursor."""

    def __init__(self, data: BytesLike, position: int = 0):
        self.data = memoryview(data)
        self.position = position

    def __len__(self):
        return max(0, len(self.data) - self.position)

    def __bool__(self):
        return len(self) > 0

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self.data):
            raise UnexpectedEofError(f"Seek to {position} outside buffer of {len(self.data)} bytes")
        self.position = position

    def read(self, size: int) -> bytes:
        end = self.position + size
        if end > len(self.data):
            raise UnexpectedEofError(
                f"Unexpected EOF: need {size} bytes at offset {self.position}, {len(self)} available"
            )
        view = self.data[self.position:end]
        self.position = end
        return bytes(view)

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_u16(self) -> int:
        return _U16.unpack(self.read(_U16.size))[0]

    def read_u32(self) -> int:
        return _U32.unpack(self.read(_U32.size))[0]

    def read_f64(self) -> float:
        return _F64.unpack(self.read(_F64.size))[0]

    def read_utf8(self, size: int) -> str:
        offset = self.position
        raw = self.read(size)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Utf8DecodeError(f"Invalid UTF-8 in {size}-byte string at offset {offset}: {exc.reason}") from exc

    def read_utf8_prefixed(self) -> str:
        return self.read_utf8(self.read_u16())


class ByteWriter:
    """Big-endian writes into an owned bytearray.

    Fixed-width fields can be reserved up front and patched once their value
    is known; patching never moves the write position.
    """

    def __init__(self):
        self.buf = bytearray()

    def __len__(self):
        return len(self.buf)

    @property
    def position(self) -> int:
        return len(self.buf)

    def write(self, data: BytesLike) -> int:
        self.buf += data
        return len(data)

    def write_u8(self, value: int) -> int:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"u8 out of range: {value}")
        self.buf.append(value)
        return 1

    def write_u16(self, value: int) -> int:
        if not 0 <= value <= MAX_U16:
            raise ValueError(f"u16 out of range: {value}")
        return self.write(_U16.pack(value))

    def write_u32(self, value: int) -> int:
        if not 0 <= value <= MAX_U32:
            raise ValueError(f"u32 out of range: {value}")
        return self.write(_U32.pack(value))

    def write_f64(self, value: float) -> int:
        return self.write(_F64.pack(value))

    def write_utf8_prefixed(self, value: str) -> int:
        raw = value.encode("utf-8")
        if len(raw) > MAX_STRING_BYTES:
            raise StringTooLongError(len(raw), MAX_STRING_BYTES)
        return self.write_u16(len(raw)) + self.write(raw)

    def reserve_u32(self) -> int:
        offset = self.position
        self.write(b"\x00" * _U32.size)
        return offset

    def patch_u32(self, offset: int, value: int) -> None:
        if offset < 0 or offset + _U32.size > len(self.buf):
            raise ValueError(f"Patch offset {offset} outside written range")
        if not 0 <= value <= MAX_U32:
            raise ValueError(f"u32 out of range: {value}")
        _U32.pack_into(self.buf, offset, value)

    def getvalue(self) -> bytes:
        return bytes(self.buf)
