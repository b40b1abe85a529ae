"""
AMF0 key/value codec for shared-object bodies.

Top-level record
- u16 key length || key (UTF-8) || u8 type tag || payload || u8 padding

Payloads
- 0x00 Number: f64 big-endian
- 0x01 Boolean: u8, non-zero is true
- 0x02 String: u16 length || UTF-8 bytes
- 0x03 Object: member records (key, tag, payload; no padding) closed by an
  empty key followed by tag 0x09, at most MAX_NESTING_DEPTH levels deep

Anything else is rejected with UnexpectedTypeError.
"""

from __future__ import annotations

from typing import List

from .constants import (
    AMF0_BOOLEAN,
    AMF0_NUMBER,
    AMF0_OBJECT,
    AMF0_OBJECT_END,
    AMF0_STRING,
    MAX_NESTING_DEPTH,
)
from .cursor import ByteReader, ByteWriter
from .errors import LengthMismatchError, MalformedObjectError, NestingTooDeepError, UnexpectedTypeError
from .model import Amf0Value, Boolean, Number, Object, Pair, String


def _check_depth(depth: int) -> None:
    if depth > MAX_NESTING_DEPTH:
        raise NestingTooDeepError(f"Object nesting depth {depth} exceeds the limit of {MAX_NESTING_DEPTH}")


def decode_value(reader: ByteReader, tag: int, depth: int = 0) -> Amf0Value:
    if tag == AMF0_NUMBER:
        return Number(reader.read_f64())
    if tag == AMF0_BOOLEAN:
        return Boolean(reader.read_u8() != 0)
    if tag == AMF0_STRING:
        return String(reader.read_utf8_prefixed())
    if tag == AMF0_OBJECT:
        return Object(decode_members(reader, depth + 1))
    raise UnexpectedTypeError(tag, reader.position - 1)


def decode_members(reader: ByteReader, depth: int = 1) -> List[Pair]:
    """Read object members up to and including the end-of-object sentinel.

    The sentinel record must carry an empty key; anything else could not be
    written back unchanged and is rejected.
    """
    _check_depth(depth)
    members: List[Pair] = []
    while True:
        offset = reader.position
        key = reader.read_utf8_prefixed()
        tag = reader.read_u8()
        if tag == AMF0_OBJECT_END:
            if key:
                raise MalformedObjectError(f"Object end marker at offset {offset} has non-empty key {key!r}")
            return members
        members.append(Pair(key, decode_value(reader, tag, depth)))


def decode_pairs(reader: ByteReader, end: int) -> List[Pair]:
    """Decode top-level records until the cursor reaches ``end`` exactly."""
    pairs: List[Pair] = []
    while reader.position != end:
        if reader.position > end:
            raise LengthMismatchError(f"Record overran body end {end} (cursor at {reader.position})")
        key = reader.read_utf8_prefixed()
        tag = reader.read_u8()
        value = decode_value(reader, tag)
        padding = reader.read_u8()
        pairs.append(Pair(key, value, padding))
    return pairs


def encode_value(value: Amf0Value, writer: ByteWriter, depth: int = 0) -> int:
    if isinstance(value, Number):
        return writer.write_u8(AMF0_NUMBER) + writer.write_f64(value.value)
    if isinstance(value, Boolean):
        return writer.write_u8(AMF0_BOOLEAN) + writer.write_u8(1 if value.value else 0)
    if isinstance(value, String):
        return writer.write_u8(AMF0_STRING) + writer.write_utf8_prefixed(value.value)
    if isinstance(value, Object):
        _check_depth(depth + 1)
        n = writer.write_u8(AMF0_OBJECT)
        for member in value.pairs:
            n += writer.write_utf8_prefixed(member.key)
            n += encode_value(member.value, writer, depth + 1)
        n += writer.write_utf8_prefixed("")
        n += writer.write_u8(AMF0_OBJECT_END)
        return n
    raise TypeError(f"Cannot encode {type(value).__name__} as AMF0")


def encode_pairs(pairs: List[Pair], writer: ByteWriter) -> int:
    """Encode top-level records; returns the number of bytes written."""
    n = 0
    for pair in pairs:
        n += writer.write_utf8_prefixed(pair.key)
        n += encode_value(pair.value, writer)
        n += writer.write_u8(pair.padding)
    return n
