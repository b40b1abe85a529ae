"""
Adapter around the Py3AMF AMF3 codec.

AMF3 shared-object bodies hold records of the form
    AMF3 string (key, no type marker) || AMF3 value || u8 padding

One decoder (and one encoder) spans the whole body so the string, object and
trait reference tables are shared across records. Nothing outside this module
imports pyamf.
"""

from __future__ import annotations

from typing import Any, List

import pyamf
from pyamf import amf3, util

from .cursor import BytesLike
from .errors import Amf3CodecError, LengthMismatchError, NestingTooDeepError, UnexpectedEofError
from .model import Pair


class Amf3BodyDecoder:
    def __init__(self, data: BytesLike, start: int = 0):
        self.stream = util.BufferedByteStream(bytes(data))
        self.stream.seek(start)
        self.decoder = amf3.Decoder(stream=self.stream)

    @property
    def position(self) -> int:
        return self.stream.tell()

    def decode_key(self) -> str:
        return self._guard(self.decoder.readString)

    def decode(self) -> Any:
        return self._guard(self.decoder.readElement)

    def read_padding(self) -> int:
        return self._guard(self.stream.read_uchar)

    def _guard(self, func):
        offset = self.position
        try:
            return func()
        except pyamf.EOStream as exc:
            raise UnexpectedEofError(f"Unexpected EOF in AMF3 body at offset {offset}") from exc
        except RecursionError as exc:
            raise NestingTooDeepError(f"AMF3 value at offset {offset} is nested too deeply") from exc
        except pyamf.BaseError as exc:
            raise Amf3CodecError(f"AMF3 decode failed at offset {offset}: {exc}") from exc
        except OSError as exc:
            raise UnexpectedEofError(f"Unexpected EOF in AMF3 body at offset {offset}: {exc}") from exc


class Amf3BodyEncoder:
    def __init__(self):
        self.stream = util.BufferedByteStream()
        self.encoder = amf3.Encoder(stream=self.stream)

    @property
    def bytes_written(self) -> int:
        return len(self.stream.getvalue())

    def encode_key(self, key: str) -> None:
        self._guard(self.encoder.serialiseString, key)

    def encode(self, value: Any) -> None:
        self._guard(self.encoder.writeElement, value)

    def write_padding(self, padding: int) -> None:
        self.stream.write_uchar(padding)

    def getvalue(self) -> bytes:
        return bytes(self.stream.getvalue())

    def _guard(self, func, value):
        try:
            func(value)
        except RecursionError as exc:
            raise NestingTooDeepError(f"AMF3 {type(value).__name__} is nested too deeply to encode") from exc
        except pyamf.BaseError as exc:
            raise Amf3CodecError(f"AMF3 encode failed for {type(value).__name__}: {exc}") from exc


def decode_pairs(data: BytesLike, start: int, end: int) -> List[Pair]:
    """Decode AMF3 records from ``data[start:end]``; must end exactly at ``end``."""
    dec = Amf3BodyDecoder(data, start)
    pairs: List[Pair] = []
    while dec.position != end:
        if dec.position > end:
            raise LengthMismatchError(f"AMF3 record overran body end {end} (cursor at {dec.position})")
        key = dec.decode_key()
        value = dec.decode()
        padding = dec.read_padding()
        pairs.append(Pair(key, value, padding))
    return pairs


def encode_pairs(pairs: List[Pair]) -> bytes:
    enc = Amf3BodyEncoder()
    for pair in pairs:
        enc.encode_key(pair.key)
        enc.encode(pair.value)
        enc.write_padding(pair.padding)
    return enc.getvalue()
