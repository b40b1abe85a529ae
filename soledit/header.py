from __future__ import annotations

import logging
from dataclasses import dataclass

from .constants import (
    SOL_MAGIC,
    SOL_TAIL,
    SOL_TYPE_MARKER,
    SUPPORTED_AMF_VERSIONS,
    VERSION_BLOCK_SIZE,
)
from .cursor import ByteReader, ByteWriter
from .errors import MalformedHeaderError, UnknownVersionError, UnsupportedFormatError


logger = logging.getLogger(__name__)


@dataclass
class SolHeader:
    length_field: int   # raw header value, scope not yet resolved
    root_name: str
    amf_version: int
    body_offset: int    # absolute offset of the first value-list byte


def read_header(reader: ByteReader) -> SolHeader:
    reader.seek(0)
    magic = reader.read(len(SOL_MAGIC))
    if magic != SOL_MAGIC:
        raise UnsupportedFormatError(f"Unsupported format: magic {magic.hex(' ').upper()}")
    length_field = reader.read_u32()
    type_marker = reader.read(len(SOL_TYPE_MARKER))
    if type_marker != SOL_TYPE_MARKER:
        raise MalformedHeaderError(f"Bad type marker {type_marker!r}")
    tail = reader.read(len(SOL_TAIL))
    if tail != SOL_TAIL:
        raise MalformedHeaderError(f"Bad header tail {tail.hex(' ').upper()}")
    root_name = reader.read_utf8_prefixed()
    version_block = reader.read(VERSION_BLOCK_SIZE)
    amf_version = version_block[-1]
    if amf_version not in SUPPORTED_AMF_VERSIONS:
        raise UnknownVersionError(f"Unknown AMF version {amf_version}")
    hdr = SolHeader(
        length_field=length_field,
        root_name=root_name,
        amf_version=amf_version,
        body_offset=reader.position,
    )
    logger.debug("header: root=%r amf=%d length_field=%d body_offset=%d", root_name, amf_version, length_field, hdr.body_offset)
    return hdr


def write_header(writer: ByteWriter, root_name: str, amf_version: int) -> int:
    """Emit the header with a zero length placeholder; returns its offset."""
    if amf_version not in SUPPORTED_AMF_VERSIONS:
        raise UnknownVersionError(f"Unknown AMF version {amf_version}")
    writer.write(SOL_MAGIC)
    length_offset = writer.reserve_u32()
    writer.write(SOL_TYPE_MARKER)
    writer.write(SOL_TAIL)
    writer.write_utf8_prefixed(root_name)
    writer.write(b"\x00" * (VERSION_BLOCK_SIZE - 1) + bytes([amf_version]))
    return length_offset
