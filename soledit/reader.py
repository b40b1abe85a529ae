from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from . import amf0
from .constants import AMF0, LENGTH_ORIGIN, LengthScope
from .cursor import ByteReader, BytesLike
from .errors import LengthMismatchError
from .header import read_header
from .model import Document


logger = logging.getLogger(__name__)


def _resolve_body_end(length_field: int, body_offset: int, total: int):
    # Flash Player writes the size of everything after the length field;
    # a body-only count can never equal that because the header is non-empty.
    if length_field == total - LENGTH_ORIGIN:
        return total, LengthScope.FILE
    end = body_offset + length_field
    if end > total:
        raise LengthMismatchError(
            f"Declared body length {length_field} exceeds available {total - body_offset} bytes"
        )
    if end < total:
        raise LengthMismatchError(
            f"Declared body length {length_field} leaves {total - end} trailing bytes"
        )
    return end, LengthScope.BODY


def read_document(data: BytesLike) -> Document:
    """Decode a complete shared-object file held in memory."""
    reader = ByteReader(data)
    hdr = read_header(reader)
    end, scope = _resolve_body_end(hdr.length_field, hdr.body_offset, len(reader.data))
    if hdr.amf_version == AMF0:
        pairs = amf0.decode_pairs(reader, end)
    else:
        from . import amf3

        pairs = amf3.decode_pairs(reader.data, hdr.body_offset, end)
    logger.debug("decoded %d pairs (%s length scope)", len(pairs), scope.value)
    return Document(
        root_name=hdr.root_name,
        root_object=pairs,
        amf_version=hdr.amf_version,
        declared_length=end - hdr.body_offset,
        length_scope=scope,
    )


def load(path: Union[str, Path]) -> Document:
    with open(path, "rb") as fh:
        return read_document(fh.read())
