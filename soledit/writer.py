from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from . import amf0
from .constants import AMF0, BACKUP_SUFFIX, DEFAULT_SUFFIX, LENGTH_ORIGIN, LengthScope
from .cursor import ByteWriter
from .header import write_header
from .model import Document


logger = logging.getLogger(__name__)


def write_document(doc: Document, *, length_scope: Optional[LengthScope] = None) -> bytes:
    """Serialize ``doc``; the header length is patched after the body is written.

    ``doc.declared_length`` is ignored on input and updated to the body size.
    """
    scope = length_scope or doc.length_scope
    w = ByteWriter()
    length_offset = write_header(w, doc.root_name, doc.amf_version)
    body_start = w.position
    if doc.amf_version == AMF0:
        body_len = amf0.encode_pairs(doc.root_object, w)
    else:
        from . import amf3

        body_len = w.write(amf3.encode_pairs(doc.root_object))
    if body_len != w.position - body_start:
        raise RuntimeError(f"Body encoder reported {body_len} bytes, wrote {w.position - body_start}")
    length_value = body_len if scope is LengthScope.BODY else w.position - LENGTH_ORIGIN
    w.patch_u32(length_offset, length_value)
    doc.declared_length = body_len
    logger.debug("wrote %d pairs, body %d bytes, length field %d (%s)", len(doc), body_len, length_value, scope.value)
    return w.getvalue()


def dump(
    doc: Document,
    path: Union[str, Path],
    *,
    backup: bool = False,
    length_scope: Optional[LengthScope] = None,
) -> Optional[Path]:
    """Write ``doc`` to ``path`` atomically.

    The document is serialized in full before anything touches the disk, then
    written to a temporary file beside ``path`` and renamed into place. With
    ``backup`` the previous file is kept as ``<name>.bak``; its path is
    returned.
    """
    data = write_document(doc, length_scope=length_scope)
    dest = Path(path)
    dest_dir = dest.parent if str(dest.parent) else Path(".")
    fd, temp_name = tempfile.mkstemp(prefix="soledit-", suffix=dest.suffix or DEFAULT_SUFFIX, dir=str(dest_dir))
    temp_path = Path(temp_name)
    backup_path: Optional[Path] = None
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        if dest.exists():
            os.chmod(str(temp_path), stat.S_IMODE(dest.stat().st_mode))
        if backup and dest.exists():
            backup_path = dest.with_name(dest.name + BACKUP_SUFFIX)
            os.replace(str(dest), str(backup_path))
        os.replace(str(temp_path), str(dest))
    except OSError:
        if backup_path is not None and backup_path.exists() and not dest.exists():
            os.replace(str(backup_path), str(dest))
        if temp_path.exists():
            temp_path.unlink(missing_ok=True)
        raise
    return backup_path
