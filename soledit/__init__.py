"""
soledit: read, inspect and edit Flash shared-object (.sol) files.

Features:

- Container framing: magic/type/tail validation, root-name record, AMF version
  selection, and a body length field patched after the body is written.
- In-core AMF0 codec (Number, Boolean, String, nested Object) with byte-exact
  write-back, including per-record padding bytes.
- AMF3 bodies through the Py3AMF codec, behind a narrow adapter.
- Generic tree traversal for pretty-printing, key filtering and editing, shared
  by both value encodings.
- CLI (``soledit dump|info|set``, ``soldump``) with atomic, optionally backed-up
  writes.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "model",
    "reader",
    "writer",
    "traverse",
]

# Programmatic API: soledit.reader.read_document/load, soledit.writer.write_document/dump,
# and soledit.traverse.render/edit/set_path.
