from enum import Enum


# Container header
SOL_MAGIC = b"\x00\xbf"                        # 2 bytes
SOL_TYPE_MARKER = b"TCSO"                      # 4 bytes
SOL_TAIL = b"\x00\x04\x00\x00\x00\x00"         # 6 bytes

# The Flash Player length convention counts everything after the length field
LENGTH_ORIGIN = 6

# Version block: 4 bytes, only the last one is significant
VERSION_BLOCK_SIZE = 4
AMF0 = 0
AMF3 = 3
SUPPORTED_AMF_VERSIONS = (AMF0, AMF3)


class LengthScope(Enum):
    """Which region the header length field counts."""

    BODY = "body"    # value-list bytes only
    FILE = "file"    # everything after the length field (Flash Player files)


# AMF0 type tags handled in-core
AMF0_NUMBER = 0x00
AMF0_BOOLEAN = 0x01
AMF0_STRING = 0x02
AMF0_OBJECT = 0x03
AMF0_OBJECT_END = 0x09

# Limits
MAX_U16 = 0xFFFF
MAX_U32 = 0xFFFFFFFF
MAX_STRING_BYTES = MAX_U16
MAX_NESTING_DEPTH = 256   # nested objects/arrays below one top-level record

DEFAULT_PADDING = 0
DEFAULT_SUFFIX = ".sol"
BACKUP_SUFFIX = ".bak"
