class SolError(Exception):
    """Base class for soledit-specific errors."""


# Header/framing
class UnsupportedFormatError(SolError):
    pass


class MalformedHeaderError(SolError):
    pass


class UnknownVersionError(SolError):
    pass


class LengthMismatchError(SolError):
    pass


# Value decoding
class Utf8DecodeError(SolError):
    pass


class UnexpectedTypeError(SolError):
    def __init__(self, tag: int, offset: int):
        super().__init__(f"Unexpected type tag 0x{tag:02X} at offset {offset}")
        self.tag = tag
        self.offset = offset


class UnexpectedEofError(SolError, EOFError):
    pass


class MalformedObjectError(SolError):
    pass


class NestingTooDeepError(SolError):
    pass


# Encoding
class StringTooLongError(SolError, ValueError):
    def __init__(self, length: int, limit: int):
        super().__init__(f"String of {length} bytes exceeds the {limit}-byte limit")
        self.length = length
        self.limit = limit


# AMF3 collaborator
class Amf3CodecError(SolError):
    pass
