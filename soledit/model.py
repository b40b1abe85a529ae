from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Union

from .constants import AMF0, DEFAULT_PADDING, LengthScope


@dataclass
class Number:
    value: float


@dataclass
class Boolean:
    value: bool


@dataclass
class String:
    value: str


@dataclass
class Object:
    pairs: List[Pair] = field(default_factory=list)


Amf0Value = Union[Number, Boolean, String, Object]


@dataclass
class Pair:
    key: str
    value: Any  # Amf0Value for AMF0 documents, native pyamf values for AMF3
    padding: int = DEFAULT_PADDING  # trailing record byte, re-emitted verbatim


@dataclass
class Document:
    """Decoded form of one shared-object file.

    ``declared_length`` always holds the value-list body size; on write it is
    recomputed and updated. ``length_scope`` records how the header length
    field was (or will be) counted.
    """

    root_name: str
    root_object: List[Pair] = field(default_factory=list)
    amf_version: int = AMF0
    declared_length: int = 0
    length_scope: LengthScope = LengthScope.BODY

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.root_object)

    def __len__(self):
        return len(self.root_object)

    def keys(self) -> List[str]:
        return [p.key for p in self.root_object]

    def find(self, key: str) -> Optional[Pair]:
        for p in self.root_object:
            if p.key == key:
                return p
        return None

    def get(self, key: str, default: Any = None) -> Any:
        p = self.find(key)
        return p.value if p is not None else default

    def set(self, key: str, value: Any) -> None:
        """Replace the first pair named ``key`` or append a new one."""
        p = self.find(key)
        if p is None:
            self.root_object.append(Pair(key, value))
        else:
            p.value = value

    def remove(self, key: str) -> bool:
        for i, p in enumerate(self.root_object):
            if p.key == key:
                del self.root_object[i]
                return True
        return False


def to_python(value: Amf0Value) -> Any:
    """Convert an AMF0 value to plain Python (dict for objects).

    Duplicate keys inside an object collapse to the last occurrence.
    """
    if isinstance(value, Object):
        return {p.key: to_python(p.value) for p in value.pairs}
    if isinstance(value, (Number, Boolean, String)):
        return value.value
    raise TypeError(f"Not an AMF0 value: {type(value).__name__}")


def from_python(obj: Any) -> Amf0Value:
    """Build an AMF0 value from plain Python data."""
    # bool first: it is an int subclass
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, (int, float)):
        return Number(float(obj))
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, dict):
        return Object([Pair(str(k), from_python(v)) for k, v in obj.items()])
    if isinstance(obj, (Number, Boolean, String, Object)):
        return obj
    raise TypeError(f"Cannot represent {type(obj).__name__} as an AMF0 value")


def document_to_python(doc: Document) -> dict:
    return {p.key: to_python(p.value) if doc.amf_version == AMF0 else p.value for p in doc.root_object}
