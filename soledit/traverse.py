"""
Generic tree traversal over shared-object pair lists.

A single dispatch (``classify``) sorts every value into one of four shapes:

- scalar: AMF0 Number/Boolean/String, or AMF3 bool/int/float/str/None
- pairs: AMF0 Object or an AMF3 dict-like object (anonymous, typed, mixed array)
- sequence: AMF3 dense arrays
- unsupported: everything else (dates, byte arrays, XML, class instances...)

``render`` and ``edit`` both walk the tree through that dispatch. Key filters
are applied to top-level pairs before they are visited; rejected pairs are
neither shown nor edited, and ``edit`` passes them through untouched.
Unsupported values render as a placeholder and are never handed to a visitor.
"""

from __future__ import annotations

import copy
import json
import math
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .constants import MAX_NESTING_DEPTH
from .errors import NestingTooDeepError
from .model import Boolean, Number, Object, Pair, String


KeyPath = Tuple[Any, ...]
KeyPredicate = Callable[[str], bool]


class Kind(Enum):
    SCALAR = "scalar"
    PAIRS = "pairs"
    SEQUENCE = "sequence"
    UNSUPPORTED = "unsupported"


_AMF0_SCALARS = (Number, Boolean, String)
_NATIVE_SCALARS = (bool, int, float, str, type(None))


def classify(value: Any) -> Kind:
    if isinstance(value, _AMF0_SCALARS) or isinstance(value, _NATIVE_SCALARS):
        return Kind.SCALAR
    if isinstance(value, (Object, dict)):
        return Kind.PAIRS
    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE
    return Kind.UNSUPPORTED


def entries(value: Any) -> List[Tuple[Any, Any]]:
    """Return ``(key, child)`` for a pairs or sequence value."""
    if isinstance(value, Object):
        return [(p.key, p.value) for p in value.pairs]
    if isinstance(value, dict):
        return list(value.items())
    if isinstance(value, (list, tuple)):
        return list(enumerate(value))
    raise TypeError(f"{type(value).__name__} has no children")


def _check_depth(depth: int) -> None:
    if depth > MAX_NESTING_DEPTH:
        raise NestingTooDeepError(f"Container nesting depth {depth} exceeds the limit of {MAX_NESTING_DEPTH}")


def rebuild(value: Any, children: Sequence[Any]) -> Any:
    """Return a copy of container ``value`` holding ``children`` in order."""
    if isinstance(value, Object):
        return Object([Pair(p.key, c, p.padding) for p, c in zip(value.pairs, children)])
    if isinstance(value, dict):
        out = copy.copy(value)
        out.clear()
        for key, child in zip(value.keys(), children):
            out[key] = child
        return out
    if isinstance(value, tuple):
        return type(value)(children)
    if isinstance(value, list):
        out = copy.copy(value)
        out[:] = list(children)
        return out
    raise TypeError(f"{type(value).__name__} is not a container")


class KeyFilter:
    """Substring match on pair keys; an empty pattern accepts everything."""

    def __init__(self, pattern: str = "", case_sensitive: bool = False):
        self.pattern = pattern
        self.case_sensitive = case_sensitive

    def __call__(self, key: str) -> bool:
        if not self.pattern:
            return True
        if self.case_sensitive:
            return self.pattern in key
        return self.pattern.lower() in key.lower()


def accept_all(key: str) -> bool:
    return True


def format_number(n: float) -> str:
    if math.isfinite(n) and n.is_integer() and abs(n) < 1e16:
        return str(int(n))
    return repr(n)


class TreeVisitor:
    """Rendering and editing hooks used by ``render`` and ``edit``.

    Subclasses override ``edit`` to mutate scalars; the return value replaces
    the visited value. ``format_scalar`` controls how leaves are printed.
    """

    indent = "  "

    def format_scalar(self, value: Any) -> str:
        if isinstance(value, _AMF0_SCALARS):
            value = value.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return "null"
        if isinstance(value, float):
            return format_number(value)
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        return str(value)

    def format_unsupported(self, value: Any) -> str:
        return f"<unsupported: {type(value).__name__}>"

    def edit(self, path: KeyPath, value: Any) -> Any:
        return value


def _label(value: Any) -> str:
    alias = getattr(value, "alias", None)
    return f"{alias} " if isinstance(alias, str) and alias else ""


def _render_value(value: Any, visitor: TreeVisitor, depth: int, lines: List[str], prefix: str) -> None:
    pad = visitor.indent * depth
    kind = classify(value)
    if kind is Kind.SCALAR:
        lines.append(f"{pad}{prefix}{visitor.format_scalar(value)}")
    elif kind is Kind.UNSUPPORTED:
        lines.append(f"{pad}{prefix}{visitor.format_unsupported(value)}")
    elif kind is Kind.PAIRS:
        _check_depth(depth)
        lines.append(f"{pad}{prefix}{_label(value)}{{")
        for key, child in entries(value):
            _render_value(child, visitor, depth + 1, lines, f"{key} = ")
        lines.append(f"{pad}}}")
    else:
        _check_depth(depth)
        lines.append(f"{pad}{prefix}[")
        for _, child in entries(value):
            _render_value(child, visitor, depth + 1, lines, "")
        lines.append(f"{pad}]")


def render(
    pairs: List[Pair],
    key_filter: Optional[KeyPredicate] = None,
    visitor: Optional[TreeVisitor] = None,
    root_name: Optional[str] = None,
) -> str:
    """Pretty-print ``pairs`` with one indent step per nesting level."""
    key_filter = key_filter or accept_all
    visitor = visitor or TreeVisitor()
    lines: List[str] = [f"{root_name} {{" if root_name is not None else "{"]
    for pair in pairs:
        if key_filter(pair.key):
            _render_value(pair.value, visitor, 1, lines, f"{pair.key} = ")
    lines.append("}")
    return "\n".join(lines) + "\n"


def _edit_value(path: KeyPath, value: Any, visitor: TreeVisitor) -> Any:
    kind = classify(value)
    if kind is Kind.SCALAR:
        return visitor.edit(path, value)
    if kind is Kind.UNSUPPORTED:
        return value
    _check_depth(len(path))
    children = [_edit_value(path + (key,), child, visitor) for key, child in entries(value)]
    return rebuild(value, children)


def edit(
    pairs: List[Pair],
    visitor: TreeVisitor,
    key_filter: Optional[KeyPredicate] = None,
) -> List[Pair]:
    """Return a new pair list with every accepted scalar passed through ``visitor.edit``.

    Key order and cardinality are preserved; filtered-out pairs are returned
    as-is.
    """
    key_filter = key_filter or accept_all
    out: List[Pair] = []
    for pair in pairs:
        if not key_filter(pair.key):
            out.append(pair)
            continue
        out.append(Pair(pair.key, _edit_value((pair.key,), pair.value, visitor), pair.padding))
    return out


# -------- Key-path editing --------

_TRUE_WORDS = ("true", "1", "yes", "on")
_FALSE_WORDS = ("false", "0", "no", "off")


def parse_bool(text: str) -> bool:
    t = text.strip().lower()
    if t in _TRUE_WORDS:
        return True
    if t in _FALSE_WORDS:
        return False
    raise ValueError(f"Not a boolean: {text!r}")


def parse_scalar(current: Any, text: str) -> Any:
    """Parse ``text`` into a value of the same type as ``current``."""
    if isinstance(current, Number):
        return Number(float(text))
    if isinstance(current, Boolean):
        return Boolean(parse_bool(text))
    if isinstance(current, String):
        return String(text)
    # bool before int: it is an int subclass
    if isinstance(current, bool):
        return parse_bool(text)
    if isinstance(current, int):
        return int(text)
    if isinstance(current, float):
        return float(text)
    if isinstance(current, str):
        return text
    raise ValueError(f"Cannot edit a {type(current).__name__} value")


def split_path(path: str) -> KeyPath:
    """Split ``"a.b.0"`` into keys; sequence items are addressed by index."""
    if not path:
        raise KeyError("Empty key path")
    return tuple(path.split("."))


class PathEditor(TreeVisitor):
    def __init__(self, target: KeyPath, text: str):
        self.target = target
        self.text = text
        self.hits = 0

    def edit(self, path: KeyPath, value: Any) -> Any:
        if tuple(str(k) for k in path) != self.target:
            return value
        self.hits += 1
        return parse_scalar(value, self.text)


def set_path(pairs: List[Pair], path: str, text: str) -> List[Pair]:
    """Set the scalar at dotted ``path`` from ``text``; duplicates all change."""
    target = split_path(path)
    editor = PathEditor(target, text)
    out = edit(pairs, editor, key_filter=lambda key: key == target[0])
    if not editor.hits:
        raise KeyError(f"No scalar value at {path!r}")
    return out
