from __future__ import annotations

import argparse
import json as _json
import logging
import sys
from typing import List, Optional

from soledit.constants import AMF0
from soledit.errors import SolError
from soledit.model import document_to_python
from soledit.reader import load
from soledit.traverse import KeyFilter, render, set_path
from soledit.writer import dump


def cmd_dump(path: str, *, key_filter: str = "", as_json: bool = False) -> bool:
    """Print the document tree.

    Args:
        path: Path to a .sol file.
        key_filter: Show only top-level pairs whose key contains this text.
        as_json: Emit JSON instead of the indented tree.
    """
    doc = load(path)
    accept = KeyFilter(key_filter)
    if as_json:
        data = document_to_python(doc)
        shown = {k: v for k, v in data.items() if accept(k)}
        print(_json.dumps({"root_name": doc.root_name, "data": shown}, indent=2, ensure_ascii=False, default=str))
    else:
        sys.stdout.write(render(doc.root_object, key_filter=accept, root_name=doc.root_name))
    return True


def cmd_info(path: str) -> bool:
    """Print header fields for a .sol file."""
    doc = load(path)
    print(f"Root name:       {doc.root_name}")
    print(f"AMF version:     {'AMF0' if doc.amf_version == AMF0 else 'AMF3'}")
    print(f"Body length:     {doc.declared_length}")
    print(f"Length scope:    {doc.length_scope.value}")
    print(f"Pairs:           {len(doc)}")
    return True


def cmd_set(path: str, key_path: str, value: str, *, output: Optional[str] = None, backup: bool = False) -> bool:
    """Set one scalar field and write the document back.

    Args:
        path: Source .sol file.
        key_path: Dotted key path, e.g. ``settings.volume``.
        value: New value, parsed according to the field's current type.
        output: Write to this path instead of replacing ``path``.
        backup: Keep the replaced file as ``<name>.bak``.
    """
    doc = load(path)
    doc.root_object = set_path(doc.root_object, key_path, value)
    backup_path = dump(doc, output or path, backup=backup)
    if backup_path is not None:
        print(f"Backup written to {backup_path}", file=sys.stderr)
    return True


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _add_dump_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("file", help=".sol file path")
    ap.add_argument("--filter", default="", help="Only show top-level keys containing this text (case-insensitive)")
    ap.add_argument("--json", action="store_true", help="Emit JSON instead of the indented tree")


def _run(func, *args, **kwargs) -> None:
    try:
        func(*args, **kwargs)
    except KeyError as e:
        print(f"Error: {e.args[0] if e.args else e}", file=sys.stderr)
        sys.exit(2)
    except (SolError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="soledit",
        description="Inspect and edit Flash shared-object (.sol) files",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_dump = sub.add_parser("dump", help="Print the stored values as a tree")
    _add_dump_args(ap_dump)

    ap_info = sub.add_parser("info", help="Show header fields")
    ap_info.add_argument("file", help=".sol file path")

    ap_set = sub.add_parser("set", help="Change one stored value")
    ap_set.add_argument("file", help=".sol file path")
    ap_set.add_argument("path", help="Dotted key path, e.g. settings.volume")
    ap_set.add_argument("value", help="New value; parsed by the field's current type")
    ap_set.add_argument("--output", "-o", help="Write the edited document here instead of in place")
    ap_set.add_argument("--backup", action="store_true", help="Keep the previous file as <name>.bak")

    args = ap.parse_args(argv)
    _setup_logging(args.verbose)
    if args.cmd == "dump":
        _run(cmd_dump, args.file, key_filter=args.filter, as_json=args.json)
    elif args.cmd == "info":
        _run(cmd_info, args.file)
    elif args.cmd == "set":
        _run(cmd_set, args.file, args.path, args.value, output=args.output, backup=args.backup)
    else:
        raise RuntimeError("Unknown command")


def soldump_main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(prog="soldump", description="Print a .sol file as a tree")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    _add_dump_args(ap)
    args = ap.parse_args(argv)
    _setup_logging(args.verbose)
    _run(cmd_dump, args.file, key_filter=args.filter, as_json=args.json)


if __name__ == "__main__":
    main()
