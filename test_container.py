from __future__ import annotations

import os
import struct
import tempfile
import unittest
from pathlib import Path

from soledit.constants import AMF0, LengthScope
from soledit.errors import (
    LengthMismatchError,
    MalformedHeaderError,
    UnexpectedEofError,
    UnknownVersionError,
    UnsupportedFormatError,
    Utf8DecodeError,
)
from soledit.model import Boolean, Document, Number, Object, Pair, String
from soledit.reader import load, read_document
from soledit.writer import dump, write_document


MINIMAL_BODY = b"\x00\x01n\x00" + struct.pack(">d", 3.5) + b"\x00"


def _sol(root: bytes, body: bytes, *, version: int = 0, length: int | None = None,
         magic: bytes = b"\x00\xbf", marker: bytes = b"TCSO",
         tail: bytes = b"\x00\x04\x00\x00\x00\x00") -> bytes:
    if length is None:
        length = len(body)
    return (
        magic + struct.pack(">I", length) + marker + tail
        + struct.pack(">H", len(root)) + root
        + b"\x00\x00\x00" + bytes([version])
        + body
    )


def _sample_doc() -> Document:
    return Document(
        root_name="savegame",
        root_object=[
            Pair("level", Number(12.0)),
            Pair("hardcore", Boolean(False)),
            Pair("player", String("Ünïcode")),
            Pair("settings", Object([
                Pair("volume", Number(0.75)),
                Pair("keys", Object([Pair("jump", String("space"))])),
            ])),
            Pair("level", Number(13.0)),  # duplicate keys are kept
        ],
    )


class ReadTests(unittest.TestCase):
    def test_minimal_document(self):
        doc = read_document(_sol(b"x", MINIMAL_BODY))
        self.assertEqual(doc.root_name, "x")
        self.assertEqual(doc.amf_version, AMF0)
        self.assertEqual(doc.declared_length, 13)
        self.assertIs(doc.length_scope, LengthScope.BODY)
        self.assertEqual(doc.root_object, [Pair("n", Number(3.5))])

    def test_flash_length_convention(self):
        data = _sol(b"x", MINIMAL_BODY, length=30)
        self.assertEqual(len(data) - 6, 30)
        doc = read_document(data)
        self.assertIs(doc.length_scope, LengthScope.FILE)
        self.assertEqual(doc.declared_length, 13)
        self.assertEqual(write_document(doc), data)

    def test_empty_body(self):
        doc = read_document(_sol(b"empty", b""))
        self.assertEqual(doc.root_object, [])
        self.assertEqual(doc.declared_length, 0)

    def test_bad_magic(self):
        with self.assertRaises(UnsupportedFormatError):
            read_document(_sol(b"x", MINIMAL_BODY, magic=b"\x00\x00"))

    def test_bad_tail(self):
        with self.assertRaises(MalformedHeaderError):
            read_document(_sol(b"x", MINIMAL_BODY, tail=b"\x00" * 6))

    def test_bad_marker(self):
        with self.assertRaises(MalformedHeaderError):
            read_document(_sol(b"x", MINIMAL_BODY, marker=b"TCSX"))

    def test_unknown_version(self):
        with self.assertRaises(UnknownVersionError):
            read_document(_sol(b"x", MINIMAL_BODY, version=1))

    def test_truncated_header(self):
        with self.assertRaises(UnexpectedEofError):
            read_document(b"\x00\xbf\x00\x00")

    def test_invalid_root_name(self):
        with self.assertRaises(Utf8DecodeError):
            read_document(_sol(b"\xff", MINIMAL_BODY))

    def test_length_too_long(self):
        with self.assertRaises(LengthMismatchError):
            read_document(_sol(b"x", MINIMAL_BODY, length=14))

    def test_trailing_bytes(self):
        with self.assertRaises(LengthMismatchError):
            read_document(_sol(b"x", MINIMAL_BODY + b"\x00", length=13))

    def test_length_inside_record(self):
        body = MINIMAL_BODY + MINIMAL_BODY
        with self.assertRaises(LengthMismatchError):
            read_document(_sol(b"x", body, length=20))


class WriteTests(unittest.TestCase):
    def test_minimal_length_field(self):
        data = write_document(Document("x", [Pair("n", Number(3.5))]))
        self.assertEqual(data, _sol(b"x", MINIMAL_BODY))
        (length,) = struct.unpack(">I", data[2:6])
        self.assertEqual(length, 13)

    def test_declared_length_recomputed(self):
        doc = _sample_doc()
        doc.declared_length = 999
        data = write_document(doc)
        (length,) = struct.unpack(">I", data[2:6])
        body_offset = 16 + 2 + len("savegame") + 4
        self.assertEqual(length, len(data) - body_offset)
        self.assertEqual(doc.declared_length, length)

    def test_file_scope_override(self):
        data = write_document(_sample_doc(), length_scope=LengthScope.FILE)
        (length,) = struct.unpack(">I", data[2:6])
        self.assertEqual(length, len(data) - 6)

    def test_round_trip(self):
        doc = _sample_doc()
        data = write_document(doc)
        back = read_document(data)
        self.assertEqual(back.root_name, doc.root_name)
        self.assertEqual(back.root_object, doc.root_object)
        self.assertEqual(write_document(back), data)

    def test_nested_scenario(self):
        data = write_document(Document("r", [Pair("obj", Object([Pair("a", Boolean(True))]))]))
        back = read_document(data)
        self.assertEqual(len(back.root_object), 1)
        self.assertEqual(back.root_object[0].value, Object([Pair("a", Boolean(True))]))


class FileTests(unittest.TestCase):
    def run_with_tmpdir(self, func):
        with tempfile.TemporaryDirectory() as tmp:
            func(Path(tmp))

    def test_dump_and_load(self):
        def scenario(tmp: Path):
            p = tmp / "game.sol"
            self.assertIsNone(dump(_sample_doc(), p))
            self.assertEqual(load(p).root_object, _sample_doc().root_object)
            self.assertEqual([f.name for f in tmp.iterdir()], ["game.sol"])

        self.run_with_tmpdir(scenario)

    def test_backup_keeps_previous(self):
        def scenario(tmp: Path):
            p = tmp / "game.sol"
            dump(Document("old", [Pair("v", Number(1.0))]), p)
            before = p.read_bytes()
            backup = dump(Document("new", [Pair("v", Number(2.0))]), p, backup=True)
            self.assertEqual(backup, tmp / "game.sol.bak")
            self.assertEqual(backup.read_bytes(), before)
            self.assertEqual(load(p).root_name, "new")

        self.run_with_tmpdir(scenario)

    def test_failed_encode_leaves_file(self):
        def scenario(tmp: Path):
            p = tmp / "game.sol"
            dump(Document("ok", []), p)
            before = p.read_bytes()
            with self.assertRaises(ValueError):
                dump(Document("bad", [Pair("s", String("x" * 70000))]), p)
            self.assertEqual(p.read_bytes(), before)
            self.assertEqual(sorted(os.listdir(tmp)), ["game.sol"])

        self.run_with_tmpdir(scenario)


if __name__ == "__main__":
    unittest.main()
