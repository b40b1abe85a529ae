from __future__ import annotations

import struct
import unittest

from soledit.cursor import ByteReader, ByteWriter
from soledit.errors import StringTooLongError, UnexpectedEofError, Utf8DecodeError


class ByteReaderTests(unittest.TestCase):
    def test_big_endian_reads(self):
        data = b"\x7f" + b"\x01\x02" + b"\x00\x00\x01\x00" + struct.pack(">d", -2.25)
        r = ByteReader(data)
        self.assertEqual(r.read_u8(), 0x7F)
        self.assertEqual(r.read_u16(), 0x0102)
        self.assertEqual(r.read_u32(), 256)
        self.assertEqual(r.read_f64(), -2.25)
        self.assertEqual(r.position, len(data))
        self.assertFalse(r)

    def test_eof_leaves_position(self):
        r = ByteReader(b"\x00\x01\x02")
        r.read_u8()
        with self.assertRaises(UnexpectedEofError):
            r.read_u32()
        self.assertEqual(r.position, 1)
        # also a plain EOFError for callers that only know the builtin
        with self.assertRaises(EOFError):
            r.read(10)

    def test_utf8(self):
        r = ByteReader(b"\x00\x03h\xc3\xa9")
        self.assertEqual(r.read_utf8_prefixed(), "hé")
        with self.assertRaises(Utf8DecodeError):
            ByteReader(b"\x00\x02\xff\xfe").read_utf8_prefixed()


class ByteWriterTests(unittest.TestCase):
    def test_reserve_and_patch(self):
        w = ByteWriter()
        w.write(b"\xaa")
        off = w.reserve_u32()
        w.write(b"tail")
        w.patch_u32(off, 0x01020304)
        self.assertEqual(w.getvalue(), b"\xaa\x01\x02\x03\x04tail")
        self.assertEqual(w.position, 9)

    def test_patch_out_of_range(self):
        w = ByteWriter()
        w.write(b"\x00\x00")
        with self.assertRaises(ValueError):
            w.patch_u32(0, 1)

    def test_string_limits(self):
        w = ByteWriter()
        self.assertEqual(w.write_utf8_prefixed("a" * 0xFFFF), 2 + 0xFFFF)
        with self.assertRaises(StringTooLongError):
            ByteWriter().write_utf8_prefixed("a" * 0x10000)
        # the limit counts UTF-8 bytes, not characters
        with self.assertRaises(StringTooLongError):
            ByteWriter().write_utf8_prefixed("é" * 0x8000)

    def test_u16_range(self):
        with self.assertRaises(ValueError):
            ByteWriter().write_u16(0x10000)

    def test_u8_range(self):
        w = ByteWriter()
        self.assertEqual(w.write_u8(0xFF), 1)
        for bad in (0x100, 300, -1):
            with self.assertRaises(ValueError):
                w.write_u8(bad)
        self.assertEqual(w.getvalue(), b"\xff")


if __name__ == "__main__":
    unittest.main()
