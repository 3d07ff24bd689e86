# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import unittest

from id3tag.conversion import Encoding
from id3tag.errors import *
from id3tag.fields import *

class FieldTestCase(unittest.TestCase):
    def testDefaults(self):
        self.assertEqual(Field(FieldType.TEXTENCODING).get(), "iso-8859-1")
        self.assertEqual(Field(FieldType.STRING).get(), "")
        self.assertEqual(Field(FieldType.STRINGLIST).get(), [])
        self.assertEqual(Field(FieldType.INT32).get(), 0)
        self.assertEqual(Field(FieldType.LANGUAGE).get(), "XXX")
        self.assertEqual(Field(FieldType.BINARYDATA).get(), b"")
        self.assertEqual(Field("int16").type, FieldType.INT16)

    def testTextEncoding(self):
        field = Field(FieldType.TEXTENCODING)
        field.set("utf-16")
        self.assertEqual(field.get(), "utf-16")
        self.assertIs(field.value, Encoding.UTF_16)
        field.set(Encoding.UTF_8)
        self.assertEqual(field.get(), "utf-8")
        self.assertRaises(InvalidEncoding, field.set, "utf16")
        self.assertRaises(InvalidEncoding, field.set, 1)
        self.assertEqual(field.get(), "utf-8")
        self.assertRaises(MalformedTag, field.read, b"\x04", Encoding.ISO_8859_1)

    def testLatin1(self):
        field = Field(FieldType.LATIN1)
        field.set("http://example.com/")
        self.assertEqual(field.get(), b"http://example.com/")
        field.set(b"caf\xe9")
        self.assertEqual(field.get(), b"caf\xe9")
        self.assertRaises(FormatViolation, field.set, "two\nlines")
        self.assertRaises(FormatViolation, field.set, "nul\x00")
        self.assertRaises(FormatViolation, field.set, memoryview(b"two\nlines"))
        self.assertRaises(FormatViolation, field.set, bytearray(b"nul\x00"))
        self.assertRaises(ConversionFailed, field.set, "€")
        self.assertEqual(field.get(), b"caf\xe9")

        full = Field(FieldType.LATIN1FULL)
        full.set("two\nlines")
        self.assertEqual(full.get(), b"two\nlines")

    def testString(self):
        field = Field(FieldType.STRING)
        field.set("caf\xe9")
        self.assertEqual(field.get(), "caf\xe9")
        field.set(b"caf\xc3\xa9")
        self.assertEqual(field.get(), "caf\xe9")
        self.assertRaises(FormatViolation, field.set, "a\nb")
        self.assertRaises(FormatViolation, field.set, memoryview(b"a\nb"))
        self.assertRaises(FormatViolation, field.set, memoryview(b"a\x00b"))
        self.assertRaises(ConversionFailed, field.set, b"\xff")
        self.assertEqual(field.get(), "caf\xe9")

        full = Field(FieldType.STRINGFULL)
        full.set("first line\nsecond line")
        self.assertEqual(full.get(), "first line\nsecond line")

    def testStringList(self):
        field = Field(FieldType.STRINGLIST)
        field.set(["Test Song"])
        self.assertEqual(field.get(), ["Test Song"])
        field.set("Lone")
        self.assertEqual(field.get(), ["Lone"])
        field.set(["a", "b", ""])
        self.assertEqual(field.get(), ["a", "b", ""])
        # get returns a copy
        field.get().append("c")
        self.assertEqual(field.get(), ["a", "b", ""])

    def testStringListAtomicity(self):
        field = Field(FieldType.STRINGLIST)
        field.set(["one", "two"])
        self.assertRaises(FormatViolation, field.set, ["three", "fo\x00ur"])
        self.assertRaises(ConversionFailed, field.set, ["three", b"\xff"])
        self.assertRaises(FormatViolation, field.set, [memoryview(b"fo\x00ur")])
        self.assertRaises(FormatViolation, field.set, memoryview(b"fo\x00ur"))
        self.assertEqual(field.get(), ["one", "two"])

    def testLanguage(self):
        field = Field(FieldType.LANGUAGE)
        field.set("eng")
        self.assertEqual(field.get(), "eng")
        field.set(b"HUN")
        self.assertEqual(field.get(), "HUN")
        for bad in ("en", "engl", "e1g", "", "\xe9ng"):
            self.assertRaises(InvalidLanguageCode, field.set, bad)
        self.assertEqual(field.get(), "HUN")

    def testDate(self):
        field = Field(FieldType.DATE)
        field.set("20091231")
        self.assertEqual(field.get(), "20091231")
        self.assertEqual(field.write(Encoding.ISO_8859_1), b"20091231")
        field.set("2009")
        self.assertEqual(field.get(), "2009")
        self.assertEqual(field.write(Encoding.ISO_8859_1), b"2009\x00\x00\x00\x00")

    def testFrameId(self):
        field = Field(FieldType.FRAMEID)
        field.set("TIT2")
        self.assertEqual(field.get(), "TIT2")
        self.assertEqual(field.write(Encoding.ISO_8859_1), b"TIT2")
        for bad in ("tit2", "TIT", "TIT22", "1IT2"):
            self.assertRaises(InvalidFrameId, field.set, bad)
        self.assertEqual(field.get(), "TIT2")

    def testIntegers(self):
        for type, width in ((FieldType.INT8, 1), (FieldType.INT16, 2),
                            (FieldType.INT24, 3), (FieldType.INT32, 4)):
            field = Field(type)
            top = (1 << (8 * width)) - 1
            field.set(top)
            self.assertEqual(field.get(), top)
            self.assertEqual(field.write(Encoding.ISO_8859_1), b"\xFF" * width)
            self.assertRaises(IntegerRangeError, field.set, top + 1)
            self.assertRaises(IntegerRangeError, field.set, -1)
            self.assertRaises(TypeError, field.set, "1")
            self.assertRaises(TypeError, field.set, 1.0)
            self.assertEqual(field.get(), top)
        field = Field(FieldType.INT32)
        field.set(16000000)
        self.assertEqual(field.get(), 16000000)
        self.assertEqual(field.write(Encoding.ISO_8859_1), b"\x00\xF4\x24\x00")

    def testBinary(self):
        field = Field(FieldType.BINARYDATA)
        field.set(bytearray(b"\x00\x01\xFF"))
        self.assertEqual(field.get(), b"\x00\x01\xFF")
        self.assertRaises(TypeError, field.set, "text")

    def testReserved(self):
        for type in (FieldType.LATIN1LIST, FieldType.INT32PLUS):
            field = Field(type)
            self.assertRaises(FieldNotImplemented, field.get)
            self.assertRaises(FieldNotImplemented, field.set, 1)
            self.assertRaises(NotImplementedError, field.get)

    def testReservedKeepsBytes(self):
        field = Field(FieldType.INT32PLUS)
        rest = field.read(b"\x00\x00\x01\x00\x00", Encoding.ISO_8859_1)
        self.assertEqual(rest, b"")
        self.assertEqual(field.write(Encoding.ISO_8859_1), b"\x00\x00\x01\x00\x00")
        self.assertRaises(MalformedTag, field.read, b"\x00\x01", Encoding.ISO_8859_1)

        field = Field(FieldType.LATIN1LIST)
        field.read(b"one\x00two", Encoding.ISO_8859_1)
        self.assertEqual(field.write(Encoding.ISO_8859_1, terminate=False), b"one\x00two")

class FieldCodecTestCase(unittest.TestCase):
    def testStringTermination(self):
        field = Field(FieldType.STRING)
        field.set("abc")
        self.assertEqual(field.write(Encoding.ISO_8859_1), b"abc\x00")
        self.assertEqual(field.write(Encoding.ISO_8859_1, terminate=False), b"abc")
        self.assertEqual(field.write(Encoding.UTF_16BE), b"\x00a\x00b\x00c\x00\x00")
        self.assertEqual(field.write(Encoding.UTF_16), b"\xFE\xFF\x00a\x00b\x00c\x00\x00")

    def testStringRead(self):
        field = Field(FieldType.STRING)
        rest = field.read(b"\xFF\xFEa\x00b\x00\x00\x00tail", Encoding.UTF_16)
        self.assertEqual(field.get(), "ab")
        self.assertEqual(rest, b"tail")

    def testUnencodableText(self):
        field = Field(FieldType.STRING)
        field.set("€")
        self.assertRaises(ConversionFailed, field.write, Encoding.ISO_8859_1)
        self.assertEqual(field.write(Encoding.UTF_8), b"\xe2\x82\xac\x00")

    def testStringListRead(self):
        field = Field(FieldType.STRINGLIST)
        field.read(b"one\x00two\x00", Encoding.ISO_8859_1)
        self.assertEqual(field.get(), ["one", "two"])
        self.assertEqual(field.write(Encoding.ISO_8859_1, terminate=False), b"one\x00two")
        field.read(b"one\x00\x00", Encoding.ISO_8859_1)
        self.assertEqual(field.get(), ["one", ""])
        self.assertEqual(field.write(Encoding.ISO_8859_1, terminate=False), b"one\x00\x00")

    def testFrameIdValidation(self):
        self.assertTrue(is_frame_id("TIT2"))
        self.assertTrue(is_frame_id(b"XYZ1"))
        self.assertFalse(is_frame_id("TT2"))
        self.assertFalse(is_frame_id("TIT "))
        self.assertFalse(is_frame_id(None))
        self.assertEqual(validate_frame_id(b"APIC"), "APIC")
        self.assertRaises(InvalidFrameId, validate_frame_id, "Tit2")

suite = unittest.TestSuite([
    unittest.TestLoader().loadTestsFromTestCase(case)
    for case in (FieldTestCase, FieldCodecTestCase)])

if __name__ == "__main__":
    unittest.main(defaultTest="suite")
