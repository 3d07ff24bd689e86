# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import unittest
import threading

import id3tag

from id3tag.errors import *
from id3tag.tags import *
from id3tag.frames import Frame

class TagTestCase(unittest.TestCase):
    def testNew(self):
        tag = Tag()
        self.assertEqual(tag.version, (4, 0))
        self.assertEqual(tag.options(), 0)
        self.assertEqual(tag.length, 0)
        self.assertEqual(len(tag), 0)
        self.assertEqual(tag.frames(), [])
        self.assertIsNone(tag.find("TIT2"))
        self.assertIsNone(tag.find(None, 0))
        self.assertEqual(tag.refcount, 1)

    def testOptions(self):
        tag = Tag()
        self.assertEqual(tag.set_options(Option.CRC | Option.COMPRESS, Option.CRC), Option.CRC)
        self.assertEqual(tag.set_options(Option.UNSYNCHRONIZE, 0xFFFF),
                         Option.CRC | Option.UNSYNCHRONIZE)
        self.assertEqual(tag.set_options(Option.CRC, 0), Option.UNSYNCHRONIZE)
        self.assertEqual(tag.options(), Option.UNSYNCHRONIZE)
        tag.append = True
        self.assertTrue(tag.append)
        self.assertTrue(tag.options() & Option.APPEND)
        tag.render_v1 = True
        self.assertEqual(tag.options(), Option.UNSYNCHRONIZE | Option.APPEND | Option.ID3V1)
        tag.render_v1 = False
        self.assertFalse(tag.render_v1)

    def testDefaultOptions(self):
        class CRCTag(Tag):
            default_options = Option.CRC
        self.assertEqual(CRCTag().options(), Option.CRC)
        self.assertEqual(Tag().options(), 0)

    def testFlags(self):
        tag = Tag()
        tag.experimental = True
        self.assertEqual(tag.flags, Flags.EXPERIMENTAL)
        tag.experimental = False
        self.assertEqual(tag.flags, 0)
        tag.unsynchronised = True
        tag.has_extended_header = True
        tag.has_footer = True
        self.assertEqual(tag.flags, Flags.UNSYNCHRONISATION | Flags.EXTENDED_HEADER | Flags.FOOTER)
        self.assertTrue(tag.unsynchronised and tag.has_extended_header and tag.has_footer)
        tag.has_extended_header = False
        self.assertEqual(tag.flags, Flags.UNSYNCHRONISATION | Flags.FOOTER)
        self.assertFalse(tag.has_extended_header)
        tag.is_update = True
        self.assertEqual(tag.extended_flags, ExtendedFlags.UPDATE)
        self.assertTrue(tag.is_update)

    def testLength(self):
        tag = Tag()
        tag.set_length(4096)
        self.assertEqual(tag.length, 4096)
        self.assertRaises(ValueError, tag.set_length, -1)
        self.assertRaises(ValueError, tag.set_length, "12")
        self.assertEqual(tag.length, 4096)

    def testAttachFind(self):
        tag = Tag()
        t1 = Frame("TIT2").set(1, ["One"])
        c1 = Frame("COMM")
        t2 = Frame("TIT2").set(1, ["Two"])
        for frame in (t1, c1, t2):
            self.assertIs(tag.attach(frame), tag)
        self.assertEqual(len(tag), 3)
        self.assertIs(tag.find("TIT2"), t1)
        self.assertIs(tag.find("TIT2", 1), t2)
        self.assertIsNone(tag.find("TIT2", 2))
        self.assertIsNone(tag.find("TIT2", -1))
        self.assertIs(tag.find(None, 1), c1)
        self.assertIs(tag.find(None, 2), t2)
        self.assertIsNone(tag.find(None, 3))
        self.assertIsNone(tag.find("TPE1"))
        self.assertIs(tag["TIT2"], t1)
        self.assertIs(tag["TIT2", 1], t2)
        self.assertIs(tag[1], c1)
        self.assertRaises(KeyError, tag.__getitem__, "TPE1")
        self.assertEqual(list(tag), [t1, c1, t2])
        self.assertIs(t1.owner, tag)

    def testAttachTwice(self):
        tag = Tag()
        other = Tag()
        frame = Frame("TIT2")
        tag.attach(frame)
        self.assertRaises(FrameAttached, tag.attach, frame)
        self.assertRaises(FrameAttached, other.attach, frame)
        self.assertEqual(len(tag), 1)
        self.assertEqual(len(other), 0)
        self.assertRaises(TypeError, tag.attach, "TIT2")

    def testDetach(self):
        tag = Tag()
        a = Frame("TIT2")
        b = Frame("TIT2")
        tag.attach(a)
        self.assertEqual(a, b)
        # Identity, not equality
        self.assertRaises(NotFound, tag.detach, b)
        self.assertRaises(LookupError, tag.detach, b)
        self.assertIs(tag.detach(a), a)
        self.assertIsNone(a.owner)
        self.assertEqual(len(tag), 0)
        self.assertRaises(NotFound, tag.detach, a)
        # A detached frame can be attached again.
        Tag().attach(a)

    def testClear(self):
        tag = Tag()
        frame = Frame("TIT2")
        tag.attach(frame).attach(Frame("TPE1"))
        tag.clear()
        self.assertEqual(len(tag), 0)
        self.assertIsNone(frame.owner)

    def testRefcount(self):
        tag = Tag()
        tag.attach(Frame("TIT2"))
        self.assertEqual(tag.ref(), 2)
        self.assertEqual(tag.refcount, 2)
        self.assertEqual(tag.unref(), 1)
        self.assertFalse(tag.released)
        self.assertEqual(len(tag), 1)
        self.assertEqual(tag.unref(), 0)
        self.assertTrue(tag.released)
        self.assertRaises(RefUnderflow, tag.unref)
        self.assertRaises(TagDestroyed, tag.frames)
        self.assertRaises(TagDestroyed, tag.attach, Frame("TIT2"))
        self.assertRaises(TagDestroyed, tag.render)
        self.assertRaises(TagDestroyed, tag.ref)
        self.assertEqual(repr(tag), "<Tag: released>")

    def testConcurrentRefs(self):
        tag = Tag()
        def worker():
            for i in range(1000):
                tag.ref()
                tag.unref()
        threads = [threading.Thread(target=worker) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(tag.refcount, 1)

class QueryTestCase(unittest.TestCase):
    def testQuery(self):
        self.assertEqual(query(b"ID3\x04\x00\x00\x00\x00\x00\x00"), 10)
        self.assertEqual(query(b"ID3\x04\x00\x00\x00\x00\x02\x01"), 267)
        self.assertEqual(query(b"ID3\x03\x00\x00\x00\x00\x00\x14rest"), 30)
        self.assertEqual(query(b"ID3\x02\x00\x00\x00\x00\x00\x0C"), 22)
        # Footer
        self.assertEqual(query(b"ID3\x04\x00\x10\x00\x00\x00\x14"), 40)
        self.assertEqual(query(b"ID3\x03\x00\x10\x00\x00\x00\x14"), 30)
        self.assertEqual(Tag.query(b"ID3\x04\x00\x00\x00\x00\x00\x00"), 10)
        self.assertEqual(id3tag.query(bytearray(b"ID3\x04\x00\x00\x00\x00\x00\x00")), 10)

    def testNotATag(self):
        for data in (b"", b"ID3", b"ID3\x04\x00\x00\x00\x00\x00",
                     b"TAG\x04\x00\x00\x00\x00\x00\x00",
                     b"ID3\x05\x00\x00\x00\x00\x00\x00",
                     b"ID3\x01\x00\x00\x00\x00\x00\x00",
                     b"ID3\x04\xFF\x00\x00\x00\x00\x00",
                     b"ID3\x04\x00\x00\x00\x00\x00\x80",
                     b"ID3\x04\x00\x00\x80\x00\x00\x00",
                     b"\xFF\xFB\x90\x00" * 4):
            self.assertEqual(query(data), 0, data)

    def testIdempotent(self):
        data = b"ID3\x04\x00\x00\x00\x00\x01\x00" + b"\x00" * 128
        self.assertEqual(query(data), query(data))
        self.assertEqual(data, b"ID3\x04\x00\x00\x00\x00\x01\x00" + b"\x00" * 128)

suite = unittest.TestSuite([
    unittest.TestLoader().loadTestsFromTestCase(case)
    for case in (TagTestCase, QueryTestCase)])

if __name__ == "__main__":
    unittest.main(defaultTest="suite")
