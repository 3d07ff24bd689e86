# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Low-level conversions: wire text encodings, unsynchronisation,
syncsafe and big-endian integers, CRC-32."""

import enum
import zlib
from warnings import warn

from id3tag.errors import *

class Encoding(enum.IntEnum):
    """Text encodings an ID3v2 frame may declare in its encoding byte.

    The integer value is the byte stored on the wire; `id` is the
    identifier accepted and returned by TextEncoding fields.
    """
    ISO_8859_1 = 0
    UTF_16 = 1
    UTF_16BE = 2
    UTF_8 = 3

    @property
    def id(self):
        return _encoding_ids[self]

    @property
    def terminator(self):
        return b"\x00\x00" if self in (Encoding.UTF_16, Encoding.UTF_16BE) else b"\x00"

    @classmethod
    def from_id(cls, name):
        "Look up an encoding by its identifier string."
        if isinstance(name, bytes):
            name = name.decode("ascii", "replace")
        for encoding, ident in _encoding_ids.items():
            if ident == name:
                return encoding
        raise InvalidEncoding("Illegal text encoding: {0!r}".format(name))

_encoding_ids = {
    Encoding.ISO_8859_1: "iso-8859-1",
    Encoding.UTF_16: "utf-16",
    Encoding.UTF_16BE: "utf-16be",
    Encoding.UTF_8: "utf-8",
    }

_BOM_BE = b"\xFE\xFF"
_BOM_LE = b"\xFF\xFE"

class Text:
    """Conversion between str (the internal representation) and the
    wire text encodings.

    Decoding is strict: malformed input raises ConversionFailed instead
    of producing replacement characters.
    """

    @staticmethod
    def decode(data, encoding):
        "Decode one string of raw bytes (without terminator)."
        encoding = Encoding(encoding)
        data = bytes(data)
        try:
            if encoding == Encoding.ISO_8859_1:
                return data.decode("iso-8859-1")
            if encoding == Encoding.UTF_8:
                return data.decode("utf-8")
            if encoding == Encoding.UTF_16BE:
                return data.decode("utf-16-be")
            # UTF-16 with an optional byte order mark; big endian if absent.
            if data[:2] == _BOM_LE:
                return data[2:].decode("utf-16-le")
            if data[:2] == _BOM_BE:
                data = data[2:]
            return data.decode("utf-16-be")
        except UnicodeDecodeError as e:
            raise ConversionFailed("Invalid {0} sequence: {1}"
                                   .format(encoding.id, e)) from e
        except MemoryError as e:
            raise OutOfMemory("out of memory") from e

    @staticmethod
    def encode(text, encoding):
        "Encode a string without terminator. UTF-16 output carries a BOM."
        encoding = Encoding(encoding)
        try:
            if encoding == Encoding.ISO_8859_1:
                return text.encode("iso-8859-1")
            if encoding == Encoding.UTF_8:
                return text.encode("utf-8")
            if encoding == Encoding.UTF_16BE:
                return text.encode("utf-16-be")
            return _BOM_BE + text.encode("utf-16-be")
        except UnicodeEncodeError as e:
            raise ConversionFailed("Cannot encode {0!r} as {1}"
                                   .format(text, encoding.id)) from e
        except MemoryError as e:
            raise OutOfMemory("out of memory") from e

    @staticmethod
    def split(data, encoding):
        """Split data at the first terminator of the given encoding.

        Returns (rawstr, rest). When no terminator is present, the whole of
        data is the string and rest is empty.
        """
        term = Encoding(encoding).terminator
        if len(term) == 1:
            rawstr, sep, rest = bytes(data).partition(term)
            return rawstr, rest
        for i in range(0, len(data) - 1, 2):
            if data[i:i+2] == term:
                return bytes(data[:i]), bytes(data[i+2:])
        return bytes(data), b""

    @staticmethod
    def from_utf8(value):
        """Convert a caller-supplied str or UTF-8 byte string to str.

        Lone surrogates in a str are rejected, as they have no UTF-8 form.
        """
        try:
            if isinstance(value, (bytes, bytearray, memoryview)):
                return bytes(value).decode("utf-8")
            if isinstance(value, str):
                value.encode("utf-8")
                return value
        except UnicodeError as e:
            raise ConversionFailed("Invalid UTF-8 text: {0}".format(e)) from e
        except MemoryError as e:
            raise OutOfMemory("out of memory") from e
        raise TypeError("Not a string: {0!r}".format(value))

class Unsync:
    "Conversion from/to unsynchronized byte sequences."
    @staticmethod
    def gen_decode(iterable):
        "A generator for de-unsynchronizing a byte iterable."
        sync = False
        for b in iterable:
            if sync and (b & 0xE0) == 0xE0:
                warn("Invalid unsynched data", TagWarning)
            if not (sync and b == 0x00):
                yield b
            sync = (b == 0xFF)

    @staticmethod
    def gen_encode(data):
        "A generator for unsynchronizing a byte iterable."
        sync = False
        for b in data:
            if sync and (b == 0x00 or (b & 0xE0) == 0xE0):
                yield 0x00 # Insert sync char
            yield b
            sync = (b == 0xFF)
        if sync:
            yield 0x00 # Data ends on 0xFF

    @staticmethod
    def decode(data):
        "Remove unsynchronization bytes from data."
        if b"\xFF\x00" not in data:
            return bytes(data)
        return bytes(Unsync.gen_decode(data))

    @staticmethod
    def encode(data):
        "Insert unsynchronization bytes into data."
        if b"\xFF" not in data:
            return bytes(data)
        return bytes(Unsync.gen_encode(data))

class Syncsafe:
    """Conversion to/from syncsafe integers.
    Syncsafe integers are big-endian 7-bit byte sequences.
    """
    @staticmethod
    def decode(data):
        "Decodes a syncsafe integer"
        value = 0
        for b in data:
            if b > 127:  # iTunes bug
                raise ValueError("Invalid syncsafe integer")
            value <<= 7
            value += b
        return value

    @staticmethod
    def encode(i, *, width=-1):
        """Encodes a nonnegative integer into syncsafe format

        When width > 0, then len(result) == width
        When width < 0, then len(result) >= abs(width)
        """
        if i < 0:
            raise ValueError("value is negative")
        assert width != 0
        data = bytearray()
        while i:
            data.append(i & 127)
            i >>= 7
        if width > 0 and len(data) > width:
            raise ValueError("Integer too large")
        if len(data) < abs(width):
            data.extend([0] * (abs(width) - len(data)))
        data.reverse()
        return bytes(data)

class Int8:
    """Conversion to/from binary integer values of any length."""

    @staticmethod
    def decode(data):
        "Decodes an 8-bit big-endian integer of any length"
        return int.from_bytes(bytes(data), "big")

    @staticmethod
    def encode(i, *, width=-1):
        "Encodes a nonnegative integer into a big-endian byte string of given length"
        assert width != 0
        if i < 0: raise ValueError("Nonnegative integer expected")
        length = max(abs(width), (i.bit_length() + 7) >> 3)
        if width > 0 and length > width:
            raise ValueError("Integer too large")
        return i.to_bytes(length, "big")

def crc32(data):
    "CRC-32 as stored in ID3v2 extended headers."
    return zlib.crc32(bytes(data)) & 0xFFFFFFFF
