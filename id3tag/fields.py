# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Typed field values inside ID3v2 frames.

Every field has a FieldType that never changes, and a value whose shape
is dictated by that type. Each FieldType is served by a Spec object that
knows how to validate, expose, decode and encode values of that kind.
"""

import abc
import enum
import re

from abc import abstractmethod

from id3tag.conversion import *
from id3tag.errors import *

# The idea for the Spec system comes from Mutagen.

class FieldType(enum.Enum):
    TEXTENCODING = "textencoding"
    LATIN1 = "latin1"
    LATIN1FULL = "latin1full"
    LATIN1LIST = "latin1list"
    STRING = "string"
    STRINGFULL = "stringfull"
    STRINGLIST = "stringlist"
    LANGUAGE = "language"
    FRAMEID = "frameid"
    DATE = "date"
    INT8 = "int8"
    INT16 = "int16"
    INT24 = "int24"
    INT32 = "int32"
    INT32PLUS = "int32plus"
    BINARYDATA = "binarydata"

_frame_id_pattern = re.compile("^[A-Z][A-Z0-9]{3}$")

def is_frame_id(frameid):
    "Return true if frameid is a valid four-character ID3v2.3/v2.4 frame id."
    if isinstance(frameid, (bytes, bytearray)):
        frameid = frameid.decode("iso-8859-1")
    return isinstance(frameid, str) and _frame_id_pattern.match(frameid) is not None

def validate_frame_id(frameid):
    if not is_frame_id(frameid):
        raise InvalidFrameId("Invalid frame id: {0!r}".format(frameid))
    if isinstance(frameid, (bytes, bytearray)):
        frameid = frameid.decode("ascii")
    return frameid


def _need(data, length, what):
    if len(data) < length:
        raise MalformedTag("Truncated {0} field".format(what))
    return bytes(data[:length]), data[length:]

def _bytes_like(value):
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value

def _check_chars(value, newline_ok):
    "Reject characters that cannot appear inside a single text field."
    nul, lf = ("\x00", "\n") if isinstance(value, str) else (b"\x00", b"\n")
    if not newline_ok and lf in value:
        raise FormatViolation("newline characters (U+000A) not allowed")
    if nul in value:
        raise FormatViolation("NUL characters not allowed in text fields")

def _latin1(value):
    if isinstance(value, str):
        try:
            return value.encode("iso-8859-1")
        except UnicodeEncodeError as e:
            raise ConversionFailed("illegal latin1 sequence: {0!r}".format(value)) from e
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError("Not a string: {0!r}".format(value))


class Spec(metaclass=abc.ABCMeta):
    "Behaviour shared by all fields of one FieldType."
    default = None

    @abstractmethod
    def read(self, data, encoding):
        "Decode a value from the start of data; returns (value, rest)."

    @abstractmethod
    def write(self, value, encoding, terminate):
        "Encode value; terminate is false only for the last field of a frame."

    def get(self, value):
        return value

    @abstractmethod
    def validate(self, value):
        "Convert a caller-supplied value to stored form, or raise."

class TextEncodingSpec(Spec):
    default = Encoding.ISO_8859_1

    def read(self, data, encoding):
        raw, data = _need(data, 1, "text encoding")
        if raw[0] > 3:
            raise MalformedTag("Invalid text encoding 0x{0:02X}".format(raw[0]))
        return Encoding(raw[0]), data

    def write(self, value, encoding, terminate):
        return bytes([value])

    def get(self, value):
        return value.id

    def validate(self, value):
        if isinstance(value, Encoding):
            return value
        if isinstance(value, (str, bytes)):
            return Encoding.from_id(value)
        raise InvalidEncoding("Illegal text encoding: {0!r}".format(value))

class Latin1Spec(Spec):
    default = b""
    full = False

    def read(self, data, encoding):
        rawstr, sep, data = bytes(data).partition(b"\x00")
        return rawstr, data

    def write(self, value, encoding, terminate):
        return value + b"\x00" if terminate else value

    def validate(self, value):
        value = _bytes_like(value)
        if isinstance(value, (str, bytes)):
            _check_chars(value, self.full)
        return _latin1(value)

class Latin1FullSpec(Latin1Spec):
    full = True

class StringSpec(Spec):
    default = ""
    full = False

    def read(self, data, encoding):
        rawstr, data = Text.split(data, encoding)
        return Text.decode(rawstr, encoding), data

    def write(self, value, encoding, terminate):
        data = Text.encode(value, encoding)
        if terminate:
            data += Encoding(encoding).terminator
        return data

    def validate(self, value):
        value = _bytes_like(value)
        if isinstance(value, (str, bytes)):
            _check_chars(value, self.full)
        return Text.from_utf8(value)

class StringFullSpec(StringSpec):
    full = True

class StringListSpec(Spec):
    default = ()

    def read(self, data, encoding):
        "Eats all of data."
        strings = []
        while data:
            rawstr, data = Text.split(data, encoding)
            strings.append(Text.decode(rawstr, encoding))
        return tuple(strings), b""

    def write(self, value, encoding, terminate):
        data = bytearray()
        term = Encoding(encoding).terminator
        for i, s in enumerate(value):
            data.extend(Text.encode(s, encoding))
            # An empty final string needs its terminator to be seen at all.
            if terminate or i < len(value) - 1 or s == "":
                data.extend(term)
        return bytes(data)

    def get(self, value):
        return list(value)

    def validate(self, value):
        value = _bytes_like(value)
        if isinstance(value, (str, bytes)):
            value = [value]
        strings = []
        for s in value:
            s = _bytes_like(s)
            if isinstance(s, (str, bytes)):
                _check_chars(s, True)
            strings.append(Text.from_utf8(s))
        return tuple(strings)

class FixedSpec(Spec):
    "Fixed-width ISO-8859-1 text, read back up to the first NUL."
    width = None
    what = None

    def read(self, data, encoding):
        return _need(data, self.width, self.what)

    def write(self, value, encoding, terminate):
        return value

    def get(self, value):
        return value.partition(b"\x00")[0].decode("iso-8859-1")

class LanguageSpec(FixedSpec):
    width = 3
    what = "language"
    default = b"XXX"
    _pattern = re.compile("^[A-Za-z]{3}$")

    def validate(self, value):
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("iso-8859-1")
        if not isinstance(value, str) or not self._pattern.match(value):
            raise InvalidLanguageCode("not an ISO 639-2 language-code: {0!r}".format(value))
        return value.encode("ascii")

class DateSpec(FixedSpec):
    width = 8
    what = "date"
    default = b"\x00" * 8

    def validate(self, value):
        data = _latin1(value)[:self.width]
        return data + b"\x00" * (self.width - len(data))

class FrameIdSpec(Spec):
    default = ""

    def read(self, data, encoding):
        raw, data = _need(data, 4, "frame id")
        return raw.rstrip(b"\x00").decode("iso-8859-1"), data

    def write(self, value, encoding, terminate):
        return value.encode("iso-8859-1").ljust(4, b"\x00")

    def validate(self, value):
        return validate_frame_id(value)

class IntegerSpec(Spec):
    default = 0

    def __init__(self, width):
        self.width = width

    def read(self, data, encoding):
        raw, data = _need(data, self.width, "integer")
        return Int8.decode(raw), data

    def write(self, value, encoding, terminate):
        return Int8.encode(value, width=self.width)

    def validate(self, value):
        if type(value) is not int:
            raise TypeError("Not an integer: {0!r}".format(value))
        if value < 0:
            raise IntegerRangeError("Value is negative: {0}".format(value))
        if value >= 1 << (self.width << 3):
            raise IntegerRangeError("Value {0} does not fit in {1} bits"
                                    .format(value, self.width << 3))
        return value

class BinaryDataSpec(Spec):
    default = b""

    def read(self, data, encoding):
        return bytes(data), b""

    def write(self, value, encoding, terminate):
        return value

    def validate(self, value):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("Not a byte sequence")
        return bytes(value)

class ReservedSpec(Spec):
    """Kinds that are carried through parse and render untouched, but
    whose values cannot be read or written by callers."""
    def get(self, value):
        raise FieldNotImplemented("field type not implemented")

    def validate(self, value):
        raise FieldNotImplemented("field type not implemented")

class Int32PlusSpec(ReservedSpec):
    default = b"\x00" * 4

    def read(self, data, encoding):
        if len(data) < 4:
            raise MalformedTag("Truncated integer field")
        return bytes(data), b""

    def write(self, value, encoding, terminate):
        return value

class Latin1ListSpec(ReservedSpec):
    default = ()

    def read(self, data, encoding):
        strings = []
        data = bytes(data)
        while data:
            rawstr, sep, data = data.partition(b"\x00")
            strings.append(rawstr)
        return tuple(strings), b""

    def write(self, value, encoding, terminate):
        data = bytearray()
        for i, s in enumerate(value):
            data.extend(s)
            if terminate or i < len(value) - 1 or s == b"":
                data.append(0)
        return bytes(data)


_specs = {
    FieldType.TEXTENCODING: TextEncodingSpec(),
    FieldType.LATIN1: Latin1Spec(),
    FieldType.LATIN1FULL: Latin1FullSpec(),
    FieldType.LATIN1LIST: Latin1ListSpec(),
    FieldType.STRING: StringSpec(),
    FieldType.STRINGFULL: StringFullSpec(),
    FieldType.STRINGLIST: StringListSpec(),
    FieldType.LANGUAGE: LanguageSpec(),
    FieldType.FRAMEID: FrameIdSpec(),
    FieldType.DATE: DateSpec(),
    FieldType.INT8: IntegerSpec(1),
    FieldType.INT16: IntegerSpec(2),
    FieldType.INT24: IntegerSpec(3),
    FieldType.INT32: IntegerSpec(4),
    FieldType.INT32PLUS: Int32PlusSpec(),
    FieldType.BINARYDATA: BinaryDataSpec(),
    }
assert set(_specs) == set(FieldType)


class Field:
    """One typed value slot of a frame.

    The stored value is replaced only after the new value has been fully
    validated and converted, so a failed set leaves the field unchanged.
    """
    __slots__ = ("type", "_value")

    def __init__(self, type):
        self.type = FieldType(type)
        self._value = _specs[self.type].default

    @property
    def spec(self):
        return _specs[self.type]

    @property
    def value(self):
        "The stored value, in its internal form."
        return self._value

    def get(self):
        return self.spec.get(self._value)

    def set(self, value):
        self._value = self.spec.validate(value)

    def read(self, data, encoding):
        "Decode this field from data, returning the unconsumed rest."
        self._value, data = self.spec.read(data, encoding)
        return data

    def write(self, encoding, terminate=True):
        return self.spec.write(self._value, encoding, terminate)

    def __eq__(self, other):
        return (isinstance(other, Field)
                and self.type == other.type
                and self._value == other._value)

    def __repr__(self):
        value = self._value
        if isinstance(value, bytes) and len(value) > 20:
            value = "<{0} bytes of binary data {1!r}...>".format(len(value), value[:20])
        else:
            value = repr(value)
        return "Field({0}={1})".format(self.type.value, value)
