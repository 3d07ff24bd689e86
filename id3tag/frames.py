# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""ID3v2 frames."""

from warnings import warn

from id3tag.conversion import Encoding
from id3tag.errors import *
from id3tag.fields import Field, FieldType, validate_frame_id
import id3tag.schema as schema

# Frame flags, in ID3v2.4 layout.
DISCARD_ON_TAG_ALTER = 0x4000
DISCARD_ON_FILE_ALTER = 0x2000
READ_ONLY = 0x1000
GROUPING = 0x0040
COMPRESSED = 0x0008
ENCRYPTED = 0x0004
UNSYNCHRONISED = 0x0002
DATA_LENGTH_INDICATOR = 0x0001

STATUS_MASK = DISCARD_ON_TAG_ALTER | DISCARD_ON_FILE_ALTER | READ_ONLY

class Frame:
    """A single frame: an id, its description and an ordered list of
    typed fields laid out by the schema registry.

    A frame may belong to at most one Tag at a time; see Tag.attach.
    """
    def __init__(self, frameid, flags=0):
        frameid = validate_frame_id(frameid)
        frametype = schema.frametype(frameid)
        self.frameid = frameid
        self.description = frametype.description
        self.flags = flags
        self.group = None
        # Undecodable (encrypted) frames keep their payload here.
        self.encoded = None
        self.encryption = None
        self.data_length = None
        self._fields = [Field(t) for t in frametype.fields]
        self._owner = None

    @property
    def type(self):
        return self.frameid

    @property
    def field_count(self):
        return len(self._fields)

    @property
    def owner(self):
        "The Tag this frame is attached to, or None."
        return self._owner

    def field_at(self, n):
        if type(n) is not int:
            raise TypeError("Field index must be an integer: {0!r}".format(n))
        if not 0 <= n < len(self._fields):
            raise IndexOutOfRange("index {0} out of frame {1}".format(n, self.frameid))
        return self._fields[n]

    def field_type_at(self, n):
        return self.field_at(n).type

    def get(self, n):
        return self.field_at(n).get()

    def set(self, n, value):
        self.field_at(n).set(value)
        return self

    def __len__(self):
        return len(self._fields)

    def __getitem__(self, n):
        return self.get(n)

    def __setitem__(self, n, value):
        self.set(n, value)

    def __iter__(self):
        "Iterate over the fields."
        return iter(self._fields)

    def __eq__(self, other):
        return (isinstance(other, Frame)
                and self.frameid == other.frameid
                and self.flags == other.flags
                and self.group == other.group
                and self.encoded == other.encoded
                and self._fields == other._fields)

    @classmethod
    def _from_data(cls, frameid, data, flags=0):
        frame = cls(frameid, flags=flags)
        encoding = Encoding.ISO_8859_1
        for field in frame._fields:
            data = field.read(data, encoding)
            if field.type is FieldType.TEXTENCODING:
                encoding = field.value
        if data:
            warn("Frame {0} has {1} bytes of trailing data"
                 .format(frameid, len(data)), FrameWarning)
        return frame

    def _to_data(self):
        "Encode fields into the frame body."
        encoding = Encoding.ISO_8859_1
        data = bytearray()
        last = len(self._fields) - 1
        for i, field in enumerate(self._fields):
            if field.type is FieldType.TEXTENCODING:
                encoding = field.value
            data.extend(field.write(encoding, terminate=(i < last)))
        return bytes(data)

    def __repr__(self):
        args = [repr(self.frameid)]
        if self.flags:
            args.append("flags=0x{0:04X}".format(self.flags))
        args.extend(repr(field) for field in self._fields)
        return "Frame({0})".format(", ".join(args))

    def _str_fields(self):
        fields = []
        for field in self._fields:
            try:
                fields.append(repr(field.get()))
            except FieldNotImplemented:
                fields.append("<{0}>".format(field.type.value))
        return ", ".join(fields)

    def __str__(self):
        if self.encoded is not None:
            return "!{0}(<{1} bytes of encrypted data>)".format(
                self.frameid, len(self.encoded))
        return "{0}({1})".format(self.frameid, self._str_fields())
