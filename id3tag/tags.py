# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import enum
import functools
import threading

from id3tag.errors import *
from id3tag.conversion import Syncsafe

import id3tag.frames as Frames

HEADER_SIZE = 10

class Option(enum.IntFlag):
    "Bits of the tag option mask, controlling how a tag is rendered."
    UNSYNCHRONIZE = 0x0001
    COMPRESS = 0x0002
    CRC = 0x0004
    APPEND = 0x0010
    FILE_ALTERED = 0x0020
    ID3V1 = 0x0100

class Flags(enum.IntFlag):
    "ID3v2 tag header flags."
    UNSYNCHRONISATION = 0x80
    EXTENDED_HEADER = 0x40
    EXPERIMENTAL = 0x20
    FOOTER = 0x10

class ExtendedFlags(enum.IntFlag):
    "ID3v2.4 extended header flags."
    UPDATE = 0x40
    CRC = 0x20
    RESTRICTIONS = 0x10

def query(data):
    """Return the total length of the ID3v2 tag at the start of data,
    or 0 if data does not start with a tag header.

    Only the first HEADER_SIZE bytes are inspected.
    """
    header = bytes(data[:HEADER_SIZE])
    if len(header) < HEADER_SIZE or header[0:3] != b"ID3":
        return 0
    if header[3] not in (2, 3, 4) or header[4] == 0xFF:
        return 0
    if any(b & 0x80 for b in header[6:10]):
        return 0
    length = Syncsafe.decode(header[6:10]) + HEADER_SIZE
    if header[3] == 4 and header[5] & Flags.FOOTER:
        length += HEADER_SIZE
    return length

def _live(method):
    "Refuse to operate on tags whose reference count dropped to zero."
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._frames is None:
            raise TagDestroyed("Tag has been released")
        return method(self, *args, **kwargs)
    return wrapper

class Tag:
    """An ID3v2 tag: header state, rendering options and an ordered list
    of frames.

    Tags are reference counted. A new tag has one reference; ref() adds
    one and unref() drops one, releasing all frames when the count
    reaches zero. The count is updated atomically, but nothing else is
    locked: callers sharing a tag must serialize changes to it.
    """

    default_options = 0
    padding = 0

    def __init__(self):
        self.flags = 0
        self.extended_flags = 0
        self.restrictions = 0
        self._version = (4, 0)
        self._length = 0
        self._options = self.default_options
        self._frames = []
        self._refcount = 1
        self._lock = threading.Lock()

    @property
    def version(self):
        "(major, revision) of the ID3v2 version this tag was read as."
        return self._version

    @property
    def length(self):
        """The declared length hint. Rendering ignores it; the rendered
        length always follows from the actual frame contents."""
        return self._length

    @_live
    def set_length(self, length):
        if type(length) is not int or length < 0:
            raise ValueError("Invalid tag length: {0!r}".format(length))
        self._length = length

    @_live
    def options(self):
        return self._options

    @_live
    def set_options(self, mask, value):
        "Replace the option bits selected by mask; return the new mask."
        self._options = (self._options & ~int(mask)) | (value & mask)
        return self._options

    def _option(self, option):
        return bool(self.options() & option)

    def _set_option(self, option, value):
        self.set_options(option, option if value else 0)

    @property
    def render_v1(self):
        return self._option(Option.ID3V1)

    @render_v1.setter
    def render_v1(self, value):
        self._set_option(Option.ID3V1, value)

    @property
    def append(self):
        return self._option(Option.APPEND)

    @append.setter
    def append(self, value):
        self._set_option(Option.APPEND, value)

    def _flag(self, flag):
        return bool(self.flags & flag)

    def _set_flag(self, flag, value):
        self.flags = (self.flags & ~int(flag)) | (flag if value else 0)

    @property
    def unsynchronised(self):
        return self._flag(Flags.UNSYNCHRONISATION)

    @unsynchronised.setter
    def unsynchronised(self, value):
        self._set_flag(Flags.UNSYNCHRONISATION, value)

    @property
    def has_extended_header(self):
        return self._flag(Flags.EXTENDED_HEADER)

    @has_extended_header.setter
    def has_extended_header(self, value):
        self._set_flag(Flags.EXTENDED_HEADER, value)

    @property
    def experimental(self):
        return self._flag(Flags.EXPERIMENTAL)

    @experimental.setter
    def experimental(self, value):
        self._set_flag(Flags.EXPERIMENTAL, value)

    @property
    def has_footer(self):
        return self._flag(Flags.FOOTER)

    @has_footer.setter
    def has_footer(self, value):
        self._set_flag(Flags.FOOTER, value)

    @property
    def is_update(self):
        return bool(self.extended_flags & ExtendedFlags.UPDATE)

    @is_update.setter
    def is_update(self, value):
        self.extended_flags &= ~int(ExtendedFlags.UPDATE)
        if value:
            self.extended_flags |= ExtendedFlags.UPDATE

    # Frames

    @_live
    def clear(self):
        "Remove and release all frames."
        for frame in self._frames:
            frame._owner = None
        self._frames = []

    @_live
    def attach(self, frame):
        """Append frame, transferring ownership to this tag.

        A frame can only belong to one tag at a time; attaching a frame
        that is already attached (here or elsewhere) raises FrameAttached.
        """
        if not isinstance(frame, Frames.Frame):
            raise TypeError("Not a frame: {0!r}".format(frame))
        if frame._owner is not None:
            raise FrameAttached("Frame {0} is already attached to a tag"
                                .format(frame.frameid))
        try:
            self._frames.append(frame)
        except MemoryError as e:
            raise OutOfMemory("out of memory") from e
        frame._owner = self
        return self

    @_live
    def detach(self, frame):
        "Remove frame and return it; ownership passes back to the caller."
        for i, f in enumerate(self._frames):
            if f is frame:
                del self._frames[i]
                frame._owner = None
                return frame
        raise NotFound("frame not found")

    @_live
    def find(self, frameid=None, index=0):
        """Return the index-th frame with the given id (any id if frameid
        is None), in attachment order, or None if there are fewer."""
        if index < 0:
            return None
        for frame in self._frames:
            if frameid is None or frame.frameid == frameid:
                if index == 0:
                    return frame
                index -= 1
        return None

    @_live
    def frames(self):
        return list(self._frames)

    def __len__(self):
        return len(self.frames())

    def __iter__(self):
        return iter(self.frames())

    def __getitem__(self, key):
        "tag[n] is the n-th frame; tag[id] is the first frame with that id."
        if isinstance(key, tuple):
            frame = self.find(*key)
        elif isinstance(key, int):
            frame = self.find(None, key)
        else:
            frame = self.find(key, 0)
        if frame is None:
            raise KeyError(key)
        return frame

    # Reference counting

    @property
    def refcount(self):
        return self._refcount

    @_live
    def ref(self):
        with self._lock:
            self._refcount += 1
            return self._refcount

    def unref(self):
        with self._lock:
            if self._refcount <= 0:
                raise RefUnderflow("Tag reference count is already zero")
            self._refcount -= 1
            count = self._refcount
        if count == 0:
            self.clear()
            self._frames = None
        return count

    @property
    def released(self):
        return self._frames is None

    # Encoding

    @_live
    def render(self):
        "Encode the tag as ID3v2.4 and return the bytes."
        from id3tag.render import Renderer
        return Renderer(self).render()

    @staticmethod
    def query(data):
        return query(data)

    @staticmethod
    def parse(data):
        "Decode the tag at the start of data."
        from id3tag.parse import parse
        return parse(data)

    def __repr__(self):
        if self.released:
            return "<Tag: released>"
        return "<Tag: ID3v2.{0}.{1} tag with {2} frames>".format(
            self._version[0], self._version[1], len(self._frames))
