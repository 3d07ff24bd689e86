# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Decoding ID3v2.2, ID3v2.3 and ID3v2.4 tags."""

import re
import zlib

from warnings import warn

from id3tag.errors import *
from id3tag.conversion import *
from id3tag.tags import Tag, Option, Flags, ExtendedFlags, HEADER_SIZE, query

import id3tag.frames as Frames
import id3tag.schema as schema

_FRAME23_FORMAT_COMPRESSED = 0x0080
_FRAME23_FORMAT_ENCRYPTED = 0x0040
_FRAME23_FORMAT_GROUP = 0x0020
_FRAME23_FORMAT_UNKNOWN_MASK = 0x001F

_FRAME23_STATUS_DISCARD_ON_TAG_ALTER = 0x8000
_FRAME23_STATUS_DISCARD_ON_FILE_ALTER = 0x4000
_FRAME23_STATUS_READ_ONLY = 0x2000
_FRAME23_STATUS_UNKNOWN_MASK = 0x1F00

_FRAME24_FORMAT_UNKNOWN_MASK = 0x00B0
_FRAME24_STATUS_UNKNOWN_MASK = 0x8F00

_EXT23_CRC_PRESENT = 0x8000

def parse(data):
    """Decode the ID3v2 tag at the start of data and return a new Tag.

    Raises MalformedTag if data does not hold a complete, well-formed tag.
    """
    data = bytes(data)
    length = query(data)
    if length == 0:
        raise MalformedTag("ID3v2 tag not found")
    if len(data) < length:
        raise MalformedTag("Truncated tag: {0} bytes declared, {1} present"
                           .format(length, len(data)))
    return _parsers[data[3]](data[:length]).parse()

def _xread(data, length):
    "Split length bytes off data; raise EOFError if data ends sooner."
    if len(data) < length:
        raise EOFError("Unexpected end of tag data")
    return data[:length], data[length:]

def _pic_to_apic(data):
    "Rewrite an ID3v2.2 PIC body into APIC layout."
    if len(data) < 4:
        raise MalformedTag("Truncated PIC frame")
    format = data[1:4].decode("iso-8859-1").strip().upper()
    if format == "JPG":
        mime = "image/jpeg"
    else:
        mime = "image/" + format.lower()
    return data[0:1] + mime.encode("iso-8859-1") + b"\x00" + data[4:]


class Parser:
    """Decodes one tag. Subclasses supply the version-specific header,
    extended header and frame layouts."""
    version = None
    frame_header_size = 10
    _frame_id_pattern = re.compile(b"^[A-Z][A-Z0-9]{2}[A-Z0-9 ]$")

    def __init__(self, data):
        self.data = data
        self.tag = Tag()

    def parse(self):
        try:
            body = self._read_header()
            for frame in self._read_frames(body):
                self.tag.attach(frame)
        except MalformedTag:
            raise
        except (ValueError, EOFError, zlib.error) as e:
            raise MalformedTag(str(e)) from e
        return self.tag

    def _read_header(self):
        "Decode the tag header; returns the tag body."
        header = self.data[:HEADER_SIZE]
        if header[0:3] != b"ID3" or header[3] != self.version:
            raise MalformedTag("ID3v2.{0} header not found".format(self.version))
        self.tag._version = (header[3], header[4])
        self.tag.flags = header[5]
        self.size = Syncsafe.decode(header[6:10])
        return self.data[HEADER_SIZE:HEADER_SIZE + self.size]

    def _check_crc(self, crc, data):
        if crc != crc32(data):
            raise MalformedTag("CRC mismatch: stored 0x{0:08X}, computed 0x{1:08X}"
                               .format(crc, crc32(data)))
        self.tag._options |= Option.CRC

    def _read_frames(self, data):
        "Yield the frames in data, stopping at padding."
        while data:
            if data[0] == 0:
                break # Padding
            header, data = _xread(data, self.frame_header_size)
            frameid, size, bflags = self._read_frame_header(header)
            if size > len(data):
                raise MalformedTag("Frame {0} extends past the end of the tag"
                                   .format(frameid))
            body, data = data[:size], data[size:]
            try:
                yield self._frame_from_data(frameid, bflags, body)
            except MalformedTag:
                raise
            except (ValueError, EOFError, zlib.error) as e:
                raise MalformedTag("Frame {0}: {1}".format(frameid, e)) from e

    def _check_frame_id(self, rawid):
        if not self._frame_id_pattern.match(rawid):
            raise MalformedTag("Invalid frame id {0!r}".format(rawid))
        return rawid.decode("ascii")

    def _translate_v22(self, frameid, data):
        "Map an ID3v2.2 frame to its ID3v2.4 equivalent."
        if frameid == "PIC":
            return "APIC", _pic_to_apic(data)
        newid = schema.v22_frames.get(frameid)
        if newid is None:
            warn("Frame {0} has no ID3v2.4 equivalent; kept as ZOBS".format(frameid),
                 UnknownFrameWarning)
            return "ZOBS", frameid.encode("ascii").ljust(4, b"\x00") + data
        return newid, data

    def _frame_from_data(self, frameid, bflags, data):
        if frameid.endswith(" "):
            # iTunes 8.2 writes v2.2 frame ids padded with a space
            # when it converts tags to v2.3/v2.4.
            frameid, data = self._translate_v22(frameid[:3], data)
        (flags, group, encryption, data_length, data) = \
            self._interpret_frame_flags(frameid, bflags, data)
        if flags & Frames.ENCRYPTED:
            frame = Frames.Frame(frameid, flags=flags)
            frame.encoded = data
            frame.encryption = encryption
            frame.data_length = data_length
        else:
            frame = Frames.Frame._from_data(frameid, data, flags)
        frame.group = group
        return frame

    def _read_frame_header(self, header):
        "Returns (frameid, size, flags)."
        raise NotImplementedError

    def _interpret_frame_flags(self, frameid, bflags, data):
        """Undo frame-level transformations.
        Returns (flags, group, encryption, data_length, data), with flags
        translated to ID3v2.4 layout."""
        raise NotImplementedError


class Parser22(Parser):
    version = 2
    frame_header_size = 6
    _frame_id_pattern = re.compile(b"^[A-Z][A-Z0-9]{2}$")

    def _read_header(self):
        data = super()._read_header()
        flags = self.tag.flags
        if flags & 0x40: # Compression bit is ill-defined in standard
            raise MalformedTag("ID3v2.2 tag compression is not supported")
        if flags & 0x3F:
            warn("Unknown ID3v2.2 flags: 0x{0:02X}".format(flags), TagWarning)
        if flags & Flags.UNSYNCHRONISATION:
            self.tag._options |= Option.UNSYNCHRONIZE
            data = Unsync.decode(data)
        return data

    def _read_frame_header(self, header):
        frameid = self._check_frame_id(header[0:3])
        return (frameid, Int8.decode(header[3:6]), 0)

    def _frame_from_data(self, frameid, bflags, data):
        frameid, data = self._translate_v22(frameid, data)
        return Frames.Frame._from_data(frameid, data)


class Parser23(Parser):
    version = 3

    def _read_header(self):
        data = super()._read_header()
        flags = self.tag.flags
        if flags & 0x1F:
            warn("Unknown ID3v2.3 flags: 0x{0:02X}".format(flags), TagWarning)
        if flags & Flags.UNSYNCHRONISATION:
            self.tag._options |= Option.UNSYNCHRONIZE
            data = Unsync.decode(data)
        if flags & Flags.EXTENDED_HEADER:
            data = self._read_extended_header(data)
        return data

    def _read_extended_header(self, data):
        size, data = _xread(data, 4)
        size = Int8.decode(size)
        if size not in (6, 10):
            warn("Unexpected size of ID3v2.3 extended header: {0}".format(size),
                 TagWarning)
        ext, data = _xread(data, size)
        if len(ext) < 6:
            raise MalformedTag("ID3v2.3 extended header too short")
        ext_flags = Int8.decode(ext[0:2])
        padding = Int8.decode(ext[2:6])
        if padding > len(data):
            raise MalformedTag("ID3v2.3 padding size exceeds tag size")
        frames = data[:len(data) - padding]
        if ext_flags & _EXT23_CRC_PRESENT:
            if len(ext) < 10:
                raise MalformedTag("ID3v2.3 extended header has no room for CRC")
            self.tag.extended_flags |= ExtendedFlags.CRC
            self._check_crc(Int8.decode(ext[6:10]), frames)
        return frames

    def _read_frame_header(self, header):
        frameid = self._check_frame_id(header[0:4])
        return (frameid, Int8.decode(header[4:8]), Int8.decode(header[8:10]))

    def _interpret_frame_flags(self, frameid, bflags, data):
        flags = 0
        group = encryption = data_length = None
        if bflags & _FRAME23_FORMAT_UNKNOWN_MASK:
            raise MalformedTag("Invalid ID3v2.3 frame encoding flags on {0}: 0x{1:04X}"
                               .format(frameid, bflags))
        if bflags & _FRAME23_FORMAT_COMPRESSED:
            size, data = _xread(data, 4)
            data_length = Int8.decode(size)
        if bflags & _FRAME23_FORMAT_ENCRYPTED:
            flags |= Frames.ENCRYPTED
            encryption, data = _xread(data, 1)
            encryption = encryption[0]
        if bflags & _FRAME23_FORMAT_GROUP:
            flags |= Frames.GROUPING
            group, data = _xread(data, 1)
            group = group[0]
        if bflags & _FRAME23_FORMAT_COMPRESSED:
            self.tag._options |= Option.COMPRESS
            if flags & Frames.ENCRYPTED:
                flags |= Frames.COMPRESSED | Frames.DATA_LENGTH_INDICATOR
            else:
                data = zlib.decompress(data)
                if len(data) != data_length:
                    warn("Frame {0} decompressed to {1} bytes, expected {2}"
                         .format(frameid, len(data), data_length), FrameWarning)
        # Frame status messages
        if bflags & _FRAME23_STATUS_DISCARD_ON_TAG_ALTER:
            flags |= Frames.DISCARD_ON_TAG_ALTER
        if bflags & _FRAME23_STATUS_DISCARD_ON_FILE_ALTER:
            flags |= Frames.DISCARD_ON_FILE_ALTER
        if bflags & _FRAME23_STATUS_READ_ONLY:
            flags |= Frames.READ_ONLY
        if bflags & _FRAME23_STATUS_UNKNOWN_MASK:
            warn("Unexpected status flags on {0} frame: 0x{1:04X}".format(frameid, bflags),
                 FrameWarning)
        return (flags, group, encryption, data_length, data)


class Parser24(Parser):
    version = 4
    ITUNES_WORKAROUND = False

    def _read_header(self):
        data = super()._read_header()
        flags = self.tag.flags
        if flags & 0x0F:
            warn("Unknown ID3v2.4 flags: 0x{0:02X}".format(flags), TagWarning)
        if flags & Flags.UNSYNCHRONISATION:
            self.tag._options |= Option.UNSYNCHRONIZE
        if flags & Flags.FOOTER:
            footer = self.data[HEADER_SIZE + self.size:]
            if footer[0:3] != b"3DI" or footer[3:10] != self.data[3:10]:
                raise MalformedTag("ID3v2.4 footer does not match header")
            self.tag._options |= Option.APPEND
        if flags & Flags.EXTENDED_HEADER:
            data = self._read_extended_header(data)
        return data

    def _read_extended_header_flag_data(self, data):
        # 1-byte length + data
        length, data = _xread(data, 1)
        if length[0] & 128:
            raise MalformedTag("Invalid size of extended header field")
        return _xread(data, length[0])

    def _read_extended_header(self, data):
        size = Syncsafe.decode(data[0:4])
        if size < 6:
            raise MalformedTag("Invalid size of ID3v2.4 extended header: {0}".format(size))
        ext, data = _xread(data, size)
        numflags = ext[4]
        if numflags != 1:
            warn("Unexpected number of ID3v2.4 extended flag bytes: {0}".format(numflags),
                 TagWarning)
        ext_flags = ext[5]
        ext = ext[5 + numflags:]
        self.tag.extended_flags = ext_flags
        if ext_flags & ExtendedFlags.UPDATE:
            (dummy, ext) = self._read_extended_header_flag_data(ext)
        if ext_flags & ExtendedFlags.CRC:
            (crc, ext) = self._read_extended_header_flag_data(ext)
            self._check_crc(Syncsafe.decode(crc), data)
        if ext_flags & ExtendedFlags.RESTRICTIONS:
            (restrictions, ext) = self._read_extended_header_flag_data(ext)
            self.tag.restrictions = restrictions[0] if restrictions else 0
        return data

    def _read_frame_header(self, header):
        frameid = self._check_frame_id(header[0:4])
        if self.ITUNES_WORKAROUND:
            # Work around iTunes frame size encoding bug.
            # Older versions of iTunes stored frame sizes as
            # straight 8bit integers, not syncsafe.
            # (This is known to be fixed in iTunes 8.2.)
            size = Int8.decode(header[4:8])
        else:
            size = Syncsafe.decode(header[4:8])
        return (frameid, size, Int8.decode(header[8:10]))

    def _interpret_frame_flags(self, frameid, bflags, data):
        group = encryption = data_length = None
        if bflags & _FRAME24_FORMAT_UNKNOWN_MASK:
            raise MalformedTag("Unknown ID3v2.4 frame encoding flags on {0}: 0x{1:04X}"
                               .format(frameid, bflags))
        if bflags & _FRAME24_STATUS_UNKNOWN_MASK:
            warn("Unexpected status flags on {0} frame: 0x{1:04X}".format(frameid, bflags),
                 FrameWarning)
        flags = bflags & (Frames.STATUS_MASK | Frames.GROUPING | Frames.ENCRYPTED)
        if bflags & Frames.UNSYNCHRONISED or self.tag.flags & Flags.UNSYNCHRONISATION:
            data = Unsync.decode(data)
        if bflags & Frames.GROUPING:
            group, data = _xread(data, 1)
            group = group[0]
        if bflags & Frames.ENCRYPTED:
            encryption, data = _xread(data, 1)
            encryption = encryption[0]
        if bflags & Frames.DATA_LENGTH_INDICATOR:
            size, data = _xread(data, 4)
            data_length = Syncsafe.decode(size)
        if bflags & Frames.COMPRESSED:
            self.tag._options |= Option.COMPRESS
            if bflags & Frames.ENCRYPTED:
                flags |= Frames.COMPRESSED
            else:
                data = zlib.decompress(data)
                if data_length is not None and len(data) != data_length:
                    warn("Frame {0} decompressed to {1} bytes, expected {2}"
                         .format(frameid, len(data), data_length), FrameWarning)
        if flags & Frames.ENCRYPTED and data_length is not None:
            flags |= Frames.DATA_LENGTH_INDICATOR
        return (flags, group, encryption, data_length, data)


_parsers = {
    2: Parser22,
    3: Parser23,
    4: Parser24,
    }
