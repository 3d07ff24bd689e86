# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Encoding tags in ID3v2.4 format."""

import zlib

from id3tag.errors import *
from id3tag.conversion import *
from id3tag.tags import Option, Flags, ExtendedFlags, HEADER_SIZE

import id3tag.frames as Frames

class Renderer:
    """Encodes a Tag according to its option mask.

    Rendering is done in two passes: every frame is encoded first, so the
    exact size of the result is known before the output buffer is
    allocated and filled.
    """
    def __init__(self, tag):
        self.tag = tag
        self.options = tag.options()

    def render(self):
        tag = self.tag
        options = self.options

        chunks = []
        unsynchronised = False
        for frame in tag.frames():
            if self._discarded(frame):
                continue
            data, unsynced = self._encode_frame(frame)
            unsynchronised |= unsynced
            chunks.append(data)
        if not options & Option.APPEND and tag.padding:
            chunks.append(b"\x00" * tag.padding)

        flags = tag.flags & Flags.EXPERIMENTAL
        if unsynchronised:
            flags |= Flags.UNSYNCHRONISATION
        if options & Option.APPEND:
            flags |= Flags.FOOTER
        extended = self._encode_extended_header(chunks)
        if extended:
            flags |= Flags.EXTENDED_HEADER
            chunks.insert(0, extended)

        size = sum(len(chunk) for chunk in chunks)
        try:
            header = b"ID3\x04\x00" + bytes([flags]) + Syncsafe.encode(size, width=4)
        except ValueError as e:
            raise TagError("Tag too large: {0} bytes".format(size)) from e
        chunks.insert(0, header)
        if options & Option.APPEND:
            chunks.append(b"3DI" + header[3:])

        try:
            data = bytearray(sum(len(chunk) for chunk in chunks))
        except MemoryError as e:
            raise OutOfMemory("out of memory") from e
        pos = 0
        for chunk in chunks:
            data[pos:pos + len(chunk)] = chunk
            pos += len(chunk)
        return bytes(data)

    def _discarded(self, frame):
        if frame.flags & Frames.DISCARD_ON_TAG_ALTER:
            return True
        return bool(self.options & Option.FILE_ALTERED
                    and frame.flags & Frames.DISCARD_ON_FILE_ALTER)

    def _encode_extended_header(self, chunks):
        ext_flags = self.tag.extended_flags & (ExtendedFlags.UPDATE | ExtendedFlags.RESTRICTIONS)
        if self.options & Option.CRC:
            ext_flags |= ExtendedFlags.CRC
        if not ext_flags:
            return b""
        data = bytearray()
        if ext_flags & ExtendedFlags.UPDATE:
            data.append(0)
        if ext_flags & ExtendedFlags.CRC:
            crc = crc32(b"".join(chunks))
            data.append(5)
            data.extend(Syncsafe.encode(crc, width=5))
        if ext_flags & ExtendedFlags.RESTRICTIONS:
            data.append(1)
            data.append(self.tag.restrictions)
        return Syncsafe.encode(6 + len(data), width=4) + bytes([1, ext_flags]) + data

    def _encode_frame(self, frame):
        """Returns the encoded frame and whether unsynchronisation
        changed it."""
        flags = frame.flags & (Frames.STATUS_MASK | Frames.ENCRYPTED)
        group = b""
        if frame.group is not None:
            flags |= Frames.GROUPING
            group = bytes([frame.group])

        if frame.encoded is not None:
            # Encrypted payloads are written back exactly as they were read.
            flags |= frame.flags & (Frames.COMPRESSED | Frames.DATA_LENGTH_INDICATOR)
            info = group + bytes([frame.encryption])
            if frame.data_length is not None:
                info += Syncsafe.encode(frame.data_length, width=4)
            body = info + frame.encoded
            origlen = None
        else:
            data = frame._to_data()
            origlen = len(data)
            if self.options & Option.COMPRESS:
                data = zlib.compress(data)
                flags |= Frames.COMPRESSED | Frames.DATA_LENGTH_INDICATOR
            def assemble(dli):
                if dli:
                    return group + Syncsafe.encode(origlen, width=4) + data
                return group + data
            body = assemble(flags & Frames.DATA_LENGTH_INDICATOR)

        unsynced = False
        if self.options & Option.UNSYNCHRONIZE:
            if origlen is not None and not flags & Frames.DATA_LENGTH_INDICATOR:
                # Unsynchronised frames carry a data length indicator;
                # decide on the form that includes it.
                candidate = assemble(True)
            else:
                candidate = body
            encoded = Unsync.encode(candidate)
            if encoded != candidate:
                body = encoded
                unsynced = True
                flags |= Frames.UNSYNCHRONISED
                if origlen is not None:
                    flags |= Frames.DATA_LENGTH_INDICATOR
            elif Unsync.encode(body) != body:
                body = candidate
                flags |= Frames.DATA_LENGTH_INDICATOR

        try:
            size = Syncsafe.encode(len(body), width=4)
        except ValueError as e:
            raise TagError("Frame {0} too large".format(frame.frameid)) from e
        header = frame.frameid.encode("ascii") + size + Int8.encode(flags, width=2)
        assert len(header) == 10
        return header + body, unsynced
