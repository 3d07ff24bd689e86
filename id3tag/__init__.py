# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import id3tag.conversion
import id3tag.fields
import id3tag.frames
import id3tag.schema
import id3tag.tags

from id3tag.errors import *
from id3tag.conversion import Encoding
from id3tag.fields import Field, FieldType
from id3tag.frames import Frame
from id3tag.tags import Tag, Option, Flags, ExtendedFlags, query
from id3tag.parse import parse
from id3tag.render import Renderer

version = (0, 1, 0)
versionstr = ".".join((str(v) for v in version))

def render(tag):
    "Encode tag as an ID3v2.4 byte string."
    return tag.render()
