# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Frame schema registry: the field layout and description of every
known ID3v2 frame, and the ID3v2.2 to v2.4 frame id translations.
"""

import collections
import types

from id3tag.fields import FieldType

FrameType = collections.namedtuple("FrameType", "description fields")

_ENC = FieldType.TEXTENCODING
_L1 = FieldType.LATIN1
_L1LIST = FieldType.LATIN1LIST
_STR = FieldType.STRING
_FULL = FieldType.STRINGFULL
_LIST = FieldType.STRINGLIST
_LANG = FieldType.LANGUAGE
_FID = FieldType.FRAMEID
_DATE = FieldType.DATE
_I8 = FieldType.INT8
_I16 = FieldType.INT16
_I24 = FieldType.INT24
_I32 = FieldType.INT32
_I32P = FieldType.INT32PLUS
_BIN = FieldType.BINARYDATA

_TEXT = (_ENC, _LIST)
_URL = (_L1,)

_frametypes = {
    # ID3v2.4

    # 4.2.1. Identification frames
    "UFID": ("Unique file identifier", (_L1, _BIN)),
    "TIT1": ("Content group description", _TEXT),
    "TIT2": ("Title/songname/content description", _TEXT),
    "TIT3": ("Subtitle/Description refinement", _TEXT),
    "TALB": ("Album/Movie/Show title", _TEXT),
    "TOAL": ("Original album/movie/show title", _TEXT),
    "TRCK": ("Track number/Position in set", _TEXT),
    "TPOS": ("Part of a set", _TEXT),
    "TSST": ("Set subtitle", _TEXT),
    "TSRC": ("ISRC (international standard recording code)", _TEXT),

    # 4.2.2. Involved persons frames
    "TPE1": ("Lead performer(s)/Soloist(s)", _TEXT),
    "TPE2": ("Band/orchestra/accompaniment", _TEXT),
    "TPE3": ("Conductor/performer refinement", _TEXT),
    "TPE4": ("Interpreted, remixed, or otherwise modified by", _TEXT),
    "TOPE": ("Original artist(s)/performer(s)", _TEXT),
    "TEXT": ("Lyricist/Text writer", _TEXT),
    "TOLY": ("Original lyricist(s)/text writer(s)", _TEXT),
    "TCOM": ("Composer", _TEXT),
    "TMCL": ("Musician credits list", _TEXT),
    "TIPL": ("Involved people list", _TEXT),
    "TENC": ("Encoded by", _TEXT),

    # 4.2.3. Derived and subjective properties frames
    "TBPM": ("BPM (beats per minute)", _TEXT),
    "TLEN": ("Length", _TEXT),
    "TKEY": ("Initial key", _TEXT),
    "TLAN": ("Language(s)", _TEXT),
    "TCON": ("Content type", _TEXT),
    "TFLT": ("File type", _TEXT),
    "TMED": ("Media type", _TEXT),
    "TMOO": ("Mood", _TEXT),

    # 4.2.4. Rights and license frames
    "TCOP": ("Copyright message", _TEXT),
    "TPRO": ("Produced notice", _TEXT),
    "TPUB": ("Publisher", _TEXT),
    "TOWN": ("File owner/licensee", _TEXT),
    "TRSN": ("Internet radio station name", _TEXT),
    "TRSO": ("Internet radio station owner", _TEXT),

    # 4.2.5. Other text frames
    "TOFN": ("Original filename", _TEXT),
    "TDLY": ("Playlist delay", _TEXT),
    "TDEN": ("Encoding time", _TEXT),
    "TDOR": ("Original release time", _TEXT),
    "TDRC": ("Recording time", _TEXT),
    "TDRL": ("Release time", _TEXT),
    "TDTG": ("Tagging time", _TEXT),
    "TSSE": ("Software/Hardware and settings used for encoding", _TEXT),
    "TSOA": ("Album sort order", _TEXT),
    "TSOP": ("Performer sort order", _TEXT),
    "TSOT": ("Title sort order", _TEXT),

    # 4.2.6. User defined information frame
    "TXXX": ("User defined text information frame", (_ENC, _STR, _STR)),

    # 4.3. URL link frames
    "WCOM": ("Commercial information", _URL),
    "WCOP": ("Copyright/Legal information", _URL),
    "WOAF": ("Official audio file webpage", _URL),
    "WOAR": ("Official artist/performer webpage", _URL),
    "WOAS": ("Official audio source webpage", _URL),
    "WORS": ("Official Internet radio station homepage", _URL),
    "WPAY": ("Payment", _URL),
    "WPUB": ("Publishers official webpage", _URL),
    "WXXX": ("User defined URL link frame", (_ENC, _STR, _L1)),

    # 4.4.-4.20
    "MCDI": ("Music CD identifier", (_BIN,)),
    "ETCO": ("Event timing codes", (_I8, _BIN)),
    "MLLT": ("MPEG location lookup table", (_I16, _I24, _I24, _I8, _I8, _BIN)),
    "SYTC": ("Synchronised tempo codes", (_I8, _BIN)),
    "USLT": ("Unsynchronised lyric/text transcription", (_ENC, _LANG, _STR, _FULL)),
    "SYLT": ("Synchronised lyric/text", (_ENC, _LANG, _I8, _I8, _STR, _BIN)),
    "COMM": ("Comments", (_ENC, _LANG, _STR, _FULL)),
    "RVA2": ("Relative volume adjustment (2)", (_L1, _BIN)),
    "EQU2": ("Equalisation (2)", (_I8, _L1, _BIN)),
    "RVRB": ("Reverb", (_I16, _I16) + (_I8,) * 8),
    "APIC": ("Attached picture", (_ENC, _L1, _I8, _STR, _BIN)),
    "GEOB": ("General encapsulated object", (_ENC, _L1, _STR, _STR, _BIN)),
    "PCNT": ("Play counter", (_I32P,)),
    "POPM": ("Popularimeter", (_L1, _I8, _I32P)),
    "RBUF": ("Recommended buffer size", (_I24, _I8, _I32)),
    "AENC": ("Audio encryption", (_L1, _I16, _I16, _BIN)),
    "LINK": ("Linked information", (_FID, _L1, _L1LIST)),
    "POSS": ("Position synchronisation frame", (_I8, _BIN)),
    "USER": ("Terms of use", (_ENC, _LANG, _STR)),
    "OWNE": ("Ownership frame", (_ENC, _L1, _DATE, _STR)),
    "COMR": ("Commercial frame", (_ENC, _L1, _DATE, _L1, _I8, _STR, _STR, _L1, _BIN)),
    "ENCR": ("Encryption method registration", (_L1, _I8, _BIN)),
    "GRID": ("Group identification registration", (_L1, _I8, _BIN)),
    "PRIV": ("Private frame", (_L1, _BIN)),
    "SIGN": ("Signature frame", (_I8, _BIN)),
    "SEEK": ("Seek frame", (_I32,)),
    "ASPI": ("Audio seek point index", (_I32, _I32, _I16, _I8, _BIN)),

    # ID3v2.3
    "TYER": ("Year", _TEXT),
    "TDAT": ("Date", _TEXT),
    "TIME": ("Time", _TEXT),
    "TORY": ("Original release year", _TEXT),
    "TRDA": ("Recording dates", _TEXT),
    "TSIZ": ("Size", _TEXT),
    "IPLS": ("Involved people list", _TEXT),
    "EQUA": ("Equalisation", (_I8, _BIN)),
    "RVAD": ("Relative volume adjustment", (_BIN,)),

    # Nonstandard frames
    "TCMP": ("iTunes: Part of a compilation", _TEXT),
    "TDES": ("iTunes: Podcast description", _TEXT),
    "TGID": ("iTunes: Podcast identifier", _TEXT),
    "TCAT": ("iTunes: Podcast category", _TEXT),
    "TKWD": ("iTunes: Podcast keywords", _TEXT),
    "WFED": ("iTunes: Podcast feed URL", _URL),
    "PCST": ("iTunes: Podcast flag", (_I32,)),

    # Obsolete frames converted from earlier versions
    "ZOBS": ("Obsolete frame", (_FID, _BIN)),
    }

frametypes = types.MappingProxyType(
    {frameid: FrameType(*entry) for frameid, entry in _frametypes.items()})

unknown = FrameType("Unknown frame", (_BIN,))
experimental = FrameType("Experimental frame", (_BIN,))

def lookup(frameid):
    "Return the FrameType registered for frameid, or None."
    return frametypes.get(frameid)

def frametype(frameid):
    """Return the FrameType to use for frameid, falling back to an
    opaque binary layout for ids outside the registry."""
    ft = lookup(frameid)
    if ft is not None:
        return ft
    if frameid[:1] in ("X", "Y", "Z"):
        return experimental
    return unknown

# ID3v2.2 frame ids and their ID3v2.4 equivalents with the same layout.
v22_frames = types.MappingProxyType({
    "UFI": "UFID", "TT1": "TIT1", "TT2": "TIT2", "TT3": "TIT3",
    "TP1": "TPE1", "TP2": "TPE2", "TP3": "TPE3", "TP4": "TPE4",
    "TCM": "TCOM", "TXT": "TEXT", "TLA": "TLAN", "TCO": "TCON",
    "TAL": "TALB", "TPA": "TPOS", "TRK": "TRCK", "TRC": "TSRC",
    "TYE": "TYER", "TDA": "TDAT", "TIM": "TIME", "TRD": "TRDA",
    "TMT": "TMED", "TFT": "TFLT", "TBP": "TBPM", "TCR": "TCOP",
    "TPB": "TPUB", "TEN": "TENC", "TSS": "TSSE", "TOF": "TOFN",
    "TLE": "TLEN", "TSI": "TSIZ", "TDY": "TDLY", "TKE": "TKEY",
    "TOT": "TOAL", "TOA": "TOPE", "TOL": "TOLY", "TOR": "TORY",
    "TXX": "TXXX",
    "WAF": "WOAF", "WAR": "WOAR", "WAS": "WOAS", "WCM": "WCOM",
    "WCP": "WCOP", "WPB": "WPUB", "WXX": "WXXX",
    "IPL": "IPLS", "MCI": "MCDI", "ETC": "ETCO", "MLL": "MLLT",
    "STC": "SYTC", "ULT": "USLT", "SLT": "SYLT", "COM": "COMM",
    "RVA": "RVAD", "EQU": "EQUA", "REV": "RVRB", "PIC": "APIC",
    "GEO": "GEOB", "CNT": "PCNT", "POP": "POPM", "BUF": "RBUF",
    "CRA": "AENC",
    "TCP": "TCMP", "TDS": "TDES", "TID": "TGID", "TCT": "TCAT",
    "TKW": "TKWD", "WFD": "WFED", "PCS": "PCST",
    })
