# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

class Error(Exception): pass

class Warning(Error, UserWarning): pass

class TagWarning(Warning): pass
class FrameWarning(Warning): pass
class UnknownFrameWarning(FrameWarning): pass

class TagError(Error, ValueError): pass
class MalformedTag(TagError): pass

class InvalidFrameId(Error, ValueError): pass
class InvalidEncoding(Error, ValueError): pass
class FormatViolation(Error, ValueError): pass
class ConversionFailed(Error, ValueError): pass
class InvalidLanguageCode(Error, ValueError): pass
class IntegerRangeError(Error, ValueError): pass

class IndexOutOfRange(Error, IndexError): pass
class NotFound(Error, LookupError): pass
class OutOfMemory(Error, MemoryError): pass
class FieldNotImplemented(Error, NotImplementedError): pass

class FrameAttached(Error, ValueError): pass
class RefUnderflow(Error, RuntimeError): pass
class TagDestroyed(Error, RuntimeError): pass
