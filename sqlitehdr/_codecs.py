''' _codecs.py - conversion of raw header fields into integers and enumerations

Copyright (c) 2022 Netherlands Forensic Institute - MIT License

All multi-byte integers in the database header are stored big-endian.
'''

from collections import namedtuple as _nt
from enum import Enum as _Enum
from bitstring import Bits as _Bits

from ._exceptions import LengthMismatchError
from ._exceptions import InvalidSchemaFormatError
from ._exceptions import InvalidTextEncodingError


############
# integers #
############

def _uintbe(data, size):
    ''' interpret exactly size bytes as big-endian unsigned integer '''

    if len(data) != size:
        raise LengthMismatchError(size, len(data))
    return _Bits(bytes=bytes(data)).uintbe


def uint16(data):
    ''' Returns the big-endian unsigned integer in the given 2-byte slice '''

    return _uintbe(data, 2)


def uint32(data):
    ''' Returns the big-endian unsigned integer in the given 4-byte slice '''

    return _uintbe(data, 4)


################
# enumerations #
################

class FileFormat(_Enum):
    ''' journalling mode indicated by the file format read and write versions

    Versions 1 and 2 are rollback journalling and WAL respectively. A database
    with a read version above 2 can not be read or written, a database with
    only a write version above 2 must be treated as read-only. Neither is a
    malformed header, so every other value maps to Inaccessible.
    '''

    Inaccessible = 0
    Legacy = 1
    WriteAheadLogging = 2


# the decoded version together with the byte it was decoded from
FileFormatVersion = _nt('file_format_version', 'mode version')


class SchemaFormat(_Enum):
    ''' the schema format number at offset 44

    1. understood by all versions of SQLite back to 3.0.0
    2. rows within a table can have a varying number of columns
    3. columns added by ALTER TABLE ... ADD COLUMN can have non-NULL defaults
    4. DESC keyword on indices is respected, boolean serial types 8 and 9
    '''

    Format1 = 1
    Format2 = 2
    Format3 = 3
    Format4 = 4


class TextEncoding(_Enum):
    ''' encoding used for all text strings stored in the database '''

    Utf8 = 1
    Utf16le = 2
    Utf16be = 3

    @property
    def codec(s):
        ''' name of the python codec for this encoding '''

        return {1: 'utf-8', 2: 'utf-16le', 3: 'utf-16be'}[s.value]


class VacuumMode(_Enum):
    ''' mode of a database that contains pointer-map pages '''

    Auto = 0
    Incremental = 1


def file_format(code):
    ''' Returns a FileFormatVersion for the byte at offset 18 or 19. Never fails. '''

    if code in (1, 2):
        return FileFormatVersion(FileFormat(code), code)
    return FileFormatVersion(FileFormat.Inaccessible, code)


def schema_format(code):
    ''' Returns the SchemaFormat for the given number, raises InvalidSchemaFormatError otherwise '''

    try:
        return SchemaFormat(code)
    except ValueError:
        raise InvalidSchemaFormatError(code) from None


def text_encoding(code):
    ''' Returns the TextEncoding for the given number, raises InvalidTextEncodingError otherwise '''

    try:
        return TextEncoding(code)
    except ValueError:
        raise InvalidTextEncodingError(code) from None


def vacuum_mode(flag):
    ''' the integer at offset 64 is true for incremental_vacuum and false for auto_vacuum '''

    if flag != 0:
        return VacuumMode.Incremental
    return VacuumMode.Auto
