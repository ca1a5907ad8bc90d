''' _structures - the database header structure of the SQLite3 file format

Copyright (c) 2022 Netherlands Forensic Institute - MIT License

The implementation of the structures and the logic is based on the description
of the database format as given on: https://www.sqlite.org/fileformat.html
'''

from collections import namedtuple as _nt
from bitstring import Bits as _Bits
from bitstring import ConstBitStream as _CB
from bitstring import pack as _pack

from . import _exceptions
from ._codecs import uint16 as _uint16
from ._codecs import uint32 as _uint32
from ._codecs import file_format as _file_format
from ._codecs import schema_format as _schema_format
from ._codecs import text_encoding as _text_encoding
from ._codecs import vacuum_mode as _vacuum_mode
from ._codecs import FileFormat


# the C string "SQLite format 3\000"
MAGIC_HEADER_STRING = b'SQLite format 3\x00'

HEADER_SIZE = 100

# (offset, required value) of the maximum embedded, minimum embedded and leaf
# payload fractions
_PAYLOAD_FRACTIONS = ((21, 64), (22, 32), (23, 32))

# the region reserved for expansion
_RESERVED_OFFSET = 72
_RESERVED_SIZE = 20


#####################
# header components #
#####################

PayloadFraction = _nt('payload_fraction', 'maximum_embedded minimum_embedded leaf')

# page_index is the first freelist trunk page, zero if the freelist is empty
Freelist = _nt('freelist', 'page_index count')

Schema = _nt('schema', 'cookie format')

# only present when the database contains pointer-map pages, flag is the
# integer at offset 64 as stored
Vacuum = _nt('vacuum', 'largest_root_btree_page mode flag')

LastUpdate = _nt('last_update', 'sqlite_version_number version_valid_for')


###################
# database header #
###################

_dbheader = _nt('database_header', 'magic_header_string page_size '
                'file_format_write_version file_format_read_version '
                'reserved_bytes_per_page payload_fraction file_change_counter '
                'in_header_database_size freelist schema '
                'default_page_cache_size database_text_encoding user_version '
                'vacuum application_id reserved last_update')


class Header(_dbheader):
    ''' The decoded 100-byte database header.

    A Header contains the following fields:

        - magic_header_string: The header string 'SQLite format 3[0x00]'
        - page_size: The database page size in bytes, 512 through 65536.
        - file_format_write_version: file_format_version for offset 18.
        - file_format_read_version: file_format_version for offset 19.
        - reserved_bytes_per_page: Bytes of unused "reserved" space at the
           end of each page. Usually 0.
        - payload_fraction: maximum embedded, minimum embedded and leaf
           payload fractions. Always 64, 32 and 32.
        - file_change_counter: File change counter. Note: the change counter
           might not be incremented on each transaction in WAL mode.
        - in_header_database_size: Size of the database file in pages. Only
           trustworthy when in_header_size_valid is True.
        - freelist: first freelist trunk page and total number of freelist pages.
        - schema: The schema cookie and the SchemaFormat.
        - default_page_cache_size: Default page cache size as stored, see
           suggested_cache_size.
        - database_text_encoding: The TextEncoding of the database.
        - user_version: The "user version" as read and set by the user_version
           pragma. Not used by SQLite internally.
        - vacuum: None, or the largest root b-tree page, the VacuumMode and the
           stored incremental-vacuum flag when the database is in auto- or
           incremental vacuum mode.
        - application_id: The "Application ID" set by PRAGMA application_id.
        - reserved: 20 bytes reserved for expansion. Always zero.
        - last_update: SQLITE_VERSION_NUMBER of the library that most recently
           modified the file, and the change counter value it was stored at.
    '''

    __slots__ = ()

    @property
    def version_valid_for_number(s):
        return s.last_update.version_valid_for

    @property
    def sqlite_version_number(s):
        return s.last_update.sqlite_version_number

    @property
    def usable_page_size(s):
        ''' page size minus the reserved space at the end of each page

        The file format requires this to be at least 480, which is not checked.
        '''

        return s.page_size - s.reserved_bytes_per_page

    @property
    def in_header_size_valid(s):
        ''' The 'in header database size' is only valid if it is nonzero
        and if the filechange counter matches the validfor number. '''

        if s.in_header_database_size == 0:
            return False
        return s.file_change_counter == s.last_update.version_valid_for

    @property
    def suggested_cache_size(s):
        ''' the absolute value of the signed integer at offset 48 '''

        return abs(_Bits(uintbe=s.default_page_cache_size, length=32).intbe)

    @property
    def wal_mode(s):
        return (s.file_format_write_version.mode is FileFormat.WriteAheadLogging and
                s.file_format_read_version.mode is FileFormat.WriteAheadLogging)

    def tobytes(s):
        ''' Returns the 100 bytes this header is stored as '''

        return encode_header(s)


def _pagesize(raw):
    ''' page size for the 2-byte value at offset 16; raw value 1 means 65536 '''

    pagesize = raw
    if raw == 1:
        pagesize = 65536
    if pagesize < 512 or pagesize > 65536 or pagesize & (pagesize - 1) != 0:
        raise _exceptions.InvalidPageSizeError(raw)
    return pagesize


def _vacuum(largestrootbtreepage, incrementalvacuum):
    ''' Combines the integers at offsets 52 and 64 into a Vacuum or None

    If the integer at offset 52 is zero, pointer-map pages are omitted and
    neither auto_vacuum nor incremental_vacuum are supported, in which case
    the integer at offset 64 must also be zero.
    '''

    if largestrootbtreepage == 0:
        if incrementalvacuum != 0:
            raise _exceptions.InconsistentVacuumStateError(largestrootbtreepage,
                                                           incrementalvacuum)
        return None
    return Vacuum(largestrootbtreepage, _vacuum_mode(incrementalvacuum), incrementalvacuum)


def _check_reserved(reserved):
    ''' all bytes in the region reserved for expansion must be zero '''

    for i, value in enumerate(reserved):
        if value != 0:
            raise _exceptions.ReservedBytesNotZeroError(_RESERVED_OFFSET + i, value)


def dbheader(btstr, offset=0):
    ''' Parses the database header at given offset in bitstream.

    Only the 100 header bytes are read, the bitstream may be longer. The
    header string is checked before anything else is read. The bytepos of the
    bitstream is restored afterwards.

    Raises LengthMismatchError when the bitstream holds less than 100 bytes
    from offset, or one of the InvalidHeaderError subclasses when a field
    violates the file format. See Header for the returned fields.
    '''

    available = btstr.len // 8 - offset
    if available < len(MAGIC_HEADER_STRING):
        raise _exceptions.LengthMismatchError(HEADER_SIZE, available, offset)

    # remember current position and read the bytes
    storepos = btstr.bytepos
    btstr.bytepos = offset
    try:
        headerstring = btstr.read('bytes:16')
        if headerstring != MAGIC_HEADER_STRING:
            raise _exceptions.InvalidMagicHeaderError(headerstring)
        if available < HEADER_SIZE:
            raise _exceptions.LengthMismatchError(HEADER_SIZE, available, offset)

        pagesize = _uint16(btstr.read('bytes:2'))
        writeversion, readversion = btstr.readlist('uint:8, uint:8')
        reservedspace = btstr.read('uint:8')
        fractions = btstr.readlist('uint:8, uint:8, uint:8')
        filechangecounter = _uint32(btstr.read('bytes:4'))
        dbsize = _uint32(btstr.read('bytes:4'))
        firstfreelisttrunkpage = _uint32(btstr.read('bytes:4'))
        totalfreelistpages = _uint32(btstr.read('bytes:4'))
        schemacookie = _uint32(btstr.read('bytes:4'))
        schemaformat = _uint32(btstr.read('bytes:4'))
        defaultpagecachesize = _uint32(btstr.read('bytes:4'))
        largestrootbtreepage = _uint32(btstr.read('bytes:4'))
        textencoding = _uint32(btstr.read('bytes:4'))
        userversion = _uint32(btstr.read('bytes:4'))
        incrementalvacuum = _uint32(btstr.read('bytes:4'))
        applicationid = _uint32(btstr.read('bytes:4'))
        reserved = btstr.read('bytes:{:d}'.format(_RESERVED_SIZE))
        validfor = _uint32(btstr.read('bytes:4'))
        version = _uint32(btstr.read('bytes:4'))
    finally:
        # after reading, reset pointer
        btstr.bytepos = storepos

    # validation
    pagesize = _pagesize(pagesize)
    for (fractionoffset, expected), actual in zip(_PAYLOAD_FRACTIONS, fractions):
        if actual != expected:
            raise _exceptions.InvalidPayloadFractionError(fractionoffset, expected, actual)
    schemaformat = _schema_format(schemaformat)
    textencoding = _text_encoding(textencoding)

    # cross-field consistency, once all fields are extracted
    vacuum = _vacuum(largestrootbtreepage, incrementalvacuum)
    _check_reserved(reserved)

    return Header(headerstring, pagesize,
                  _file_format(writeversion), _file_format(readversion),
                  reservedspace, PayloadFraction(*fractions),
                  filechangecounter, dbsize,
                  Freelist(firstfreelisttrunkpage, totalfreelistpages),
                  Schema(schemacookie, schemaformat),
                  defaultpagecachesize, textencoding, userversion, vacuum,
                  applicationid, reserved, LastUpdate(version, validfor))


def decode_header(data):
    ''' Decodes the first 100 bytes of data (bytes-like or bitstream) as Header '''

    if isinstance(data, _CB):
        return dbheader(data, offset=0)
    if isinstance(data, _Bits):
        return dbheader(_CB(data), offset=0)
    return dbheader(_CB(bytes=bytes(data)), offset=0)


def encode_header(header):
    ''' Packs the given Header into its 100 canonical bytes.

    A page size of 65536 is stored as 1.
    '''

    pagesize = header.page_size
    if pagesize == 65536:
        pagesize = 1

    largestrootbtreepage, incrementalvacuum = 0, 0
    if header.vacuum is not None:
        largestrootbtreepage = header.vacuum.largest_root_btree_page
        incrementalvacuum = header.vacuum.flag

    fmt = ('bytes:16, uintbe:16, uint:8, uint:8, uint:8, uint:8, uint:8, uint:8, ' +
           ', '.join(['uintbe:32'] * 12) +
           ', bytes:{:d}, uintbe:32, uintbe:32'.format(_RESERVED_SIZE))

    btstr = _pack(fmt, header.magic_header_string, pagesize,
                  header.file_format_write_version.version,
                  header.file_format_read_version.version,
                  header.reserved_bytes_per_page,
                  header.payload_fraction.maximum_embedded,
                  header.payload_fraction.minimum_embedded,
                  header.payload_fraction.leaf,
                  header.file_change_counter, header.in_header_database_size,
                  header.freelist.page_index, header.freelist.count,
                  header.schema.cookie, header.schema.format.value,
                  header.default_page_cache_size, largestrootbtreepage,
                  header.database_text_encoding.value, header.user_version,
                  incrementalvacuum, header.application_id, header.reserved,
                  header.last_update.version_valid_for,
                  header.last_update.sqlite_version_number)
    return btstr.bytes
