''' _exceptions.py - module specific exceptions

Copyright (c) 2022 Netherlands Forensic Institute - MIT License
'''

class HeaderException(Exception):
    ''' base class for all exceptions raised while decoding a database header '''
    pass


class LengthMismatchError(HeaderException):
    ''' raised when a buffer or field slice does not have the required length

    This signals a malformed buffer, as opposed to a well-formed but
    semantically invalid header (see InvalidHeaderError).
    '''

    def __init__(s, expected, actual, offset=None):
        s.expected = expected
        s.actual = actual
        s.offset = offset
        if offset is None:
            msg = 'expected {:d} bytes, got {:d}'.format(expected, actual)
        else:
            msg = 'expected {:d} bytes at offset {:d}, got {:d}'.format(expected, offset, actual)
        super().__init__(msg)


class InvalidHeaderError(HeaderException, ValueError):
    ''' raised when a header field holds a value that the file format forbids '''

    # byte offset of the offending field within the header
    offset = None


class InvalidMagicHeaderError(InvalidHeaderError):
    ''' raised when the first 16 bytes are not the SQLite3 header string '''

    offset = 0

    def __init__(s, actual):
        s.actual = bytes(actual)
        super().__init__("expected 'SQLite format 3\\x00', found {!r}".format(s.actual))


class InvalidPageSizeError(InvalidHeaderError):
    ''' raised when the page size is not a power of two between 512 and 65536 '''

    offset = 16

    def __init__(s, value):
        s.value = value
        super().__init__('pagesize must be a power of two between 512 and 32768 '
                         'inclusive or the value 1 to represent page size of '
                         '65536, found {:d}'.format(value))


class InvalidPayloadFractionError(InvalidHeaderError):
    ''' raised when one of the three payload fraction bytes is not its fixed value '''

    def __init__(s, offset, expected, actual):
        s.offset = offset
        s.expected = expected
        s.actual = actual
        super().__init__('payload fraction at offset {:d} must be {:d}, found {:d}'.format(
                         offset, expected, actual))


class InvalidSchemaFormatError(InvalidHeaderError):
    ''' raised when the schema format number is not 1, 2, 3 or 4 '''

    offset = 44

    def __init__(s, value):
        s.value = value
        super().__init__('supported schema formats are 1,2,3,4, found {:d}'.format(value))


class InvalidTextEncodingError(InvalidHeaderError):
    ''' raised when the text encoding is not 1 (utf-8), 2 (utf-16le) or 3 (utf-16be) '''

    offset = 56

    def __init__(s, value):
        s.value = value
        super().__init__('text encoding must be 1, 2 or 3, found {:d}'.format(value))


class InconsistentVacuumStateError(InvalidHeaderError):
    ''' raised when the incremental-vacuum flag is set without a largest root b-tree page '''

    offset = 64

    def __init__(s, largest_root_btree_page, incremental_vacuum):
        s.largest_root_btree_page = largest_root_btree_page
        s.incremental_vacuum = incremental_vacuum
        super().__init__('largest root b-tree page is {:d} but incremental-vacuum '
                         'flag is {:d}'.format(largest_root_btree_page, incremental_vacuum))


class ReservedBytesNotZeroError(InvalidHeaderError):
    ''' raised when the region reserved for expansion contains a non-zero byte '''

    def __init__(s, offset, value):
        s.offset = offset
        s.value = value
        super().__init__('space used for expansion should be zero, found 0x{:02x} '
                         'at offset {:d}'.format(value, offset))
