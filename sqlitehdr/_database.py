''' _database.py - reading the header of sqlite3 database files

Copyright (c) 2022 Netherlands Forensic Institute - MIT License

Only the first 100 bytes of a database file are read; pages are not parsed.
'''

import logging as _logging
import os.path as _path
from os import fstat as _fstat
from os import stat as _stat

from bitstring import ConstBitStream as _CB

from . import _structures

_log = _logging.getLogger('sqlitehdr')


def _read_prefix(infile):
    ''' Returns (filename, bitstream, filesize) for the first 100 bytes of infile '''

    if isinstance(infile, str):
        filename = _path.abspath(_path.expanduser(infile))
        filesize = _stat(filename).st_size
        with open(filename, 'rb') as f:
            data = f.read(_structures.HEADER_SIZE)
    else:
        filename = getattr(infile, 'name', None)
        if not isinstance(filename, str):
            filename = None
        # the database starts at the current position of the stream
        start = infile.tell()
        data = infile.read(_structures.HEADER_SIZE)
        try:
            filesize = _fstat(infile.fileno()).st_size - start
        except (AttributeError, OSError, ValueError):
            # not backed by a file descriptor, e.g. io.BytesIO
            filesize = None

    _log.debug('read %d header bytes from %s', len(data), filename or '<stream>')
    return filename, _CB(bytes=data), filesize


def read_header(infile):
    ''' Reads and decodes the database header of infile

    infile can be a filepath (string) or an already opened binary file-like
    object, in which case reading starts at its current position.
    '''

    _, btstr, _ = _read_prefix(infile)
    return _structures.dbheader(btstr, offset=0)


class DatabaseFile():
    ''' class representing the header of a SQLite3 database file '''


    def __init__(s, infile):
        ''' open the given file and decode its header

        infile can be filepath (string) or an already opened file-like object.
        For a file-like object the database is taken to start at its current
        position, filesize counts the bytes from there to the end of the file.
        '''

        s.filename, bitstream, s.filesize = _read_prefix(infile)
        s.header = _structures.dbheader(bitstream, offset=0)
        _log.debug('decoded header: pagesize %d, in-header size valid: %s',
                   s.header.page_size, s.header.in_header_size_valid)


    @property
    def externalsize(s):
        ''' size of the database in pages based on the file size, None if unknown '''

        if s.filesize is None:
            return None
        return s.filesize // s.header.page_size


    @property
    def page_count(s):
        ''' number of pages, from the header if valid, otherwise from the file size '''

        if s.header.in_header_size_valid:
            return s.header.in_header_database_size
        return s.externalsize
