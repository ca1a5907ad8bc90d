#!/usr/bin/env python3

''' _cmdline.py - minimal commandline interface for sqlitehdr

Copyright (c) 2022 Netherlands Forensic Institute - MIT License
'''

import sys as _sys
import json as _json
import logging as _logging
import argparse as _argparse
from os import path as _path

from ._database import DatabaseFile
from ._codecs import FileFormat
from . import _exceptions

_log = _logging.getLogger('sqlitehdr')

_fileformat_names = {
    FileFormat.Legacy: 'legacy',
    FileFormat.WriteAheadLogging: 'Write-Ahead Logging',
    FileFormat.Inaccessible: 'inaccessible',
    }


def _parser():
    ''' argument parser '''

    parser = _argparse.ArgumentParser(
        prog='sqlitehdr',
        formatter_class = _argparse.RawDescriptionHelpFormatter,
        description = 'SQLite3 database header decoder. ',
        epilog = 'Example usage: \n' +\
                 ' sqlitehdr info database.db\n' +\
                 ' sqlitehdr info --json database.db\n' +\
                 ' sqlitehdr check database.db\n' +\
                 '\n'
        )

    parser.add_argument('--version', help='print version and exit', action='store_true',
                        default=False)
    parser.add_argument('--verbose', help='enable debug logging', action='store_true',
                        default=False)

    subparsers = parser.add_subparsers(help='sub-command help')

    info = subparsers.add_parser('info', help='show the fields of the database header')
    info.add_argument('dbfile', metavar='DBFILE', help='main database file')
    info.add_argument('--json', action='store_true', help='print header as json object')
    info.set_defaults(command='info')

    check = subparsers.add_parser('check', help='validate the database header')
    check.add_argument('dbfile', metavar='DBFILE', help='main database file')
    check.set_defaults(command='check')

    return parser


def main(argv=None):
    ''' entry point '''

    parser = _parser()
    args = parser.parse_args(argv)

    if args.verbose is True:
        _logging.basicConfig(level=_logging.DEBUG,
                             format='%(asctime)s - %(levelname)s - %(message)s')

    command = getattr(args, 'command', None)
    if command == 'info':
        info(args)
    elif command == 'check':
        check(args)
    elif args.version is True:
        version()
    else:
        parser.print_help()


def header_fields(header):
    ''' Returns a list of (label, value) tuples for all fields of the header '''

    if header.vacuum is None:
        largest, vacuummode = 0, None
    else:
        largest, vacuummode = header.vacuum.largest_root_btree_page, header.vacuum.mode.name

    return [
        ('magic header string', header.magic_header_string.decode('utf-8').rstrip('\x00')),
        ('page size', header.page_size),
        ('file format write version', _fileformat_names[header.file_format_write_version.mode]),
        ('file format read version', _fileformat_names[header.file_format_read_version.mode]),
        ('reserved bytes per page', header.reserved_bytes_per_page),
        ('maximum embedded payload fraction', header.payload_fraction.maximum_embedded),
        ('minimum embedded payload fraction', header.payload_fraction.minimum_embedded),
        ('leaf payload fraction', header.payload_fraction.leaf),
        ('file change counter', header.file_change_counter),
        ('in-header database size', header.in_header_database_size),
        ('in-header database size valid', header.in_header_size_valid),
        ('freelist page index', header.freelist.page_index),
        ('freelist count', header.freelist.count),
        ('schema cookie', header.schema.cookie),
        ('schema format', header.schema.format.value),
        ('default page cache size', header.default_page_cache_size),
        ('suggested cache size', header.suggested_cache_size),
        ('largest root b-tree page', largest),
        ('database text encoding', header.database_text_encoding.codec),
        ('user version', header.user_version),
        ('vacuum mode', vacuummode),
        ('application id', header.application_id),
        ('version valid for number', header.last_update.version_valid_for),
        ('sqlite version number', header.last_update.sqlite_version_number),
        ]


def _open(dbfile):
    ''' decode the header of dbfile, exit with status 1 if it is invalid '''

    try:
        return DatabaseFile(dbfile)
    except _exceptions.HeaderException as e:
        _log.debug('header of %s rejected: %r', dbfile, e)
        print('{}: {}'.format(dbfile, e), file=_sys.stderr)
        _sys.exit(1)


def info(args):
    ''' Print the database header and exit. '''

    db = _open(args.dbfile)
    fields = header_fields(db.header)

    if args.json is True:
        print(_json.dumps({label.replace(' ', '_').replace('-', '_'): value
                           for label, value in fields}, indent=2))
    else:
        for label, value in fields:
            print('{}: {}'.format(label.upper(), value))
    _sys.exit()


def check(args):
    ''' Validate the database header, exit status 0 if valid and 1 otherwise. '''

    _open(args.dbfile)
    print('OK')
    _sys.exit()


def version():
    ''' return the version of sqlitehdr '''

    _modulepath = _path.abspath(__file__)
    _moduledir = _path.split(_modulepath)[0]
    _versionfile = _path.join(_moduledir, 'VERSION')
    with open(_versionfile, 'rt') as f:
        version = f.readline()
        print(version.strip())
    _sys.exit()


if __name__ == "__main__":
    main()
