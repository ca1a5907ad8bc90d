''' __init__.py - initialize package

Copyright (c) 2022 Netherlands Forensic Institute - MIT License
'''

def _modcheck():
    ''' check if we have at least version 3.1.3 of bitstring module '''

    try:
        import bitstring as _bitstring
    except ImportError:
        raise ImportError('this package requires the bitstring module')

    major, minor, patch = _bitstring.__version__.split('.')[:3]
    err = 'bitstring version >= 3.1.3 required'
    if int(major) < 3:
        raise ImportError(err)
    elif int(major) == 3 and int(minor) < 1:
        raise ImportError(err)
    elif int(major) == 3 and int(minor) == 1 and int(patch) < 3:
        raise ImportError(err)


_modcheck()

#######
# API #
#######

from ._structures import Header
from ._structures import PayloadFraction
from ._structures import Freelist
from ._structures import Schema
from ._structures import Vacuum
from ._structures import LastUpdate
from ._structures import MAGIC_HEADER_STRING
from ._structures import HEADER_SIZE
from ._structures import dbheader
from ._structures import decode_header
from ._structures import encode_header
from ._codecs import FileFormat
from ._codecs import FileFormatVersion
from ._codecs import SchemaFormat
from ._codecs import TextEncoding
from ._codecs import VacuumMode
from ._codecs import uint16
from ._codecs import uint32
from ._database import DatabaseFile
from ._database import read_header
from ._exceptions import HeaderException
from ._exceptions import LengthMismatchError
from ._exceptions import InvalidHeaderError
from ._exceptions import InvalidMagicHeaderError
from ._exceptions import InvalidPageSizeError
from ._exceptions import InvalidPayloadFractionError
from ._exceptions import InvalidSchemaFormatError
from ._exceptions import InvalidTextEncodingError
from ._exceptions import InconsistentVacuumStateError
from ._exceptions import ReservedBytesNotZeroError
