import pytest
from bitstring import ConstBitStream

from sqlitehdr import (
    MAGIC_HEADER_STRING,
    FileFormat,
    InconsistentVacuumStateError,
    InvalidHeaderError,
    InvalidMagicHeaderError,
    InvalidPageSizeError,
    InvalidPayloadFractionError,
    InvalidSchemaFormatError,
    InvalidTextEncodingError,
    LengthMismatchError,
    ReservedBytesNotZeroError,
    SchemaFormat,
    TextEncoding,
    VacuumMode,
    dbheader,
    decode_header,
    encode_header,
)

from .utils import MAGIC, minimal_header, put


def test_minimal_header():
    header = decode_header(bytes(minimal_header()))

    assert header.magic_header_string == MAGIC
    assert header.page_size == 512
    assert header.file_format_write_version.mode is FileFormat.Legacy
    assert header.file_format_read_version.mode is FileFormat.Legacy
    assert header.reserved_bytes_per_page == 0
    assert header.payload_fraction == (64, 32, 32)
    assert header.schema.format is SchemaFormat.Format1
    assert header.database_text_encoding is TextEncoding.Utf8
    assert header.vacuum is None
    assert header.reserved == bytes(20)
    assert header.freelist.page_index == 0
    assert header.freelist.count == 0


def test_magic_constant():
    assert MAGIC_HEADER_STRING == MAGIC
    assert MAGIC_HEADER_STRING == b"SQLite format 3\x00"


def test_every_field_decoded_from_its_offset():
    buf = minimal_header()
    buf[18] = 2
    buf[19] = 2
    buf[20] = 12
    put(buf, 24, 4, 0x01020304)
    put(buf, 28, 4, 17)
    put(buf, 32, 4, 5)
    put(buf, 36, 4, 3)
    put(buf, 40, 4, 0xDEADBEEF)
    put(buf, 44, 4, 4)
    put(buf, 48, 4, 2000)
    put(buf, 52, 4, 9)
    put(buf, 56, 4, 3)
    put(buf, 60, 4, 42)
    put(buf, 64, 4, 1)
    put(buf, 68, 4, 0x0F055112)
    put(buf, 92, 4, 0x01020304)
    put(buf, 96, 4, 3045001)

    header = decode_header(buf)

    assert header.file_format_write_version.mode is FileFormat.WriteAheadLogging
    assert header.file_format_read_version.mode is FileFormat.WriteAheadLogging
    assert header.wal_mode
    assert header.reserved_bytes_per_page == 12
    assert header.usable_page_size == 500
    assert header.file_change_counter == 0x01020304
    assert header.in_header_database_size == 17
    assert header.freelist.page_index == 5
    assert header.freelist.count == 3
    assert header.schema.cookie == 0xDEADBEEF
    assert header.schema.format is SchemaFormat.Format4
    assert header.default_page_cache_size == 2000
    assert header.vacuum.largest_root_btree_page == 9
    assert header.vacuum.mode is VacuumMode.Incremental
    assert header.database_text_encoding is TextEncoding.Utf16be
    assert header.user_version == 42
    assert header.application_id == 0x0F055112
    assert header.last_update.version_valid_for == 0x01020304
    assert header.last_update.sqlite_version_number == 3045001
    assert header.version_valid_for_number == 0x01020304
    assert header.sqlite_version_number == 3045001
    assert header.in_header_size_valid


def test_header_is_immutable():
    header = decode_header(minimal_header())
    with pytest.raises(AttributeError):
        header.page_size = 1024


@pytest.mark.parametrize("offset", [0, 5, 14, 15])
def test_invalid_magic(offset):
    buf = minimal_header()
    buf[offset] ^= 0xFF
    with pytest.raises(InvalidMagicHeaderError) as excinfo:
        decode_header(buf)
    assert excinfo.value.actual == bytes(buf[0:16])


def test_invalid_magic_does_not_look_past_magic():
    # a wrong header string on an otherwise truncated buffer
    with pytest.raises(InvalidMagicHeaderError):
        decode_header(b"SQLite format 4\x00" + b"\xff" * 4)


@pytest.mark.parametrize("size", [0, 15])
def test_buffer_shorter_than_magic(size):
    with pytest.raises(LengthMismatchError) as excinfo:
        decode_header(bytes(minimal_header())[:size])
    assert excinfo.value.expected == 100
    assert excinfo.value.actual == size


@pytest.mark.parametrize("size", [16, 50, 99])
def test_truncated_header(size):
    with pytest.raises(LengthMismatchError) as excinfo:
        decode_header(bytes(minimal_header())[:size])
    assert excinfo.value.actual == size


def test_longer_buffer_only_first_100_bytes_consumed():
    buf = bytes(minimal_header())
    assert decode_header(buf + b"\xff" * 412) == decode_header(buf)


@pytest.mark.parametrize(
    "raw, pagesize",
    [(512, 512), (1024, 1024), (4096, 4096), (32768, 32768), (1, 65536)],
)
def test_valid_page_sizes(raw, pagesize):
    buf = put(minimal_header(), 16, 2, raw)
    assert decode_header(buf).page_size == pagesize


@pytest.mark.parametrize("raw", [0, 2, 256, 511, 513, 1000, 32769, 65535])
def test_invalid_page_sizes(raw):
    buf = put(minimal_header(), 16, 2, raw)
    with pytest.raises(InvalidPageSizeError) as excinfo:
        decode_header(buf)
    assert excinfo.value.value == raw


@pytest.mark.parametrize("code", [0, 3, 255])
def test_unknown_file_format_is_inaccessible_not_an_error(code):
    buf = minimal_header()
    buf[19] = code
    header = decode_header(buf)
    assert header.file_format_read_version.mode is FileFormat.Inaccessible
    assert header.file_format_read_version.version == code
    assert header.file_format_write_version.mode is FileFormat.Legacy
    assert not header.wal_mode


@pytest.mark.parametrize("offset, expected", [(21, 64), (22, 32), (23, 32)])
def test_invalid_payload_fraction(offset, expected):
    buf = minimal_header()
    buf[offset] = 48
    with pytest.raises(InvalidPayloadFractionError) as excinfo:
        decode_header(buf)
    assert excinfo.value.offset == offset
    assert excinfo.value.expected == expected
    assert excinfo.value.actual == 48


@pytest.mark.parametrize("value", [0, 5, 0x01000001])
def test_invalid_schema_format(value):
    buf = put(minimal_header(), 44, 4, value)
    with pytest.raises(InvalidSchemaFormatError) as excinfo:
        decode_header(buf)
    assert excinfo.value.value == value


@pytest.mark.parametrize("value", [0, 4, 0x00010001])
def test_invalid_text_encoding(value):
    buf = put(minimal_header(), 56, 4, value)
    with pytest.raises(InvalidTextEncodingError) as excinfo:
        decode_header(buf)
    assert excinfo.value.value == value


def test_vacuum_flag_without_largest_root_page():
    buf = put(minimal_header(), 64, 4, 1)
    with pytest.raises(InconsistentVacuumStateError) as excinfo:
        decode_header(buf)
    assert excinfo.value.largest_root_btree_page == 0
    assert excinfo.value.incremental_vacuum == 1


@pytest.mark.parametrize("flag, mode", [(0, VacuumMode.Auto), (1, VacuumMode.Incremental)])
def test_vacuum_present(flag, mode):
    buf = put(minimal_header(), 52, 4, 3)
    put(buf, 64, 4, flag)
    vacuum = decode_header(buf).vacuum
    assert vacuum.largest_root_btree_page == 3
    assert vacuum.mode is mode
    assert vacuum.flag == flag


@pytest.mark.parametrize("offset", range(72, 92))
def test_reserved_region_must_be_zero(offset):
    buf = minimal_header()
    buf[offset] = 0x80
    with pytest.raises(ReservedBytesNotZeroError) as excinfo:
        decode_header(buf)
    assert excinfo.value.offset == offset
    assert excinfo.value.value == 0x80


def test_semantic_errors_are_value_errors():
    buf = put(minimal_header(), 16, 2, 3)
    with pytest.raises(ValueError):
        decode_header(buf)
    with pytest.raises(InvalidHeaderError):
        decode_header(buf)


def test_freelist_anomaly_is_not_an_error():
    buf = put(minimal_header(), 32, 4, 0)
    put(buf, 36, 4, 4)
    assert decode_header(buf).freelist == (0, 4)


@pytest.mark.parametrize(
    "stored, suggested",
    [(0, 0), (2000, 2000), (0xFFFFF830, 2000), (0x80000000, 0x80000000)],
)
def test_suggested_cache_size_is_absolute_value(stored, suggested):
    header = decode_header(put(minimal_header(), 48, 4, stored))
    assert header.default_page_cache_size == stored
    assert header.suggested_cache_size == suggested


@pytest.mark.parametrize(
    "counter, size, validfor, valid",
    [(7, 10, 7, True), (7, 10, 6, False), (7, 0, 7, False)],
)
def test_in_header_size_valid(counter, size, validfor, valid):
    buf = put(minimal_header(), 24, 4, counter)
    put(buf, 28, 4, size)
    put(buf, 92, 4, validfor)
    assert decode_header(buf).in_header_size_valid is valid


def test_dbheader_at_offset_restores_position():
    prefix = b"\x00" * 8
    btstr = ConstBitStream(bytes=prefix + bytes(minimal_header()))
    btstr.bytepos = 3
    header = dbheader(btstr, offset=8)
    assert header.page_size == 512
    assert btstr.bytepos == 3


def test_dbheader_restores_position_on_error():
    btstr = ConstBitStream(bytes=bytes(put(minimal_header(), 44, 4, 9)))
    with pytest.raises(InvalidSchemaFormatError):
        dbheader(btstr)
    assert btstr.bytepos == 0


def test_encode_minimal_header():
    buf = bytes(minimal_header())
    assert encode_header(decode_header(buf)) == buf


def test_encode_all_fields():
    buf = put(minimal_header(), 16, 2, 1)
    buf[18:21] = b"\x02\x03\x20"
    for offset, value in [(24, 11), (28, 30), (32, 4), (36, 2), (40, 9), (44, 3),
                          (48, 0xFFFFFF00), (52, 7), (56, 2), (60, 5), (64, 1),
                          (68, 0x12345678), (92, 11), (96, 3046000)]:
        put(buf, offset, 4, value)
    buf = bytes(buf)

    header = decode_header(buf)
    assert header.page_size == 65536
    assert header.tobytes() == buf


@pytest.mark.parametrize("flag", [2, 0x80000000])
def test_encode_keeps_incremental_vacuum_flag(flag):
    buf = put(minimal_header(), 52, 4, 3)
    put(buf, 64, 4, flag)
    buf = bytes(buf)

    header = decode_header(buf)

    assert header.vacuum.mode is VacuumMode.Incremental
    assert header.vacuum.flag == flag
    assert header.tobytes() == buf
