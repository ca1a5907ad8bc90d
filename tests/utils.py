import sqlite3

MAGIC = bytes.fromhex("53514c69746520666f726d6174203300")


def put(buf, offset, size, value):
    buf[offset : offset + size] = value.to_bytes(size, "big")
    return buf


def minimal_header() -> bytearray:
    """512 byte pages, legacy journalling, schema format 1, utf-8, everything else zero."""
    buf = bytearray(100)
    buf[0:16] = MAGIC
    buf[16:18] = b"\x02\x00"
    buf[18:20] = b"\x01\x01"
    buf[20] = 0
    buf[21:24] = bytes([64, 32, 32])
    put(buf, 44, 4, 1)
    put(buf, 56, 4, 1)
    return buf


def create_database(path, *pragmas):
    """Create a sqlite3 database at path, executing the pragmas before the first table."""
    conn = sqlite3.connect(str(path))
    for pragma in pragmas:
        conn.execute(pragma)
    conn.execute("CREATE TABLE users (id INT PRIMARY KEY, username TEXT)")
    conn.execute("INSERT INTO users VALUES (1, 'alice'), (2, 'bob')")
    conn.commit()
    conn.close()
    return str(path)
