"""
dbc_utils.py - Low-level readers for the WDBC client table format.

File layout:
    [4-byte magic 'WDBC']
    [4-byte LE uint32 record_count]
    [4-byte LE uint32 field_count]
    [4-byte LE uint32 record_size]
    [4-byte LE uint32 string_block_size]
    [record_count * record_size bytes of fixed-width records]
    [string_block_size bytes of NUL-terminated UTF-8 strings]

Every field is 4 bytes wide (int32, uint32, float32 or a uint32 byte offset
into the string block).  Localized strings occupy 17 consecutive fields:
16 locale offsets followed by a flags word.  Slot 0 holds enUS/enGB text.

Field layout codes used by compile_layout():
    i : LE int32
    u : LE uint32
    f : LE float32
    s : uint32 string-block offset, resolved to str
    L : localized string (17 fields), resolved to the slot 0 str
"""

import struct
from dataclasses import dataclass
from typing import List, Tuple

from dbc_items.errors import DecodeError


# ---------------------------------------------------------------------------
# Known constants
# ---------------------------------------------------------------------------

WDBC_MAGIC = b'WDBC'

#: Size of the fixed header that precedes the records.
HEADER_SIZE = 20

FIELD_SIZE = 4

#: Fields taken by one localized string column (16 locales + flags).
LOC_FIELD_COUNT = 17

_HEADER_STRUCT = struct.Struct('<4s4I')

_CODE_FORMATS = {
    'i': 'i',
    'u': 'I',
    'f': 'f',
    's': 'I',
    # slot 0 offset, then skip the other 15 locales and the flags word
    'L': 'I%dx' % ((LOC_FIELD_COUNT - 1) * FIELD_SIZE),
}

_STRING_CODES = frozenset('sL')


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DbcHeader:
    """The 20-byte WDBC header."""
    record_count: int
    field_count: int
    record_size: int
    string_block_size: int

    @property
    def records_end(self) -> int:
        return HEADER_SIZE + self.record_count * self.record_size

    @property
    def total_size(self) -> int:
        return self.records_end + self.string_block_size


def parse_header(data: bytes) -> DbcHeader:
    """Parse and sanity-check the WDBC header.

    Parameters
    ----------
    data : bytes
        Full table file contents.

    Returns
    -------
    DbcHeader

    Raises
    ------
    DecodeError
        If the magic is wrong or the file is shorter than the header claims.
    """
    if len(data) < HEADER_SIZE:
        raise DecodeError(f"file too short for a WDBC header ({len(data)} bytes)")

    magic, record_count, field_count, record_size, string_block_size = \
        _HEADER_STRUCT.unpack_from(data, 0)
    if magic != WDBC_MAGIC:
        raise DecodeError(f"bad magic {magic!r}")

    header = DbcHeader(record_count, field_count, record_size, string_block_size)
    if len(data) < header.total_size:
        raise DecodeError(
            f"truncated table: need {header.total_size} bytes, have {len(data)}")
    return header


# ---------------------------------------------------------------------------
# Record layouts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecordLayout:
    """A compiled field layout for one table schema."""
    codes: str
    record_struct: struct.Struct
    field_count: int
    string_positions: Tuple[int, ...]

    @property
    def record_size(self) -> int:
        return self.record_struct.size


def compile_layout(codes: str) -> RecordLayout:
    """Compile a layout code string (see module docstring) into a RecordLayout.

    Whitespace in `codes` is ignored so long layouts can be grouped.
    """
    codes = ''.join(codes.split())
    fmt = ['<']
    field_count = 0
    string_positions = []
    for pos, code in enumerate(codes):
        try:
            fmt.append(_CODE_FORMATS[code])
        except KeyError:
            raise ValueError(f"unknown layout code {code!r}") from None
        field_count += LOC_FIELD_COUNT if code == 'L' else 1
        if code in _STRING_CODES:
            string_positions.append(pos)
    return RecordLayout(codes=codes,
                        record_struct=struct.Struct(''.join(fmt)),
                        field_count=field_count,
                        string_positions=tuple(string_positions))


# ---------------------------------------------------------------------------
# String block
# ---------------------------------------------------------------------------

def read_string(block: bytes, offset: int) -> str:
    """Read the NUL-terminated string starting at `offset` in the string block.

    Raises DecodeError for offsets outside the block or unterminated strings.
    """
    if offset < 0 or offset >= len(block):
        if offset == 0 and not block:
            return ''
        raise DecodeError(f"string offset {offset} outside block of {len(block)} bytes")
    end = block.find(b'\x00', offset)
    if end == -1:
        raise DecodeError(f"unterminated string at offset {offset}")
    return block[offset:end].decode('utf-8', errors='replace')


# ---------------------------------------------------------------------------
# Table reader
# ---------------------------------------------------------------------------

def read_records(data: bytes, layout: RecordLayout) -> List[tuple]:
    """Decode every record of a WDBC file against `layout`.

    String fields come back as str, everything else as int/float.  The
    whole file is decoded before anything is returned, so a bad record
    means no rows at all rather than a partial table.

    Raises
    ------
    DecodeError
        If the header's field count or record size disagree with the
        layout, or any record references an invalid string.
    """
    header = parse_header(data)
    if header.field_count != layout.field_count:
        raise DecodeError(
            f"field count {header.field_count} != expected {layout.field_count}")
    if header.record_size != layout.record_size:
        raise DecodeError(
            f"record size {header.record_size} != expected {layout.record_size}")

    block = data[header.records_end:header.total_size]
    unpack = layout.record_struct.unpack_from
    records = []
    for i in range(header.record_count):
        values = list(unpack(data, HEADER_SIZE + i * header.record_size))
        for pos in layout.string_positions:
            values[pos] = read_string(block, values[pos])
        records.append(tuple(values))
    return records
