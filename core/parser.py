"""
Line parser for batch file content.

Each line of a batch file has the shape `<account>|<ip-shaped-field>|<rest>`.
Lines are scanned left to right once; anything that does not fit the grammar
is skipped without raising, and text after the second separator is never
inspected.

The IP check is a shape heuristic rather than address validation: the field
must hold exactly three dots and exactly four "qualifying digits", where the
first non-zero digit of each dot-delimited run counts once.
"""

import io
from typing import Generator

from constants import (
    FIELD_SEPARATOR,
    FILE_ENCODING,
    OCTET_SEPARATOR,
    REQUIRED_OCTET_SEPARATORS,
    REQUIRED_OCTETS,
    TRIM_CHARACTERS,
)
from core.models import ParsedRecord


def trim(value: str) -> str:
    return value.strip(TRIM_CHARACTERS)


def _is_qualifying_digit(char: str) -> bool:
    return "1" <= char <= "9"


def parse_line(line: str) -> ParsedRecord | None:
    """
    Parse one line into a record.

    Args:
        line: A single line without its line terminator.

    Returns:
        ParsedRecord | None: The record, or None if the line must be skipped
        (no account, a missing separator, or a field that is not IP-shaped).
    """
    acc_end = line.find(FIELD_SEPARATOR)
    if acc_end <= 0:
        return None

    point_cnt = 0
    dig_part = 0
    after_point = True
    ip_end = -1

    for index in range(acc_end + 1, len(line)):
        char = line[index]
        if char == FIELD_SEPARATOR:
            ip_end = index
            break
        if after_point and _is_qualifying_digit(char):
            dig_part += 1
            after_point = False
        elif char == OCTET_SEPARATOR:
            point_cnt += 1
            after_point = True

    if ip_end < 0:
        return None
    if point_cnt != REQUIRED_OCTET_SEPARATORS or dig_part != REQUIRED_OCTETS:
        return None

    account = trim(line[:acc_end])
    if not account:
        return None

    return ParsedRecord(account=account, ip=trim(line[acc_end + 1 : ip_end]))


def iter_lines(data: bytes) -> Generator[str, None, None]:
    """
    Lazily yield the lines of a UTF-8 encoded buffer.

    Lines may end with `\\n`, `\\r\\n` or `\\r`; terminators are removed.
    Undecodable bytes are replaced with U+FFFD instead of failing the file.
    """
    with io.TextIOWrapper(
        io.BytesIO(data), encoding=FILE_ENCODING, errors="replace", newline=None
    ) as stream:
        for line in stream:
            yield line.rstrip("\n")


def parse_records(data: bytes) -> Generator[ParsedRecord, None, None]:
    """
    Lazily parse every line of a batch file, in file order.

    Each call starts a fresh pass over `data`; malformed lines are skipped.

    Args:
        data: Raw file content.

    Yields:
        ParsedRecord: Each accepted record.
    """
    for line in iter_lines(data):
        record = parse_line(line)
        if record is not None:
            yield record
