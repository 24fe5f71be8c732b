"""
Record tokenizer for the quoted, comma separated .Dpr text table
"""

import re
from typing import List

Record = List[str]

# Characters that end plain (unquoted) text
_SPECIAL = re.compile(r'[",\r\n]')


def read_records(content: str) -> List[Record]:
    """
    Split raw file text into records of fields.

    A double quote opens a quoted section in which commas and newlines are
    literal and a doubled quote is an escaped quote. Outside quotes a comma
    ends the field, a line feed ends the field and the record, and carriage
    returns are dropped. An unterminated quote swallows the rest of the input
    into the current field.

    Args:
        content: Whole file decoded to text

    Returns:
        List of records, each a list of field strings
    """
    records: List[Record] = []
    row: Record = []
    field: List[str] = []
    pos = 0
    size = len(content)

    while pos < size:
        match = _SPECIAL.search(content, pos)
        if match is None:
            field.append(content[pos:])
            break

        start = match.start()
        if start > pos:
            field.append(content[pos:start])
        char = content[start]
        pos = start + 1

        if char == '"':
            pos = _read_quoted(content, pos, field)
        elif char == ',':
            row.append(''.join(field))
            field = []
        elif char == '\n':
            row.append(''.join(field))
            field = []
            records.append(row)
            row = []
        # '\r' is ignored outside quotes

    trailing = ''.join(field)
    if trailing or row:
        row.append(trailing)
        records.append(row)

    return records


def _read_quoted(content: str, pos: int, field: List[str]) -> int:
    """Consume a quoted section starting after the opening quote, return the next position"""
    size = len(content)
    while pos < size:
        end = content.find('"', pos)
        if end < 0:
            field.append(content[pos:])
            return size
        field.append(content[pos:end])
        if end + 1 < size and content[end + 1] == '"':
            field.append('"')
            pos = end + 2
        else:
            return end + 1
    return pos
