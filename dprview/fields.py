"""
Field classification and best-effort conversion of .Dpr cell text
"""

import math
import re
import string

from .constants import DprConstants

# Leading whitespace is skipped like C strtod, trailing text is not
_NUMBER = r'[ \t\n\v\f\r]*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?'
_NUMBER_PREFIX = re.compile(_NUMBER)
_NUMBER_FULL = re.compile(_NUMBER + r'\Z')

_HEX_DIGITS = frozenset(string.hexdigits)


def is_numeric(field: str) -> bool:
    """
    Check whether a field is compatible with a numeric column.

    Empty fields and the boolean/placeholder markers count as numeric,
    anything else must parse as a number in full.
    """
    if not field or field in DprConstants.NUMERIC_MARKERS:
        return True
    return _NUMBER_FULL.match(field) is not None


def to_float(field: str, default: float = 0.0) -> float:
    """Parse the numeric prefix of a field, or return default if there is none"""
    if not field:
        return default
    match = _NUMBER_PREFIX.match(field)
    if match is None:
        return default
    return float(match.group().strip())


def to_int(field: str, default: int = 0) -> int:
    """Parse the numeric prefix of a field and truncate it toward zero"""
    value = to_float(field, float(default))
    if not math.isfinite(value):
        return default
    return int(value)


def hex_decode(text: str) -> str:
    """
    Decode ASCII-hex text, two digits per character.

    Some header fields store decimal numbers as their hex-encoded ASCII,
    e.g. '31322E35' for '12.5'. If any digit pair is not hex the text is
    returned unchanged. A trailing odd digit is dropped.
    """
    chars = []
    for i in range(0, len(text) - 1, 2):
        high, low = text[i], text[i + 1]
        if high not in _HEX_DIGITS or low not in _HEX_DIGITS:
            return text
        chars.append(chr(int(high + low, 16)))
    return ''.join(chars)
