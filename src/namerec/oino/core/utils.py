"""Utility functions for OINO."""

import datetime as dt
import re
from decimal import Decimal

from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import Cell

_ZEROS = re.compile(r'^0+$')
_QUOTES = {'"': '"', "'": "'", '`': '`', '[': ']'}


def is_truthy(value: Cell) -> bool:
    """
    Canonical boolean coercion used for boolean columns.

    False for None, UNDEFINED, False and numeric zero, for byte strings
    without a non-zero byte, and for strings that are empty, 'false' (any
    case) or consist only of zeros. True otherwise.

    Args:
        value: Cell value or raw text

    Returns:
        Coerced boolean
    """
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float | Decimal):
        return value != 0
    if isinstance(value, bytes | bytearray | memoryview):
        return any(bytes(value))
    text = str(value).strip()
    if not text or text.lower() == 'false':
        return False
    return _ZEROS.match(text) is None


def split_top_level(text: str, separator: str = ',') -> list[str]:
    """
    Split text on a separator that is outside brackets and quotes.

    Quoted identifiers/strings (", ', `, [ ]) and parenthesized groups are
    kept intact, so 'a DECIMAL(10,2), b' splits into two parts.

    Args:
        text: Text to split
        separator: Single character separator

    Returns:
        Stripped non-empty parts
    """
    parts: list[str] = []
    depth = 0
    closing_quote: str | None = None
    start = 0
    for i, char in enumerate(text):
        if closing_quote:
            if char == closing_quote:
                closing_quote = None
        elif char in _QUOTES:
            closing_quote = _QUOTES[char]
        elif char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def find_closing_bracket(text: str, start: int) -> int:
    """
    Find the bracket closing the one opened at position start.

    Args:
        text: Text to scan
        start: Index of an opening '('

    Returns:
        Index of the matching ')', or -1 if unbalanced
    """
    depth = 0
    for i in range(start, len(text)):
        if text[i] == '(':
            depth += 1
        elif text[i] == ')':
            depth -= 1
            if depth == 0:
                return i
    return -1


def format_iso_datetime(value: dt.datetime | dt.date) -> str:
    """
    Format a datetime as UTC ISO-8601 with millisecond precision.

    Naive datetimes are taken to be UTC. Plain dates keep their date-only form.

    Args:
        value: Datetime or date

    Returns:
        Text like '2024-01-31T12:00:00.000Z'
    """
    if not isinstance(value, dt.datetime):
        return value.isoformat()
    if value.tzinfo is not None:
        value = value.astimezone(dt.timezone.utc)
    return f'{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z'


def parse_iso_datetime(text: str) -> dt.datetime | None:
    """
    Parse ISO-8601 text into a datetime.

    Args:
        text: Datetime text, with 'T' or space separator and optional 'Z'

    Returns:
        Datetime, or None if the text is not ISO-8601
    """
    text = text.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return dt.datetime.fromisoformat(text)
    except ValueError:
        return None
