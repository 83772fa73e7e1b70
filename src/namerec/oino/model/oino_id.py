"""Composition and decomposition of OINO-IDs."""

from collections.abc import Sequence
from urllib.parse import quote
from urllib.parse import unquote


def _escape(value: str, separator: str) -> str:
    escaped = quote(value, safe='')
    if separator in escaped:
        escaped = escaped.replace(separator, f'%{ord(separator):02X}')
    return escaped


def compose_id(values: Sequence[str], separator: str = ':') -> str:
    """
    Join primary key values into an OINO-ID.

    Each value is URL-encoded so the separator never appears inside a value.

    Args:
        values: Primary key values as text, in primary key order
        separator: Separator character

    Returns:
        OINO-ID
    """
    return separator.join(_escape(value, separator) for value in values)


def split_id(oino_id: str, separator: str = ':') -> list[str]:
    """
    Split an OINO-ID into its URL-decoded primary key values.

    Args:
        oino_id: OINO-ID
        separator: Separator character

    Returns:
        Primary key values as text
    """
    return [unquote(part) for part in oino_id.split(separator)]
