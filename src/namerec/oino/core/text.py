"""Per-format escaping of single text values."""

import html
import json
from urllib.parse import quote
from urllib.parse import unquote_plus

from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import _Undefined

CSV_NULL = 'null'
JSON_NULL = 'null'


def encode_text(value: str | None | _Undefined, content_type: ContentType) -> str:
    """
    Escape a text value for a wire format.

    Null renders as the format's null token: 'null' for JSON and CSV,
    empty for form fields and HTML. Undefined renders empty.

    Args:
        value: Text, None or UNDEFINED
        content_type: Target format

    Returns:
        Escaped token
    """
    if value is UNDEFINED:
        return ''
    match content_type:
        case ContentType.JSON:
            return JSON_NULL if value is None else json.dumps(value, ensure_ascii=False)
        case ContentType.CSV:
            if value is None:
                return CSV_NULL
            return '"' + value.replace('"', '""') + '"'
        case ContentType.URLENCODE:
            return '' if value is None else quote(value, safe='')
        case ContentType.HTML:
            return '' if value is None else html.escape(value)
    return '' if value is None else value


def decode_text(token: str | None, content_type: ContentType) -> str | None | _Undefined:
    """
    Reverse of encode_text.

    Args:
        token: Escaped token
        content_type: Source format

    Returns:
        Text, None for the null token, or UNDEFINED for an empty CSV cell
    """
    if token is None:
        return None
    match content_type:
        case ContentType.JSON:
            if token == JSON_NULL:
                return None
            if token.startswith('"'):
                try:
                    return json.loads(token)
                except json.JSONDecodeError:
                    return UNDEFINED
            return token
        case ContentType.CSV:
            if token == CSV_NULL:
                return None
            if not token:
                return UNDEFINED
            if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
                return token[1:-1].replace('""', '"')
            return token
        case ContentType.FORMDATA:
            return token or None
        case ContentType.URLENCODE:
            return unquote_plus(token) if token else None
        case ContentType.HTML:
            return html.unescape(token)
    return token
