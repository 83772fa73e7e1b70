"""URL-encoded rows: 'name=value&...' (one row per body)."""

import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import unquote_plus

from namerec.oino.codecs.base import DECODE_OPERATION
from namerec.oino.codecs.base import decode_cell
from namerec.oino.codecs.base import empty_row
from namerec.oino.codecs.base import is_empty_row
from namerec.oino.codecs.base import serialize_row
from namerec.oino.core.result import OINOResult
from namerec.oino.core.text import decode_text
from namerec.oino.core.text import encode_text
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import Row

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel

logger = logging.getLogger(__name__)

LINE_SEPARATOR = '\r\n'
_LINE_BREAK = re.compile(r'\r\n|\r|\n')


def write_rows(datamodel: 'DataModel', rows: list[Row], result: OINOResult) -> str:
    """Serialize rows as URL-encoded lines; more than one row adds a warning."""
    if len(rows) > 1:
        result.add_warning(f'URL-encoded data holds one row, got {len(rows)}', 'write')
    id_name = encode_text(datamodel.api.config.id_field_name, ContentType.URLENCODE)
    lines = []
    for row in rows:
        oino_id, values = serialize_row(datamodel, row, ContentType.URLENCODE)
        pairs = [f'{id_name}={oino_id}']
        pairs.extend(
            f'{encode_text(field.name, ContentType.URLENCODE)}={value}'
            for field, value in values
            if value is not UNDEFINED
        )
        lines.append('&'.join(pairs))
    return LINE_SEPARATOR.join(lines)


def read_rows(datamodel: 'DataModel', body: str, result: OINOResult) -> list[Row]:
    """
    Decode a URL-encoded body into at most one row.

    Only the first non-empty line is read; further lines add a warning.
    Empty values are NULL, missing names stay absent.
    """
    lines = [line for line in _LINE_BREAK.split(body) if line.strip()]
    if not lines:
        return []
    if len(lines) > 1:
        result.add_warning(f'URL-encoded data holds one row, {len(lines) - 1} lines ignored', DECODE_OPERATION)

    row = empty_row(datamodel)
    for pair in lines[0].split('&'):
        if not pair:
            continue
        key, separator, value = pair.partition('=')
        name = unquote_plus(key)
        if not separator:
            result.add_warning(f'Parameter {name} has no value', DECODE_OPERATION)
            continue
        if name == datamodel.api.config.id_field_name:
            continue
        index = datamodel.find_field_index_by_name(name)
        if index < 0:
            result.add_info(f'Field {name} not found in {datamodel.api.params.table_name}', DECODE_OPERATION)
            continue
        field = datamodel.fields[index]
        row[index] = decode_cell(datamodel, field, decode_text(value, ContentType.URLENCODE), result)

    if is_empty_row(row):
        result.add_warning('URL-encoded data has no values', DECODE_OPERATION)
        return []
    return [row]
