"""JSON rows: an array of objects, or a single object when decoding."""

import json
import logging
from typing import TYPE_CHECKING

from namerec.oino.codecs.base import DECODE_OPERATION
from namerec.oino.codecs.base import decode_cell
from namerec.oino.codecs.base import empty_row
from namerec.oino.codecs.base import is_empty_row
from namerec.oino.codecs.base import serialize_row
from namerec.oino.core.result import OINOResult
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import Row

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel

logger = logging.getLogger(__name__)

LINE_SEPARATOR = '\r\n'


def write_rows(datamodel: 'DataModel', rows: list[Row], result: OINOResult) -> str:  # noqa: ARG001
    """Serialize rows as a JSON array, one object per line with the id first."""
    id_key = json.dumps(datamodel.api.config.id_field_name)
    objects = []
    for row in rows:
        oino_id, values = serialize_row(datamodel, row, ContentType.JSON)
        members = [f'{id_key}:{oino_id}']
        members.extend(f'{json.dumps(field.name)}:{value}' for field, value in values if value is not UNDEFINED)
        objects.append('{' + ','.join(members) + '}')
    return '[' + LINE_SEPARATOR + (',' + LINE_SEPARATOR).join(objects) + LINE_SEPARATOR + ']'


def _object_to_row(datamodel: 'DataModel', obj: dict, result: OINOResult) -> Row:
    row = empty_row(datamodel)
    for key, value in obj.items():
        if key == datamodel.api.config.id_field_name:
            continue
        index = datamodel.find_field_index_by_name(key)
        if index < 0:
            result.add_info(f'Field {key} not found in {datamodel.api.params.table_name}', DECODE_OPERATION)
            continue
        field = datamodel.fields[index]
        if value is None:
            row[index] = None
        elif isinstance(value, dict | list):
            row[index] = decode_cell(datamodel, field, json.dumps(value, ensure_ascii=False), result)
        elif isinstance(value, str):
            row[index] = decode_cell(datamodel, field, value, result)
        else:
            row[index] = value
    return row


def read_rows(datamodel: 'DataModel', body: str, result: OINOResult) -> list[Row]:
    """
    Decode a JSON object or array of objects into rows.

    Malformed JSON and non-object elements produce warnings; rows with no
    known field are skipped with a warning.
    """
    try:
        data = json.loads(body) if body.strip() else []
    except json.JSONDecodeError as e:
        result.add_warning(f'Invalid JSON: {e}', DECODE_OPERATION)
        return []

    items = data if isinstance(data, list) else [data]
    rows = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            result.add_warning(f'Element {position} is not an object', DECODE_OPERATION)
            continue
        row = _object_to_row(datamodel, item, result)
        if is_empty_row(row):
            result.add_warning(f'Element {position} has no values', DECODE_OPERATION)
            continue
        rows.append(row)
    return rows
