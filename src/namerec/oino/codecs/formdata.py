"""Multipart form-data rows (one row per body)."""

import base64
import binascii
import logging
import re
from typing import TYPE_CHECKING

from namerec.oino.codecs.base import DECODE_OPERATION
from namerec.oino.codecs.base import decode_cell
from namerec.oino.codecs.base import empty_row
from namerec.oino.codecs.base import is_empty_row
from namerec.oino.codecs.base import serialize_row
from namerec.oino.core.result import OINOResult
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import FieldKind
from namerec.oino.core.types import Row

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel

logger = logging.getLogger(__name__)

DEFAULT_BOUNDARY = '---------OINOMultipartBoundary35424568'
LINE_SEPARATOR = '\r\n'

_DISPOSITION_PATTERN = re.compile(
    r'(?:form-data|file)\s*;\s*name="([^"]*)"(?:\s*;\s*filename="?([^";]*)"?)?',
    re.IGNORECASE,
)


def write_rows(
    datamodel: 'DataModel',
    rows: list[Row],
    result: OINOResult,
    boundary: str = DEFAULT_BOUNDARY,
) -> str:
    """
    Serialize the first row as multipart form-data.

    Blob fields are written as BASE64 file parts. Null cells are written as
    empty parts and absent cells are omitted. Extra rows are dropped with a
    warning.
    """
    if len(rows) > 1:
        result.add_warning(f'Form data holds one row, {len(rows) - 1} rows not written', 'write')
    if not rows:
        return ''

    delimiter = f'--{boundary}{LINE_SEPARATOR}'
    oino_id, values = serialize_row(datamodel, rows[0], ContentType.FORMDATA)
    parts = [
        f'{delimiter}Content-Disposition: form-data; name="{datamodel.api.config.id_field_name}"'
        f'{LINE_SEPARATOR}{LINE_SEPARATOR}{oino_id}{LINE_SEPARATOR}'
    ]
    for field, value in values:
        if value is UNDEFINED:
            continue
        if field.kind == FieldKind.BLOB and value:
            headers = (
                f'Content-Disposition: form-data; name="{field.name}"; filename="{field.name}"{LINE_SEPARATOR}'
                f'Content-Type: application/octet-stream{LINE_SEPARATOR}'
                f'Content-Transfer-Encoding: BASE64'
            )
        else:
            headers = f'Content-Disposition: form-data; name="{field.name}"'
        parts.append(f'{delimiter}{headers}{LINE_SEPARATOR}{LINE_SEPARATOR}{value}{LINE_SEPARATOR}')
    return ''.join(parts) + f'--{boundary}--{LINE_SEPARATOR}'


def _parse_headers(block: bytes) -> dict[str, str]:
    headers = {}
    for line in block.decode('utf-8', errors='replace').split(LINE_SEPARATOR):
        name, separator, value = line.partition(':')
        if separator:
            headers[name.strip().lower()] = value.strip()
    return headers


def read_rows(datamodel: 'DataModel', body: str | bytes, result: OINOResult, boundary: str = '') -> list[Row]:
    """
    Decode a multipart form-data body into at most one row.

    Parts for unknown fields are skipped with an info message, nested
    multipart/mixed parts and malformed parts with a warning. BASE64 parts
    go through the field deserializer; raw file parts of blob fields are
    taken as bytes.
    """
    data = body.encode('utf-8') if isinstance(body, str) else body
    delimiter = b'--' + boundary.encode('utf-8')
    if not boundary or delimiter not in data:
        result.add_warning('Multipart boundary not found in body', DECODE_OPERATION)
        return []

    row = empty_row(datamodel)
    for part in data.split(delimiter)[1:]:
        if part.startswith(b'--'):
            break
        if part.startswith(b'\r\n'):
            part = part[2:]
        header_block, separator, content = part.partition(b'\r\n\r\n')
        if not separator:
            result.add_warning('Multipart part without headers skipped', DECODE_OPERATION)
            continue
        if content.endswith(b'\r\n'):
            content = content[:-2]

        headers = _parse_headers(header_block)
        if 'multipart/mixed' in headers.get('content-type', '').lower():
            result.add_warning('Nested multipart/mixed part skipped', DECODE_OPERATION)
            continue
        match = _DISPOSITION_PATTERN.search(headers.get('content-disposition', ''))
        if match is None:
            result.add_warning('Multipart part without a field name skipped', DECODE_OPERATION)
            continue
        name, filename = match.group(1), match.group(2)
        if name == datamodel.api.config.id_field_name:
            continue
        index = datamodel.find_field_index_by_name(name)
        if index < 0:
            result.add_info(f'Field {name} not found in {datamodel.api.params.table_name}', DECODE_OPERATION)
            continue

        field = datamodel.fields[index]
        is_base64 = headers.get('content-transfer-encoding', '').upper() == 'BASE64'
        if not content:
            row[index] = None
        elif is_base64 and field.kind == FieldKind.BLOB:
            row[index] = decode_cell(datamodel, field, content.decode('ascii', errors='replace'), result)
        elif is_base64:
            try:
                text = base64.b64decode(content, validate=False).decode('utf-8')
            except (binascii.Error, UnicodeDecodeError):
                result.add_warning(f'Invalid BASE64 part for field {name}', DECODE_OPERATION)
                continue
            row[index] = decode_cell(datamodel, field, text, result)
        elif filename is not None and field.kind == FieldKind.BLOB:
            row[index] = bytes(content)
        else:
            row[index] = decode_cell(datamodel, field, content.decode('utf-8', errors='replace'), result)

    if is_empty_row(row):
        result.add_warning('Form data has no values', DECODE_OPERATION)
        return []
    return [row]
