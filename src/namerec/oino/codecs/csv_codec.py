"""CSV rows: quoted values, '""' escapes, records ended by CR outside quotes."""

import logging
from typing import TYPE_CHECKING

from namerec.oino.codecs.base import DECODE_OPERATION
from namerec.oino.codecs.base import decode_cell
from namerec.oino.codecs.base import empty_row
from namerec.oino.codecs.base import is_empty_row
from namerec.oino.codecs.base import serialize_row
from namerec.oino.core.result import OINOResult
from namerec.oino.core.text import CSV_NULL
from namerec.oino.core.text import encode_text
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import Row

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel

logger = logging.getLogger(__name__)

LINE_SEPARATOR = '\r\n'

# (text, was quoted)
CsvCell = tuple[str, bool]


def write_rows(datamodel: 'DataModel', rows: list[Row], result: OINOResult) -> str:  # noqa: ARG001
    """Serialize rows as CSV with a header of the id column and field names."""
    header = [encode_text(datamodel.api.config.id_field_name, ContentType.CSV)]
    header.extend(encode_text(field.name, ContentType.CSV) for field in datamodel.fields)
    lines = [','.join(header)]
    for row in rows:
        oino_id, values = serialize_row(datamodel, row, ContentType.CSV)
        cells = [oino_id]
        cells.extend('' if value is UNDEFINED else value for _, value in values)  # type: ignore[misc]
        lines.append(','.join(cells))  # type: ignore[arg-type]
    return LINE_SEPARATOR.join(lines) + LINE_SEPARATOR


def tokenize(data: str) -> list[list[CsvCell]]:
    """
    Split CSV text into records of cells.

    A record ends at CR outside quotes (an LF right after it is skipped);
    quoted cells may span lines. Quotes are only special at the start of a
    cell, and '""' inside a quoted cell is an escaped quote.

    Args:
        data: CSV text

    Returns:
        Records of (text, was quoted) cells
    """
    records: list[list[CsvCell]] = []
    record: list[CsvCell] = []
    buffer: list[str] = []
    quoted = False
    in_quotes = False
    position = 0
    while position < len(data):
        char = data[position]
        if in_quotes:
            if char == '"' and data[position + 1 : position + 2] == '"':
                buffer.append('"')
                position += 1
            elif char == '"':
                in_quotes = False
            else:
                buffer.append(char)
        elif char == '"' and not buffer and not quoted:
            in_quotes = True
            quoted = True
        elif char == ',':
            record.append((''.join(buffer), quoted))
            buffer, quoted = [], False
        elif char == '\r':
            record.append((''.join(buffer), quoted))
            records.append(record)
            record, buffer, quoted = [], [], False
            if data[position + 1 : position + 2] == '\n':
                position += 1
        else:
            buffer.append(char)
        position += 1
    if buffer or quoted or record:
        record.append((''.join(buffer), quoted))
        records.append(record)
    return records


def read_rows(datamodel: 'DataModel', body: str, result: OINOResult) -> list[Row]:
    """
    Decode CSV with a header row into rows.

    Header names are matched case-sensitively. An unquoted 'null' is NULL,
    an unquoted empty cell is absent. A record whose cell count differs from
    the header is skipped with a warning.
    """
    records = tokenize(body)
    if not records:
        return []

    header = [text for text, _ in records[0]]
    indexes = []
    for name in header:
        index = datamodel.find_field_index_by_name(name)
        if index < 0 and name != datamodel.api.config.id_field_name:
            result.add_info(f'Field {name} not found in {datamodel.api.params.table_name}', DECODE_OPERATION)
        indexes.append(index)
    if all(index < 0 for index in indexes):
        result.add_warning('CSV header has no known fields', DECODE_OPERATION)
        return []

    rows = []
    for line_number, record in enumerate(records[1:], start=2):
        if record == [('', False)]:
            continue
        if len(record) != len(header):
            result.add_warning(
                f'CSV line {line_number} has {len(record)} values, header has {len(header)}',
                DECODE_OPERATION,
            )
            continue
        row = empty_row(datamodel)
        for index, (text, quoted) in zip(indexes, record, strict=True):
            if index < 0:
                continue
            field = datamodel.fields[index]
            if quoted:
                row[index] = decode_cell(datamodel, field, text, result)
            elif not text:
                row[index] = UNDEFINED
            elif text == CSV_NULL:
                row[index] = None
            else:
                row[index] = decode_cell(datamodel, field, text, result)
        if is_empty_row(row):
            result.add_warning(f'CSV line {line_number} has no values', DECODE_OPERATION)
            continue
        rows.append(row)
    return rows
