"""Shared helpers of the row codecs."""

from typing import TYPE_CHECKING

from namerec.oino.core.exceptions import OINOIdError
from namerec.oino.core.result import OINOResult
from namerec.oino.core.text import encode_text
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import Cell
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import Row

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel
    from namerec.oino.model.fields import DataField
    from namerec.oino.model.fields import Text

DECODE_OPERATION = 'decode'


def empty_row(datamodel: 'DataModel') -> Row:
    """Row with every cell absent."""
    return [UNDEFINED] * len(datamodel.fields)


def is_empty_row(row: Row) -> bool:
    return all(cell is UNDEFINED for cell in row)


def decode_cell(datamodel: 'DataModel', field: 'DataField', text: 'Text', result: OINOResult) -> Cell:
    """
    Typed cell of a decoded text value.

    Primary key hashid tokens are decoded first; a token that does not
    decode leaves the cell absent and adds a warning.

    Args:
        datamodel: Model of the resource
        field: Target field
        text: Unescaped text, None or UNDEFINED
        result: Receives warnings

    Returns:
        Typed cell
    """
    if isinstance(text, str) and text and field.is_primary_key:
        try:
            text = datamodel.decode_key_text(field, text)
        except OINOIdError as e:
            result.add_warning(str(e), DECODE_OPERATION)
            return UNDEFINED
    cell = field.deserialize(text)
    if cell is UNDEFINED and text is not UNDEFINED:
        result.add_warning(f'Invalid value for field {field.name}: {text!r}', DECODE_OPERATION)
    return cell


def serialize_row(
    datamodel: 'DataModel',
    row: Row,
    content_type: ContentType,
) -> tuple[str, list[tuple['DataField', 'Text']]]:
    """
    OINO-ID and escaped values of a row.

    Numeric primary keys are replaced by their hashid tokens when hashids
    are enabled; tokens are always written as strings.

    Args:
        datamodel: Model of the resource
        row: Row in column order
        content_type: Target format

    Returns:
        Tuple (escaped OINO-ID, [(field, escaped value or UNDEFINED)])
    """
    tokens = datamodel.hashed_primary_key_values(row)
    values: list[tuple[DataField, Text]] = []
    for i, field in enumerate(datamodel.fields):
        if i in tokens:
            values.append((field, encode_text(tokens[i], content_type)))
        else:
            values.append((field, field.serialize(row[i], content_type)))
    return encode_text(datamodel.compose_row_id(row), content_type), values
