"""Typed column abstraction."""

import base64
import binascii
import datetime as dt
import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from decimal import Decimal

from namerec.oino.core.text import decode_text
from namerec.oino.core.text import encode_text
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import Cell
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import FieldKind
from namerec.oino.core.types import FieldParams
from namerec.oino.core.types import _Undefined
from namerec.oino.core.utils import format_iso_datetime
from namerec.oino.core.utils import is_truthy
from namerec.oino.core.utils import parse_iso_datetime
from namerec.oino.dialects import SqlDialect

logger = logging.getLogger(__name__)

Text = str | None | _Undefined


def _number_to_text(cell: Cell) -> str:
    if isinstance(cell, bool):
        return '1' if cell else '0'
    if isinstance(cell, float):
        return repr(cell)
    return str(cell)


def _number_from_text(text: str) -> Cell:
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return UNDEFINED
    if value != value or value in (float('inf'), float('-inf')):
        return UNDEFINED
    return value


def _boolean_to_text(cell: Cell) -> str:
    return 'true' if is_truthy(cell) else 'false'


def _boolean_from_text(text: str) -> Cell:
    return is_truthy(text)


def _blob_to_text(cell: Cell) -> str:
    if isinstance(cell, bytes | bytearray | memoryview):
        return base64.b64encode(bytes(cell)).decode('ascii')
    return str(cell)


def _blob_from_text(text: str) -> Cell:
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError):
        return UNDEFINED


def _datetime_to_text(cell: Cell) -> str:
    if isinstance(cell, dt.date):
        return format_iso_datetime(cell)
    parsed = parse_iso_datetime(str(cell))
    return format_iso_datetime(parsed) if parsed is not None else str(cell)


def _datetime_from_text(text: str) -> Cell:
    if not text.strip():
        return None
    parsed = parse_iso_datetime(text)
    return UNDEFINED if parsed is None else parsed


def _string_to_text(cell: Cell) -> str:
    if isinstance(cell, bytes):
        return cell.decode('utf-8', errors='replace')
    if isinstance(cell, dt.date):
        return format_iso_datetime(cell)
    if isinstance(cell, bool):
        return 'true' if cell else 'false'
    return str(cell)


def _string_from_text(text: str) -> Cell:
    return text


_TO_TEXT: dict[FieldKind, Callable[[Cell], str]] = {
    FieldKind.STRING: _string_to_text,
    FieldKind.NUMBER: _number_to_text,
    FieldKind.BOOLEAN: _boolean_to_text,
    FieldKind.BLOB: _blob_to_text,
    FieldKind.DATETIME: _datetime_to_text,
}

_FROM_TEXT: dict[FieldKind, Callable[[str], Cell]] = {
    FieldKind.STRING: _string_from_text,
    FieldKind.NUMBER: _number_from_text,
    FieldKind.BOOLEAN: _boolean_from_text,
    FieldKind.BLOB: _blob_from_text,
    FieldKind.DATETIME: _datetime_from_text,
}

# Kinds written as bare JSON tokens rather than JSON strings.
_UNQUOTED_JSON_KINDS = frozenset({FieldKind.NUMBER, FieldKind.BOOLEAN})


@dataclass(frozen=True)
class DataField:
    """
    One column of a data model.

    Attributes:
        name: Column name, unique within the table
        kind: Field kind
        sql_type: Native SQL type name
        dialect: Dialect adapter used for quoting and literals
        max_length: Maximum string length (0 = unbounded)
        params: Constraint flags
    """

    name: str
    kind: FieldKind
    sql_type: str
    dialect: SqlDialect = dataclass_field(repr=False, compare=False)
    max_length: int = 0
    params: FieldParams = dataclass_field(default_factory=FieldParams)

    @property
    def is_primary_key(self) -> bool:
        return self.params.is_primary_key

    @property
    def is_foreign_key(self) -> bool:
        return self.params.is_foreign_key

    @property
    def is_not_null(self) -> bool:
        return self.params.is_not_null

    @property
    def is_auto_increment(self) -> bool:
        return self.params.is_auto_increment

    def serialize(self, cell: Cell, content_type: ContentType | None = None) -> Text:
        """
        Convert a cell to text, optionally escaped for a wire format.

        Without a content type the canonical text is returned: None for
        null and UNDEFINED for an absent cell. With a content type, null
        renders as the format's null token; UNDEFINED is returned unchanged
        so writers can omit the cell.

        Args:
            cell: Cell value
            content_type: Target wire format

        Returns:
            Text, None or UNDEFINED
        """
        if cell is UNDEFINED:
            return UNDEFINED
        text = None if cell is None else _TO_TEXT[self.kind](cell)
        if content_type is None:
            return text
        if content_type == ContentType.JSON and text is not None and self.kind in _UNQUOTED_JSON_KINDS:
            return text
        return encode_text(text, content_type)

    def deserialize(self, text: Text, content_type: ContentType | None = None) -> Cell:
        """
        Convert text back to a typed cell.

        Never raises: text that does not parse for the field kind yields UNDEFINED.

        Args:
            text: Text or escaped token
            content_type: Source wire format, when the text is still escaped

        Returns:
            Typed cell, None or UNDEFINED
        """
        if content_type is not None and isinstance(text, str):
            text = decode_text(text, content_type)
        if text is None or text is UNDEFINED:
            return text
        return _FROM_TEXT[self.kind](str(text))

    def sql_literal(self, cell: Cell) -> str:
        """Render a cell as a SQL literal for this column."""
        return self.dialect.literal_for(cell, self.kind, self.sql_type)

    def parse_sql_value(self, raw: object) -> Cell:
        """Normalize a value read from the database."""
        return self.dialect.parse_literal(raw, self.kind, self.sql_type)

    def sql_column(self) -> str:
        """Quoted column name."""
        return self.dialect.quote_column(self.name)

    def value_length(self, cell: Cell) -> int:
        """Length of a cell compared against the column max length."""
        if cell is None or cell is UNDEFINED:
            return 0
        if isinstance(cell, str | bytes):
            return len(cell)
        if isinstance(cell, int | float | Decimal):
            return len(_number_to_text(cell))
        return len(_TO_TEXT[self.kind](cell))

    def describe(self) -> str:
        """One-line debug description of the column."""
        sql_type = f'{self.sql_type}({self.max_length})' if self.max_length else self.sql_type
        flags = ' '.join(self.params.flags())
        return f'{self.name}: {self.kind.value} {sql_type}' + (f' {flags}' if flags else '')
