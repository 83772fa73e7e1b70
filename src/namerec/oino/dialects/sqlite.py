"""SQLite dialect."""

import datetime as dt

from namerec.oino.core.config import DbParams
from namerec.oino.core.config import Dialect
from namerec.oino.core.types import FieldKind
from namerec.oino.core.utils import format_iso_datetime
from namerec.oino.dialects.base import IntrospectionKind
from namerec.oino.dialects.base import LengthRule
from namerec.oino.dialects.base import SqlDialect
from namerec.oino.dialects.base import TypeMapping
from namerec.oino.dialects.base import escape_doubled

SQLITE_TYPES = {
    'integer': TypeMapping(FieldKind.NUMBER),
    'int': TypeMapping(FieldKind.NUMBER),
    'bigint': TypeMapping(FieldKind.NUMBER),
    'smallint': TypeMapping(FieldKind.NUMBER),
    'tinyint': TypeMapping(FieldKind.NUMBER),
    'real': TypeMapping(FieldKind.NUMBER),
    'double': TypeMapping(FieldKind.NUMBER),
    'float': TypeMapping(FieldKind.NUMBER),
    'numeric': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'decimal': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'text': TypeMapping(FieldKind.STRING),
    'clob': TypeMapping(FieldKind.STRING),
    'varchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'nvarchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'char': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'nchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'blob': TypeMapping(FieldKind.BLOB),
    'datetime': TypeMapping(FieldKind.DATETIME),
    'date': TypeMapping(FieldKind.DATETIME),
    'timestamp': TypeMapping(FieldKind.DATETIME),
    'boolean': TypeMapping(FieldKind.BOOLEAN),
}


def _string_literal(value: str) -> str:
    return escape_doubled(value, "'")


def _blob_literal(value: bytes) -> str:
    return f"X'{value.hex()}'"


def _datetime_literal(value: dt.datetime | dt.date) -> str:
    return _string_literal(format_iso_datetime(value))


def _boolean_literal(value: bool, sql_type: str) -> str:  # noqa: ARG001
    return '1' if value else '0'


def _schema_query(params: DbParams, table_name: str) -> str:  # noqa: ARG001
    return f"SELECT sql FROM sqlite_master WHERE type = 'table' AND name = {_string_literal(table_name)};"


def _validate_query(params: DbParams) -> str:  # noqa: ARG001
    return "SELECT count(*) FROM sqlite_master WHERE type = 'table';"


SQLITE = SqlDialect(
    dialect=Dialect.SQLITE,
    table_quotes=('[', ']'),
    column_quotes=('"', '"'),
    type_map=SQLITE_TYPES,
    string_literal=_string_literal,
    blob_literal=_blob_literal,
    datetime_literal=_datetime_literal,
    boolean_literal=_boolean_literal,
    introspection=IntrospectionKind.DDL,
    schema_query=_schema_query,
    validate_query=_validate_query,
)
