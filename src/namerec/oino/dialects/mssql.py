"""Microsoft SQL Server dialect."""

import datetime as dt

from namerec.oino.core.config import DbParams
from namerec.oino.core.config import Dialect
from namerec.oino.core.types import FieldKind
from namerec.oino.core.utils import format_iso_datetime
from namerec.oino.dialects.base import IntrospectionKind
from namerec.oino.dialects.base import LengthRule
from namerec.oino.dialects.base import SelectParts
from namerec.oino.dialects.base import SqlDialect
from namerec.oino.dialects.base import TypeMapping
from namerec.oino.dialects.base import escape_doubled
from namerec.oino.dialects.base import require_order_for_offset

MSSQL_TYPES = {
    'int': TypeMapping(FieldKind.NUMBER),
    'bigint': TypeMapping(FieldKind.NUMBER),
    'smallint': TypeMapping(FieldKind.NUMBER),
    'tinyint': TypeMapping(FieldKind.NUMBER),
    'float': TypeMapping(FieldKind.NUMBER),
    'real': TypeMapping(FieldKind.NUMBER),
    'decimal': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'numeric': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'money': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'varchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'nvarchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'char': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'nchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'text': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'ntext': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'binary': TypeMapping(FieldKind.BLOB),
    'varbinary': TypeMapping(FieldKind.BLOB),
    'image': TypeMapping(FieldKind.BLOB),
    'date': TypeMapping(FieldKind.DATETIME),
    'datetime': TypeMapping(FieldKind.DATETIME),
    'datetime2': TypeMapping(FieldKind.DATETIME),
    'smalldatetime': TypeMapping(FieldKind.DATETIME),
    'datetimeoffset': TypeMapping(FieldKind.DATETIME),
    'bit': TypeMapping(FieldKind.BOOLEAN),
}

# Columns in the order expected by the catalog introspector.
_COLUMNS_QUERY = """SELECT c.COLUMN_NAME, c.DATA_TYPE, c.CHARACTER_MAXIMUM_LENGTH, c.IS_NULLABLE,
CASE WHEN EXISTS (SELECT 1 FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
 JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE k
 ON tc.CONSTRAINT_NAME = k.CONSTRAINT_NAME AND tc.TABLE_SCHEMA = k.TABLE_SCHEMA
 WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY' AND k.TABLE_SCHEMA = c.TABLE_SCHEMA AND k.TABLE_NAME = c.TABLE_NAME
 AND k.COLUMN_NAME = c.COLUMN_NAME) THEN 1 ELSE 0 END AS IS_PRIMARY_KEY,
CASE WHEN EXISTS (SELECT 1 FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
 JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE k
 ON tc.CONSTRAINT_NAME = k.CONSTRAINT_NAME AND tc.TABLE_SCHEMA = k.TABLE_SCHEMA
 WHERE tc.CONSTRAINT_TYPE = 'FOREIGN KEY' AND k.TABLE_SCHEMA = c.TABLE_SCHEMA AND k.TABLE_NAME = c.TABLE_NAME
 AND k.COLUMN_NAME = c.COLUMN_NAME) THEN 1 ELSE 0 END AS IS_FOREIGN_KEY,
c.NUMERIC_PRECISION, c.NUMERIC_SCALE,
COLUMNPROPERTY(OBJECT_ID(c.TABLE_SCHEMA + '.' + c.TABLE_NAME), c.COLUMN_NAME, 'IsIdentity') AS IS_AUTO_INCREMENT
FROM INFORMATION_SCHEMA.COLUMNS c
WHERE c.TABLE_CATALOG = {database} AND c.TABLE_NAME = {table}{schema}
ORDER BY c.ORDINAL_POSITION;"""


def _string_literal(value: str) -> str:
    return escape_doubled(value, "'")


def _blob_literal(value: bytes) -> str:
    return f'0x{value.hex()}'


def _datetime_literal(value: dt.datetime | dt.date) -> str:
    return _string_literal(format_iso_datetime(value)[:23])


def _boolean_literal(value: bool, sql_type: str) -> str:  # noqa: ARG001
    return '1' if value else '0'


def _schema_query(params: DbParams, table_name: str) -> str:
    schema = f' AND c.TABLE_SCHEMA = {_string_literal(params.schema)}' if params.schema else ''
    return _COLUMNS_QUERY.format(
        database=_string_literal(params.database),
        table=_string_literal(table_name),
        schema=schema,
    )


def _validate_query(params: DbParams) -> str:
    return (
        'SELECT count(*) FROM INFORMATION_SCHEMA.TABLES '
        f"WHERE TABLE_CATALOG = {_string_literal(params.database)} AND TABLE_TYPE = 'BASE TABLE';"
    )


def print_select_top(parts: SelectParts) -> str:
    """
    Render a SELECT using TOP for plain limits and OFFSET/FETCH for pages.

    Raises:
        OINOFilterError: If a page is requested without an order
    """
    require_order_for_offset(parts)
    top = f'TOP {parts.limit} ' if parts.limit and not parts.offset else ''
    sql = f'SELECT {top}{parts.columns} FROM {parts.table}'
    if parts.where:
        sql += f' WHERE {parts.where}'
    if parts.group_by:
        sql += f' GROUP BY {parts.group_by}'
    if parts.order_by:
        sql += f' ORDER BY {parts.order_by}'
    if parts.limit and parts.offset:
        sql += f' OFFSET {parts.offset} ROWS FETCH NEXT {parts.limit} ROWS ONLY'
    return sql + ';'


MSSQL = SqlDialect(
    dialect=Dialect.MSSQL,
    table_quotes=('[', ']'),
    column_quotes=('[', ']'),
    type_map=MSSQL_TYPES,
    string_literal=_string_literal,
    blob_literal=_blob_literal,
    datetime_literal=_datetime_literal,
    boolean_literal=_boolean_literal,
    introspection=IntrospectionKind.CATALOG,
    schema_query=_schema_query,
    validate_query=_validate_query,
    select_printer=print_select_top,
)
