"""MariaDB / MySQL dialect."""

import datetime as dt

from namerec.oino.core.config import DbParams
from namerec.oino.core.config import Dialect
from namerec.oino.core.types import FieldKind
from namerec.oino.core.utils import format_iso_datetime
from namerec.oino.dialects.base import IntrospectionKind
from namerec.oino.dialects.base import LengthRule
from namerec.oino.dialects.base import SqlDialect
from namerec.oino.dialects.base import TypeMapping

MARIADB_TYPES = {
    'int': TypeMapping(FieldKind.NUMBER),
    'integer': TypeMapping(FieldKind.NUMBER),
    'tinyint': TypeMapping(FieldKind.NUMBER),
    'smallint': TypeMapping(FieldKind.NUMBER),
    'mediumint': TypeMapping(FieldKind.NUMBER),
    'bigint': TypeMapping(FieldKind.NUMBER),
    'float': TypeMapping(FieldKind.NUMBER),
    'double': TypeMapping(FieldKind.NUMBER),
    'real': TypeMapping(FieldKind.NUMBER),
    'decimal': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'numeric': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'varchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'char': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'tinytext': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'text': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'mediumtext': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'longtext': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'binary': TypeMapping(FieldKind.BLOB),
    'varbinary': TypeMapping(FieldKind.BLOB),
    'tinyblob': TypeMapping(FieldKind.BLOB),
    'blob': TypeMapping(FieldKind.BLOB),
    'mediumblob': TypeMapping(FieldKind.BLOB),
    'longblob': TypeMapping(FieldKind.BLOB),
    'date': TypeMapping(FieldKind.DATETIME),
    'datetime': TypeMapping(FieldKind.DATETIME),
    'timestamp': TypeMapping(FieldKind.DATETIME),
    'bit': TypeMapping(FieldKind.BOOLEAN, LengthRule.BITS),
}

_ESCAPES = str.maketrans({
    '\\': '\\\\',
    "'": "\\'",
    '"': '\\"',
    '\r': '\\r',
    '\n': '\\n',
    '\t': '\\t',
    '\0': '\\0',
})

# Columns in the order expected by the catalog introspector.
_COLUMNS_QUERY = """SELECT c.COLUMN_NAME, c.DATA_TYPE, c.CHARACTER_MAXIMUM_LENGTH, c.IS_NULLABLE,
c.COLUMN_KEY = 'PRI' AS IS_PRIMARY_KEY,
EXISTS (SELECT 1 FROM information_schema.KEY_COLUMN_USAGE k
 WHERE k.TABLE_SCHEMA = c.TABLE_SCHEMA AND k.TABLE_NAME = c.TABLE_NAME AND k.COLUMN_NAME = c.COLUMN_NAME
 AND k.REFERENCED_TABLE_NAME IS NOT NULL) AS IS_FOREIGN_KEY,
c.NUMERIC_PRECISION, c.NUMERIC_SCALE,
c.EXTRA LIKE '%auto_increment%' AS IS_AUTO_INCREMENT
FROM information_schema.COLUMNS c
WHERE c.TABLE_SCHEMA = {database} AND c.TABLE_NAME = {table}
ORDER BY c.ORDINAL_POSITION;"""


def _string_literal(value: str) -> str:
    return "'" + value.translate(_ESCAPES) + "'"


def _blob_literal(value: bytes) -> str:
    return f"x'{value.hex()}'"


def _datetime_literal(value: dt.datetime | dt.date) -> str:
    text = format_iso_datetime(value)
    return _string_literal(text.replace('T', ' ').rstrip('Z'))


def _boolean_literal(value: bool, sql_type: str) -> str:
    if sql_type.strip().lower().startswith('bit'):
        return "b'1'" if value else "b'0'"
    return '1' if value else '0'


def _schema_query(params: DbParams, table_name: str) -> str:
    return _COLUMNS_QUERY.format(database=_string_literal(params.database), table=_string_literal(table_name))


def _validate_query(params: DbParams) -> str:
    return (
        'SELECT count(*) FROM information_schema.TABLES '
        f"WHERE TABLE_SCHEMA = {_string_literal(params.database)} AND TABLE_TYPE = 'BASE TABLE';"
    )


MARIADB = SqlDialect(
    dialect=Dialect.MARIADB,
    table_quotes=('`', '`'),
    column_quotes=('`', '`'),
    type_map=MARIADB_TYPES,
    string_literal=_string_literal,
    blob_literal=_blob_literal,
    datetime_literal=_datetime_literal,
    boolean_literal=_boolean_literal,
    introspection=IntrospectionKind.CATALOG,
    schema_query=_schema_query,
    validate_query=_validate_query,
)
