"""PostgreSQL dialect."""

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

POSTGRESQL_TYPES = {
    'integer': TypeMapping(FieldKind.NUMBER),
    'smallint': TypeMapping(FieldKind.NUMBER),
    'bigint': TypeMapping(FieldKind.NUMBER),
    'real': TypeMapping(FieldKind.NUMBER),
    'double precision': TypeMapping(FieldKind.NUMBER),
    'numeric': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'decimal': TypeMapping(FieldKind.STRING, LengthRule.NUMERIC),
    'text': TypeMapping(FieldKind.STRING),
    'character varying': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'character': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'varchar': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'char': TypeMapping(FieldKind.STRING, LengthRule.CHAR),
    'bytea': TypeMapping(FieldKind.BLOB),
    'boolean': TypeMapping(FieldKind.BOOLEAN),
    'date': TypeMapping(FieldKind.DATETIME),
    'timestamp': TypeMapping(FieldKind.DATETIME),
    'timestamp without time zone': TypeMapping(FieldKind.DATETIME),
    'timestamp with time zone': TypeMapping(FieldKind.DATETIME),
}

# Columns in the order expected by the catalog introspector.
_COLUMNS_QUERY = """SELECT c.column_name, c.data_type, c.character_maximum_length, c.is_nullable,
EXISTS (SELECT 1 FROM information_schema.table_constraints tc
 JOIN information_schema.key_column_usage k
 ON tc.constraint_name = k.constraint_name AND tc.table_schema = k.table_schema
 WHERE tc.constraint_type = 'PRIMARY KEY' AND k.table_schema = c.table_schema AND k.table_name = c.table_name
 AND k.column_name = c.column_name) AS is_primary_key,
EXISTS (SELECT 1 FROM information_schema.table_constraints tc
 JOIN information_schema.key_column_usage k
 ON tc.constraint_name = k.constraint_name AND tc.table_schema = k.table_schema
 WHERE tc.constraint_type = 'FOREIGN KEY' AND k.table_schema = c.table_schema AND k.table_name = c.table_name
 AND k.column_name = c.column_name) AS is_foreign_key,
c.numeric_precision, c.numeric_scale,
(COALESCE(c.column_default, '') LIKE 'nextval(%' OR c.is_identity = 'YES') AS is_auto_increment
FROM information_schema.columns c
WHERE c.table_catalog = {database} AND c.table_name = {table}{schema}
ORDER BY c.ordinal_position;"""


def _string_literal(value: str) -> str:
    return escape_doubled(value, "'")


def _blob_literal(value: bytes) -> str:
    return f"'\\x{value.hex()}'"


def _datetime_literal(value: dt.datetime | dt.date) -> str:
    return _string_literal(format_iso_datetime(value))


def _boolean_literal(value: bool, sql_type: str) -> str:  # noqa: ARG001
    return 'true' if value else 'false'


def _schema_query(params: DbParams, table_name: str) -> str:
    schema = f' AND c.table_schema = {_string_literal(params.schema)}' if params.schema else ''
    return _COLUMNS_QUERY.format(
        database=_string_literal(params.database),
        table=_string_literal(table_name.lower()),
        schema=schema,
    )


def _validate_query(params: DbParams) -> str:
    return (
        'SELECT count(*) FROM information_schema.tables '
        f"WHERE table_catalog = {_string_literal(params.database)} AND table_type = 'BASE TABLE';"
    )


POSTGRESQL = SqlDialect(
    dialect=Dialect.POSTGRESQL,
    table_quotes=('"', '"'),
    column_quotes=('"', '"'),
    type_map=POSTGRESQL_TYPES,
    string_literal=_string_literal,
    blob_literal=_blob_literal,
    datetime_literal=_datetime_literal,
    boolean_literal=_boolean_literal,
    introspection=IntrospectionKind.CATALOG,
    schema_query=_schema_query,
    validate_query=_validate_query,
    lowercase_tables=True,
)
