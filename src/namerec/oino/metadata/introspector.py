"""Builds data model fields from DDL text or catalog rows."""

import logging
from collections.abc import Iterable
from collections.abc import Sequence
from typing import TYPE_CHECKING

from namerec.oino.core.config import ApiParams
from namerec.oino.core.exceptions import OINOConfigError
from namerec.oino.core.types import FieldParams
from namerec.oino.core.utils import is_truthy
from namerec.oino.dialects import IntrospectionKind
from namerec.oino.dialects import SqlDialect
from namerec.oino.metadata.ddl import ColumnDefinition
from namerec.oino.metadata.ddl import parse_create_table
from namerec.oino.model.fields import DataField

if TYPE_CHECKING:
    from namerec.oino.db.database import Database

logger = logging.getLogger(__name__)


def _to_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0


def build_fields(
    columns: Iterable[ColumnDefinition],
    dialect: SqlDialect,
    params: ApiParams,
) -> list[DataField]:
    """
    Map column definitions to fields, applying include/exclude rules.

    Args:
        columns: Column definitions in table order
        dialect: Dialect adapter (type mapping, literals)
        params: Resource configuration

    Returns:
        Fields in table order

    Raises:
        OINOConfigError: If a primary key column is excluded
    """
    fields = []
    for column in columns:
        if not params.is_field_included(column.name):
            if column.is_primary_key:
                msg = f'Primary key {column.name} of {params.table_name} cannot be excluded'
                raise OINOConfigError(msg, params.table_name)
            logger.debug(f'Field {params.table_name}.{column.name} excluded')
            continue
        kind, max_length = dialect.resolve_type(
            column.sql_type,
            length=column.length,
            precision=column.precision,
            scale=column.scale,
            use_dates_as_string=params.use_dates_as_string,
        )
        fields.append(
            DataField(
                name=column.name,
                kind=kind,
                sql_type=column.sql_type,
                dialect=dialect,
                max_length=max_length,
                params=FieldParams(
                    is_primary_key=column.is_primary_key,
                    is_foreign_key=column.is_foreign_key,
                    is_not_null=column.is_not_null,
                    is_auto_increment=column.is_auto_increment,
                ),
            )
        )
    return fields


def fields_from_ddl(ddl: str, dialect: SqlDialect, params: ApiParams) -> list[DataField]:
    """
    Fields of a CREATE TABLE statement or bare column clause.

    A single INTEGER primary key is an alias of the SQLite rowid and is
    therefore treated as auto increment.

    Args:
        ddl: CREATE TABLE text or column clause
        dialect: Dialect adapter
        params: Resource configuration

    Returns:
        Fields in declaration order
    """
    table = parse_create_table(ddl)
    keys = [column for column in table.columns if column.is_primary_key]
    if len(keys) == 1 and keys[0].sql_type.upper() == 'INTEGER':
        keys[0].is_auto_increment = True
    return build_fields(table.columns, dialect, params)


def column_from_catalog_row(row: Sequence[object]) -> ColumnDefinition:
    """
    Map a catalog row to a column definition.

    Rows hold: name, data type, character length, is nullable ('YES'/'NO'),
    is primary key, is foreign key, numeric precision, numeric scale, is auto increment.
    """
    name, data_type, length, nullable, primary_key, foreign_key, precision, scale, auto_increment = row[:9]
    return ColumnDefinition(
        name=str(name),
        sql_type=str(data_type),
        length=_to_int(length),
        precision=_to_int(precision),
        scale=_to_int(scale),
        is_primary_key=is_truthy(primary_key),  # type: ignore[arg-type]
        is_foreign_key=is_truthy(foreign_key),  # type: ignore[arg-type]
        is_not_null=str(nullable).upper() == 'NO',
        is_auto_increment=is_truthy(auto_increment),  # type: ignore[arg-type]
    )


def fields_from_catalog(rows: Iterable[Sequence[object]], dialect: SqlDialect, params: ApiParams) -> list[DataField]:
    """Fields of catalog query rows."""
    return build_fields((column_from_catalog_row(row) for row in rows), dialect, params)


async def introspect_fields(db: 'Database', params: ApiParams) -> list[DataField]:
    """
    Read a table's columns from the database.

    Args:
        db: Connected database
        params: Resource configuration

    Returns:
        Fields in table order

    Raises:
        OINOConfigError: If the query fails or the table does not exist
    """
    dialect = db.dialect
    dataset = await db.select(dialect.schema_query(db.params, params.table_name))
    if dataset.has_errors():
        msg = f'Introspection of {params.table_name} failed: {dataset.first_error()}'
        raise OINOConfigError(msg, params.table_name)
    rows = await dataset.all_rows()
    if not rows:
        msg = f'Table {params.table_name} not found in {db.name}'
        raise OINOConfigError(msg, params.table_name)

    if dialect.introspection == IntrospectionKind.DDL:
        fields = fields_from_ddl(str(rows[0][0]), dialect, params)
    else:
        fields = fields_from_catalog(rows, dialect, params)
    logger.debug(f'Introspected {len(fields)} fields of {params.table_name}')
    return fields
