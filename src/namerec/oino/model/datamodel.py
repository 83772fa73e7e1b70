"""Data model: ordered typed fields of one table and SQL generation."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from namerec.oino.core.exceptions import OINOConfigError
from namerec.oino.core.exceptions import OINOIdError
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import Cell
from namerec.oino.core.types import FieldKind
from namerec.oino.core.types import Row
from namerec.oino.dialects import SelectParts
from namerec.oino.dialects import SqlDialect
from namerec.oino.model.fields import DataField
from namerec.oino.model.oino_id import compose_id
from namerec.oino.model.oino_id import split_id
from namerec.oino.sql.params import SqlParams

if TYPE_CHECKING:
    from namerec.oino.api import Api

logger = logging.getLogger(__name__)


class DataModel:
    """
    Ordered field list of one table.

    Field order is the order fields were added (catalog/DDL order) and is the
    column order of every generated statement and of positional rows. The
    model is filled once while its Api is created, then frozen and shared
    read-only by all requests.
    """

    def __init__(self, api: 'Api') -> None:
        """
        Initialize an empty model.

        Args:
            api: Owning resource (table name, hashid and id configuration)
        """
        self.api = api
        self._fields: list[DataField] = []
        self._index: dict[str, int] = {}
        self._frozen = False

    @property
    def fields(self) -> tuple[DataField, ...]:
        """Fields in column order."""
        return tuple(self._fields)

    @property
    def primary_key_fields(self) -> list[DataField]:
        """Primary key fields in column order."""
        return [field for field in self._fields if field.is_primary_key]

    @property
    def dialect(self) -> SqlDialect:
        return self.api.db.dialect

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def add_field(self, field: DataField) -> None:
        """
        Append a field.

        Raises:
            OINOConfigError: If the model is frozen or the name is taken
        """
        if self._frozen:
            msg = f'Data model of {self.api.params.table_name} is read-only'
            raise OINOConfigError(msg, self.api.params.table_name)
        if field.name in self._index:
            msg = f'Duplicate field {field.name}'
            raise OINOConfigError(msg, self.api.params.table_name)
        self._index[field.name] = len(self._fields)
        self._fields.append(field)

    def freeze(self) -> None:
        """
        Make the model read-only.

        Raises:
            OINOConfigError: If the model has no primary key
        """
        if not self.primary_key_fields:
            msg = f'Table {self.api.params.table_name} has no primary key'
            raise OINOConfigError(msg, self.api.params.table_name)
        self._frozen = True

    def find_field_by_name(self, name: str) -> DataField | None:
        """Find a field by exact name."""
        index = self._index.get(name)
        return None if index is None else self._fields[index]

    def find_field_index_by_name(self, name: str) -> int:
        """Find a field position by exact name, -1 if missing."""
        return self._index.get(name, -1)

    def filter_fields(self, predicate: Callable[[DataField], bool]) -> list[DataField]:
        """Fields matching a predicate, in column order."""
        return [field for field in self._fields if predicate(field)]

    def _uses_hashid(self, field: DataField) -> bool:
        return self.api.hashid is not None and field.is_primary_key and field.kind == FieldKind.NUMBER

    def hashed_primary_key_values(self, row: Row) -> dict[int, str]:
        """
        Hashid tokens of the primary key cells of a row.

        Args:
            row: Row in column order

        Returns:
            Mapping of field position to token (empty when hashids are off)
        """
        if self.api.hashid is None:
            return {}
        raw_values = self.get_row_primary_key_values(row)
        row_seed = ' '.join(raw_values)
        tokens = {}
        for i, field in enumerate(self._fields):
            if self._uses_hashid(field) and row[i] is not None and row[i] is not UNDEFINED:
                tokens[i] = self.api.hashid.encode(field.serialize(row[i]), f'{field.name} {row_seed}')
        return tokens

    def get_row_primary_key_values(self, row: Row, hashid_values: bool = False) -> list[str]:
        """
        Primary key values of a row as text.

        Args:
            row: Row in column order
            hashid_values: Replace numeric keys with their hashid tokens

        Returns:
            Key values in primary key order
        """
        tokens = self.hashed_primary_key_values(row) if hashid_values else {}
        values = []
        for i, field in enumerate(self._fields):
            if not field.is_primary_key:
                continue
            if i in tokens:
                values.append(tokens[i])
                continue
            text = field.serialize(row[i])
            values.append(text if isinstance(text, str) else '')
        return values

    def compose_row_id(self, row: Row) -> str:
        """OINO-ID of a row."""
        values = self.get_row_primary_key_values(row, hashid_values=True)
        return compose_id(values, self.api.config.id_separator)

    def decode_key_text(self, field: DataField, text: str) -> str:
        """
        Reverse hashid encoding of a primary key value, if it applies.

        Raises:
            OINOIdError: If the token does not decode
        """
        if self._uses_hashid(field):
            return self.api.hashid.decode(text)  # type: ignore[union-attr]
        return text

    def decompose_id(self, oino_id: str) -> list[Cell]:
        """
        Typed primary key values of an OINO-ID.

        Args:
            oino_id: OINO-ID

        Returns:
            Cells in primary key order

        Raises:
            OINOIdError: If the segment count, a token or a value is invalid
        """
        table_name = self.api.params.table_name
        parts = split_id(oino_id, self.api.config.id_separator)
        key_fields = self.primary_key_fields
        if len(parts) != len(key_fields):
            msg = f'Id {oino_id} has {len(parts)} values but {table_name} has {len(key_fields)} primary key fields'
            raise OINOIdError(oino_id, msg, table_name)

        cells: list[Cell] = []
        for field, part in zip(key_fields, parts, strict=True):
            if not part:
                raise OINOIdError(oino_id, f'Id {oino_id} has an empty value for {field.name}', table_name)
            cell = field.deserialize(self.decode_key_text(field, part))
            if cell is None or cell is UNDEFINED:
                raise OINOIdError(oino_id, f'Id {oino_id} has an invalid value for {field.name}', table_name)
            cells.append(cell)
        return cells

    def print_sql_table(self) -> str:
        return self.api.db.dialect.quote_table(self.api.params.table_name)

    def print_sql_primary_key_condition(self, oino_id: str) -> str:
        """WHERE condition selecting the row of an OINO-ID."""
        cells = self.decompose_id(oino_id)
        conditions = [
            f'{field.sql_column()} = {field.sql_literal(cell)}'
            for field, cell in zip(self.primary_key_fields, cells, strict=True)
        ]
        return '(' + ' AND '.join(conditions) + ')'

    def _print_sql_select_columns(self, sql_params: SqlParams) -> str:
        columns = []
        for field in self._fields:
            column = field.sql_column()
            if sql_params.select is not None and not sql_params.select.is_selected(field):
                columns.append(f"'' AS {column}")
            elif sql_params.aggregate is not None and sql_params.aggregate.is_aggregated(field):
                columns.append(sql_params.aggregate.print_column(field))
            else:
                columns.append(column)
        return ', '.join(columns)

    def print_sql_select(self, oino_id: str = '', sql_params: SqlParams | None = None) -> str:
        """
        SELECT statement for the table, optionally one row and query parameters.

        Args:
            oino_id: OINO-ID of a single row, or empty for all rows
            sql_params: Filter, order, limit, select and aggregate parameters

        Returns:
            SQL text
        """
        sql_params = sql_params or SqlParams()
        conditions = []
        if oino_id:
            conditions.append(self.print_sql_primary_key_condition(oino_id))
        if sql_params.filter is not None:
            conditions.append(sql_params.filter.to_sql(self))

        limit, offset = (sql_params.limit.limit, sql_params.limit.offset) if sql_params.limit else (0, 0)
        parts = SelectParts(
            table=self.print_sql_table(),
            columns=self._print_sql_select_columns(sql_params),
            where=' AND '.join(conditions),
            group_by=sql_params.aggregate.print_group_by(self, sql_params.select) if sql_params.aggregate else '',
            order_by=sql_params.order.to_sql(self) if sql_params.order else '',
            limit=limit,
            offset=offset,
        )
        sql = self.dialect.select_printer(parts)
        logger.debug(f'Select SQL: {sql}')
        return sql

    def print_sql_insert(self, row: Row) -> str:
        """
        INSERT statement with exactly the columns whose cell is not absent.

        Raises:
            ValueError: If every cell is absent
        """
        columns = []
        values = []
        for field, cell in zip(self._fields, row, strict=True):
            if cell is UNDEFINED:
                continue
            columns.append(field.sql_column())
            values.append(field.sql_literal(cell))
        if not columns:
            msg = 'Row has no values to insert'
            raise ValueError(msg)
        return f'INSERT INTO {self.print_sql_table()} ({", ".join(columns)}) VALUES ({", ".join(values)});'

    def has_update_values(self, row: Row) -> bool:
        """Whether a row has a present non-key cell."""
        return any(
            cell is not UNDEFINED and not field.is_primary_key
            for field, cell in zip(self._fields, row, strict=True)
        )

    def print_sql_update(self, oino_id: str, row: Row) -> str:
        """
        UPDATE statement setting the present non-key cells of the row identified by an OINO-ID.

        Raises:
            ValueError: If no non-key cell is present
            OINOIdError: If the id is invalid
        """
        assignments = [
            f'{field.sql_column()} = {field.sql_literal(cell)}'
            for field, cell in zip(self._fields, row, strict=True)
            if cell is not UNDEFINED and not field.is_primary_key
        ]
        if not assignments:
            msg = 'Row has no values to update'
            raise ValueError(msg)
        condition = self.print_sql_primary_key_condition(oino_id)
        return f'UPDATE {self.print_sql_table()} SET {", ".join(assignments)} WHERE {condition};'

    def print_sql_delete(self, oino_id: str) -> str:
        """DELETE statement for the row identified by an OINO-ID."""
        return f'DELETE FROM {self.print_sql_table()} WHERE {self.print_sql_primary_key_condition(oino_id)};'

    def describe(self) -> str:
        """Multi-line debug description of the model."""
        lines = [f'{self.api.params.table_name} ({self.dialect.name})']
        lines.extend(f'  {field.describe()}' for field in self._fields)
        return '\n'.join(lines)
