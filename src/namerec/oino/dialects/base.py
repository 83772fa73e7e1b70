"""Dialect adapter: quoting, literals, type mapping and catalog queries."""

import datetime as dt
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from decimal import InvalidOperation
from enum import Enum

from namerec.oino.core.config import DbParams
from namerec.oino.core.config import Dialect
from namerec.oino.core.exceptions import OINOFilterError
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import Cell
from namerec.oino.core.types import FieldKind
from namerec.oino.core.utils import format_iso_datetime
from namerec.oino.core.utils import is_truthy
from namerec.oino.core.utils import parse_iso_datetime


class LengthRule(str, Enum):
    """How a column's max length is derived from its catalog data."""

    NONE = 'none'  # unbounded
    CHAR = 'char'  # declared character length
    NUMERIC = 'numeric'  # precision + scale + 1 (sign/decimal point)
    BITS = 'bits'  # bit(1) is boolean, wider bit fields are strings


class IntrospectionKind(str, Enum):
    """Where a dialect reads column definitions from."""

    DDL = 'ddl'
    CATALOG = 'catalog'


@dataclass(frozen=True)
class TypeMapping:
    """Field kind and length rule for one SQL type name."""

    kind: FieldKind
    length: LengthRule = LengthRule.NONE


@dataclass(frozen=True)
class SelectParts:
    """Already rendered clauses of a SELECT statement."""

    table: str
    columns: str
    where: str = ''
    group_by: str = ''
    order_by: str = ''
    limit: int = 0
    offset: int = 0


def print_select_limit_offset(parts: SelectParts) -> str:
    """Render a SELECT using trailing LIMIT/OFFSET."""
    sql = f'SELECT {parts.columns} FROM {parts.table}'
    if parts.where:
        sql += f' WHERE {parts.where}'
    if parts.group_by:
        sql += f' GROUP BY {parts.group_by}'
    if parts.order_by:
        sql += f' ORDER BY {parts.order_by}'
    if parts.limit:
        sql += f' LIMIT {parts.limit}'
        if parts.offset:
            sql += f' OFFSET {parts.offset}'
    return sql + ';'


def escape_doubled(value: str, quote: str) -> str:
    """Quote a string literal by doubling embedded quote characters."""
    return quote + value.replace(quote, quote * 2) + quote


def _number_literal(value: Cell) -> str:
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, int | Decimal):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    # Text reaching a numeric column is validated so it cannot carry SQL.
    try:
        return str(Decimal(str(value).strip()))
    except InvalidOperation as e:
        msg = f'Not a number: {value!r}'
        raise ValueError(msg) from e


@dataclass(frozen=True)
class SqlDialect:
    """
    Conventions of one database dialect.

    Each dialect module builds one instance; dialect specific behaviour is
    supplied as plain functions and lookup tables rather than subclasses.

    Attributes:
        dialect: Dialect tag
        table_quotes: Opening and closing quote for table names
        column_quotes: Opening and closing quote for column names
        lowercase_tables: Fold table names to lower case when quoting
        type_map: SQL type name (lower case) to field kind and length rule
        string_literal: Renders a string literal with the dialect's escaping
        blob_literal: Renders bytes as a hex literal
        datetime_literal: Renders a datetime as a quoted literal
        boolean_literal: Renders a boolean for a given SQL type
        introspection: Whether columns come from DDL text or a catalog query
        schema_query: Builds the introspection query for a table
        validate_query: Builds a query returning the number of visible tables
        select_printer: Assembles SELECT clauses, including limits
    """

    dialect: Dialect
    table_quotes: tuple[str, str]
    column_quotes: tuple[str, str]
    type_map: Mapping[str, TypeMapping]
    string_literal: Callable[[str], str]
    blob_literal: Callable[[bytes], str]
    datetime_literal: Callable[[dt.datetime | dt.date], str]
    boolean_literal: Callable[[bool, str], str]
    introspection: IntrospectionKind
    schema_query: Callable[[DbParams, str], str]
    validate_query: Callable[[DbParams], str]
    select_printer: Callable[[SelectParts], str] = print_select_limit_offset
    lowercase_tables: bool = False

    @property
    def name(self) -> str:
        """Dialect name."""
        return self.dialect.value

    def quote_table(self, name: str) -> str:
        """Quote a table name."""
        if self.lowercase_tables:
            name = name.lower()
        opening, closing = self.table_quotes
        return opening + name.replace(closing, closing * 2) + closing

    def quote_column(self, name: str) -> str:
        """Quote a column name."""
        opening, closing = self.column_quotes
        return opening + name.replace(closing, closing * 2) + closing

    def resolve_type(
        self,
        sql_type: str,
        length: int = 0,
        precision: int = 0,
        scale: int = 0,
        use_dates_as_string: bool = False,
    ) -> tuple[FieldKind, int]:
        """
        Map a SQL type to a field kind and max length.

        Unknown types map to unbounded strings.

        Args:
            sql_type: Native type name
            length: Declared character length
            precision: Numeric precision (bit width for bit columns)
            scale: Numeric scale
            use_dates_as_string: Model date/time types as strings

        Returns:
            Tuple (kind, max_length)
        """
        mapping = self.type_map.get(sql_type.strip().lower())
        if mapping is None:
            return FieldKind.STRING, 0
        if mapping.kind == FieldKind.DATETIME and use_dates_as_string:
            return FieldKind.STRING, 0
        match mapping.length:
            case LengthRule.CHAR:
                return mapping.kind, max(length, 0)
            case LengthRule.NUMERIC:
                return mapping.kind, precision + scale + 1 if precision else 0
            case LengthRule.BITS:
                if precision <= 1:
                    return FieldKind.BOOLEAN, 0
                return FieldKind.STRING, precision
        return mapping.kind, 0

    def literal_for(self, cell: Cell, kind: FieldKind, sql_type: str = '') -> str:
        """
        Render a cell as a SQL literal for a column of the given kind.

        Booleans follow the canonical truthiness rule, so NULL-like values
        render as false.

        Args:
            cell: Cell value
            kind: Field kind of the column
            sql_type: Native type of the column

        Returns:
            SQL literal text

        Raises:
            ValueError: If the cell is undefined or not valid for the kind
        """
        if cell is UNDEFINED:
            msg = 'An undefined cell has no SQL literal'
            raise ValueError(msg)
        if kind == FieldKind.BOOLEAN:
            return self.boolean_literal(is_truthy(cell), sql_type)
        if cell is None:
            return 'NULL'
        match kind:
            case FieldKind.NUMBER:
                return _number_literal(cell)
            case FieldKind.BLOB:
                data = cell if isinstance(cell, bytes) else str(cell).encode('utf-8')
                return self.blob_literal(data)
            case FieldKind.DATETIME:
                if isinstance(cell, dt.date):
                    return self.datetime_literal(cell)
                parsed = parse_iso_datetime(str(cell))
                if parsed is not None:
                    return self.datetime_literal(parsed)
                return self.string_literal(str(cell))
        if isinstance(cell, bytes):
            return self.string_literal(cell.decode('utf-8', errors='replace'))
        if isinstance(cell, dt.date):
            return self.string_literal(format_iso_datetime(cell))
        return self.string_literal(str(cell))

    def parse_literal(self, raw: object, kind: FieldKind, sql_type: str = '') -> Cell:  # noqa: ARG002
        """
        Normalize a value returned by the driver into a cell of the given kind.

        Args:
            raw: Value from the driver
            kind: Field kind of the column
            sql_type: Native type of the column

        Returns:
            Normalized cell
        """
        if raw is None:
            return None
        match kind:
            case FieldKind.BOOLEAN:
                return is_truthy(raw)  # type: ignore[arg-type]
            case FieldKind.NUMBER:
                if isinstance(raw, int | float | Decimal) and not isinstance(raw, bool):
                    return raw
                if isinstance(raw, bool):
                    return int(raw)
                try:
                    return int(str(raw))
                except ValueError:
                    try:
                        return float(str(raw))
                    except ValueError:
                        return None
            case FieldKind.BLOB:
                if isinstance(raw, bytes | bytearray | memoryview):
                    return bytes(raw)
                return str(raw).encode('utf-8')
            case FieldKind.DATETIME:
                if isinstance(raw, dt.date):
                    return raw
                return parse_iso_datetime(str(raw)) or str(raw)
        if isinstance(raw, str):
            return raw
        if isinstance(raw, bytes | bytearray | memoryview):
            return bytes(raw).decode('utf-8', errors='replace')
        if isinstance(raw, dt.date):
            return format_iso_datetime(raw)
        return str(raw)


def require_order_for_offset(parts: SelectParts) -> None:
    """Reject paging without an ORDER BY for dialects that need one."""
    if parts.offset and not parts.order_by:
        msg = 'Paging requires an order'
        raise OINOFilterError(f'{parts.limit} page', msg)
