"""Resource and connection configuration."""

from dataclasses import dataclass
from dataclasses import field
from enum import Enum

from namerec.oino.core.exceptions import OINOConfigError


class Dialect(str, Enum):
    """Supported database dialects."""

    SQLITE = 'sqlite'
    POSTGRESQL = 'postgresql'
    MARIADB = 'mariadb'
    MSSQL = 'mssql'


@dataclass(frozen=True)
class OINOConfig:
    """
    Protocol constants shared by every resource built by one factory.

    Attributes:
        id_field_name: Name of the synthetic id property in serialized rows
        id_separator: Separator between primary key values in an OINO-ID
        filter_param: Query parameter carrying the filter expression
        order_param: Query parameter carrying the order expression
        limit_param: Query parameter carrying the limit expression
        select_param: Query parameter carrying the column selection
        aggregate_param: Query parameter carrying aggregate functions
    """

    id_field_name: str = '_OINOID_'
    id_separator: str = ':'
    filter_param: str = 'oinosqlfilter'
    order_param: str = 'oinosqlorder'
    limit_param: str = 'oinosqllimit'
    select_param: str = 'oinosqlselect'
    aggregate_param: str = 'oinosqlaggregate'

    def __post_init__(self) -> None:
        """Validate constants."""
        if len(self.id_separator) != 1 or self.id_separator == '%':
            msg = f'Id separator must be a single character other than "%": {self.id_separator!r}'
            raise OINOConfigError(msg)


@dataclass(frozen=True)
class DbParams:
    """
    Database connection parameters.

    Attributes:
        dialect: Database dialect
        url: SQLAlchemy async URL (e.g. 'sqlite+aiosqlite:///data.db')
        database: Logical database name, used by catalog queries and hashid domains
        schema: Optional schema (Postgres/MSSQL catalog filter)
    """

    dialect: Dialect
    url: str
    database: str = ''
    schema: str | None = None

    def __post_init__(self) -> None:
        """Validate connection parameters."""
        if not self.url:
            msg = 'Database url is required'
            raise OINOConfigError(msg)


@dataclass(frozen=True)
class ApiParams:
    """
    Per-resource configuration, fixed at resource-creation time.

    Attributes:
        table_name: Database table served by the resource
        api_name: Public resource name (defaults to the table name)
        include_fields: When non-empty, only these columns are modelled
        exclude_fields: Columns never modelled
        exclude_field_prefix: Columns starting with this prefix are never modelled
        hashid_key: 32 hex character AES key; enables hashids for numeric primary keys
        hashid_length: Minimum hashid token length
        hashid_random_ids: Use a random nonce per encode instead of a deterministic one
        use_dates_as_string: Model date/time columns as strings
        fail_on_oversized_values: Reject strings longer than the column instead of warning
        fail_on_update_on_autoinc: Reject client supplied values for autoincrement columns
        fail_on_insert_without_key: Reject inserts lacking a non-autoincrement primary key
        fail_on_any_invalid_rows: Reject a whole POST batch when any row is invalid
    """

    table_name: str
    api_name: str = ''
    include_fields: tuple[str, ...] = field(default_factory=tuple)
    exclude_fields: tuple[str, ...] = field(default_factory=tuple)
    exclude_field_prefix: str = ''
    hashid_key: str = ''
    hashid_length: int = 12
    hashid_random_ids: bool = False
    use_dates_as_string: bool = False
    fail_on_oversized_values: bool = False
    fail_on_update_on_autoinc: bool = False
    fail_on_insert_without_key: bool = True
    fail_on_any_invalid_rows: bool = False

    def __post_init__(self) -> None:
        """Validate parameters and fill defaults."""
        if not self.table_name:
            msg = 'Table name is required'
            raise OINOConfigError(msg)
        if not self.api_name:
            object.__setattr__(self, 'api_name', self.table_name)
        object.__setattr__(self, 'include_fields', tuple(self.include_fields))
        object.__setattr__(self, 'exclude_fields', tuple(self.exclude_fields))

    def is_field_included(self, name: str) -> bool:
        """
        Check whether a column belongs to the model.

        The explicit exclude list is checked first, then the exclude prefix,
        then the include list.

        Args:
            name: Column name

        Returns:
            True if the column is modelled
        """
        if name in self.exclude_fields:
            return False
        if self.exclude_field_prefix and name.startswith(self.exclude_field_prefix):
            return False
        if self.include_fields:
            return name in self.include_fields
        return True
