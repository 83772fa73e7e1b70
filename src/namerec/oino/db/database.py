"""Database collaborator backed by a SQLAlchemy async engine."""

import logging

import sqlparse
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.oino.core.config import DbParams
from namerec.oino.core.exceptions import OINOError
from namerec.oino.core.result import MessageLevel
from namerec.oino.core.result import OINOResult
from namerec.oino.core.result import format_message
from namerec.oino.core.types import Cell
from namerec.oino.core.types import FieldKind
from namerec.oino.db.dataset import MemoryDataSet
from namerec.oino.dialects import SqlDialect

logger = logging.getLogger(__name__)

# Statements are sent as complete text; '%' in literals must not be treated as a placeholder.
_RAW_SQL = {'no_parameters': True}


def _safe_url(url: str) -> str:
    return url.split('@')[-1] if '@' in url else url


class Database:
    """
    Executes generated SQL and returns data sets.

    Connection pooling, retries and driver specifics belong to the engine;
    this class only runs statements and converts failures into error messages.
    """

    def __init__(self, params: DbParams, dialect: SqlDialect, engine: AsyncEngine | None = None) -> None:
        """
        Initialize database.

        Args:
            params: Connection parameters
            dialect: Dialect adapter matching params.dialect
            engine: Optional pre-built engine (created by connect() otherwise)
        """
        self.params = params
        self.dialect = dialect
        self._engine = engine

    @property
    def name(self) -> str:
        """Logical database name."""
        return self.params.database or self.dialect.name

    @property
    def engine(self) -> AsyncEngine:
        """
        Connected engine.

        Raises:
            OINOError: If connect() has not been called
        """
        if self._engine is None:
            msg = f'Database {self.name} is not connected'
            raise OINOError(msg)
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> OINOResult:
        """
        Create the engine (if needed) and check that a connection can be opened.

        Returns:
            Result; failure carries the driver error with status 500
        """
        result = OINOResult()
        try:
            if self._engine is None:
                self._engine = create_async_engine(self.params.url)
            async with self._engine.connect() as conn:
                await conn.exec_driver_sql('SELECT 1', execution_options=_RAW_SQL)
            logger.debug(f'Connected to {self.dialect.name} database at {_safe_url(self.params.url)}')
        except Exception as e:
            logger.exception(f'Connection to {_safe_url(self.params.url)} failed')
            result.set_error(500, f'Connection failed: {e}', 'connect')
        return result

    async def validate(self) -> OINOResult:
        """
        Check that the database is reachable and has tables.

        Returns:
            Result; failure when the catalog query fails or finds no tables
        """
        result = OINOResult()
        dataset = await self.select(self.dialect.validate_query(self.params))
        if dataset.has_errors():
            return result.set_error(500, dataset.first_error(), 'validate')
        row = dataset.current_row()
        table_count = int(row[0]) if row and row[0] is not None else 0
        if table_count == 0:
            result.set_error(500, f'No tables found in database {self.name}', 'validate')
        else:
            result.add_debug(f'{table_count} tables found in database {self.name}', 'validate')
        return result

    async def select(self, sql: str) -> MemoryDataSet:
        """
        Run a query.

        Args:
            sql: Single SELECT statement

        Returns:
            Rows, or an empty data set carrying the error message
        """
        logger.debug(f'Select: {sql}')
        try:
            async with self.engine.connect() as conn:
                result = await conn.exec_driver_sql(sql, execution_options=_RAW_SQL)
                rows = result.fetchall() if result.returns_rows else []
        except Exception as e:
            logger.debug(f'Select failed: {e}')
            return MemoryDataSet(messages=[format_message(MessageLevel.ERROR, str(e), 'select')])
        return MemoryDataSet([tuple(row) for row in rows])

    async def exec(self, sql: str) -> MemoryDataSet:
        """
        Run one or more modifying statements in a single transaction.

        Args:
            sql: Statements separated by ';'

        Returns:
            Rows of the last statement that returned any, or an empty data set
            carrying the error message (the transaction is rolled back)
        """
        logger.debug(f'Exec: {sql}')
        statements = [statement for statement in sqlparse.split(sql) if statement.strip()]
        rows: list[tuple] = []
        try:
            async with self.engine.begin() as conn:
                for statement in statements:
                    result = await conn.exec_driver_sql(statement, execution_options=_RAW_SQL)
                    if result.returns_rows:
                        rows = [tuple(row) for row in result.fetchall()]
        except Exception as e:
            logger.debug(f'Exec failed: {e}')
            return MemoryDataSet(messages=[format_message(MessageLevel.ERROR, str(e), 'exec')])
        return MemoryDataSet(rows)

    async def close(self) -> None:
        """Dispose of the engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    def quote_table(self, name: str) -> str:
        return self.dialect.quote_table(name)

    def quote_column(self, name: str) -> str:
        return self.dialect.quote_column(name)

    def literal_for(self, cell: Cell, kind: FieldKind, sql_type: str = '') -> str:
        return self.dialect.literal_for(cell, kind, sql_type)

    def parse_literal(self, raw: object, kind: FieldKind, sql_type: str = '') -> Cell:
        return self.dialect.parse_literal(raw, kind, sql_type)
