"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import Boolean
from sqlalchemy import Column
from sqlalchemy import DateTime
from sqlalchemy import ForeignKey
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import Numeric
from sqlalchemy import String
from sqlalchemy import Table
from sqlalchemy import Text
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.oino import Api
from namerec.oino import ApiParams
from namerec.oino import Database
from namerec.oino import DbParams
from namerec.oino import Dialect
from namerec.oino import OINOFactory
from namerec.oino.dialects import SQLITE
from namerec.oino.metadata.introspector import fields_from_ddl

HASHID_KEY = '000102030405060708090a0b0c0d0e0f'

ORDERS_DDL = """CREATE TABLE orders (
    id INTEGER NOT NULL,
    name VARCHAR(20) NOT NULL,
    amount NUMERIC(10, 2),
    paid BOOLEAN,
    created DATETIME,
    note TEXT,
    PRIMARY KEY (id)
)"""


def make_api(ddl: str = ORDERS_DDL, table_name: str = 'orders', **params) -> Api:  # noqa: ANN003
    """Create a resource with a model parsed from DDL, without a database connection."""
    api_params = ApiParams(table_name, **params)
    db = Database(DbParams(Dialect.SQLITE, 'sqlite+aiosqlite://', database='test'), SQLITE)
    api = Api(db, api_params)
    for field in fields_from_ddl(ddl, SQLITE, api_params):
        api.datamodel.add_field(field)
    api.datamodel.freeze()
    return api


@pytest.fixture
def metadata() -> MetaData:
    """Create test metadata with an autoincrement table and a composite key table."""
    metadata = MetaData()

    Table(
        'orders',
        metadata,
        Column('id', Integer, primary_key=True),
        Column('name', String(20), nullable=False),
        Column('amount', Numeric(10, 2)),
        Column('paid', Boolean),
        Column('created', DateTime),
        Column('note', Text),
    )

    Table(
        'order_items',
        metadata,
        Column('order_id', Integer, ForeignKey('orders.id'), primary_key=True),
        Column('line', String(10), primary_key=True),
        Column('quantity', Integer, nullable=False),
    )

    return metadata


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """URL of a SQLite database file private to the test."""
    return f'sqlite+aiosqlite:///{tmp_path / "test.db"}'


@pytest_asyncio.fixture
async def engine(db_url: str, metadata: MetaData):  # noqa: ANN201
    """Create async engine with the test tables."""
    engine = create_async_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def factory() -> OINOFactory:
    """Create factory with the built-in dialects."""
    return OINOFactory()


@pytest_asyncio.fixture
async def db(factory: OINOFactory, db_url: str, engine) -> Database:  # noqa: ANN001
    """Connected database over the test engine."""
    return await factory.create_db(DbParams(Dialect.SQLITE, db_url, database='test'), engine)


@pytest_asyncio.fixture
async def api(factory: OINOFactory, db: Database) -> Api:
    """Resource serving the orders table."""
    return await factory.create_api(db, ApiParams('orders'))
