"""
Basic usage example for OINO.

This example demonstrates:
1. Creating a database and a resource for one table
2. Inserting, updating and selecting rows through REST verbs
3. Filtering, ordering and paging with query parameters
4. Hashid protected primary keys
"""

import asyncio
import tempfile
from pathlib import Path

from sqlalchemy import Boolean
from sqlalchemy import Column
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import Numeric
from sqlalchemy import String
from sqlalchemy import Table
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.oino import ApiParams
from namerec.oino import ContentType
from namerec.oino import DbParams
from namerec.oino import Dialect
from namerec.oino import OINOFactory

# Define schema
metadata = MetaData()

products_table = Table(
    'products',
    metadata,
    Column('id', Integer, primary_key=True),
    Column('name', String(100), nullable=False),
    Column('price', Numeric(10, 2)),
    Column('in_stock', Boolean),
)


async def main() -> None:
    """Run example."""
    with tempfile.TemporaryDirectory() as directory:
        url = f'sqlite+aiosqlite:///{Path(directory) / "shop.db"}'

        # Create tables
        engine = create_async_engine(url)
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

        factory = OINOFactory()
        db = await factory.create_db(DbParams(Dialect.SQLITE, url, database='shop'), engine)
        products = await factory.create_api(db, ApiParams('products'))

        # Example 1: Data model
        print('\n=== Example 1: Data model ===')
        print(products.datamodel.describe())

        # Example 2: Insert and update
        print('\n=== Example 2: Insert and update ===')
        body = '[{"name": "Chair", "price": "49.90", "in_stock": true}, {"name": "Desk", "price": "199"}]'
        result = await products.do_request('POST', '', body)
        print(f'POST: {result.print_log()}')

        result = await products.do_request('PUT', '2', '{"in_stock": false}')
        print(f'PUT: {result.print_log()}')

        # Example 3: Select as JSON and CSV
        print('\n=== Example 3: Select ===')
        result = await products.do_request('GET')
        print(await result.write_string())

        result = await products.do_request('GET', '1')
        print(await result.write_string(ContentType.CSV))

        # Example 4: Query parameters
        print('\n=== Example 4: Filter, order and limit ===')
        request = factory.create_request({
            'oinosqlfilter': '(in_stock)-eq(false)',
            'oinosqlorder': 'price desc',
            'oinosqllimit': '10 page 1',
        })
        result = await products.do_request('GET', '', '', request)
        print(await result.write_string())

        # Example 5: Hashids
        print('\n=== Example 5: Hashid protected keys ===')
        protected = await factory.create_api(
            db,
            ApiParams('products', api_name='protected_products', hashid_key='000102030405060708090a0b0c0d0e0f'),
        )
        result = await protected.do_request('GET')
        print(await result.write_string())

        result = await protected.do_request('GET', '1')
        print(f'GET with a raw key: {result.print_log()}')

        await db.close()


if __name__ == '__main__':
    asyncio.run(main())
