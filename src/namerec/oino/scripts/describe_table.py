#!/usr/bin/env python3
"""Console script to introspect a table and print its OINO data model."""

import asyncio
from typing import Annotated

import typer

from namerec.oino.core.config import ApiParams
from namerec.oino.core.config import DbParams
from namerec.oino.core.config import Dialect
from namerec.oino.core.exceptions import OINOError
from namerec.oino.factory import OINOFactory

app = typer.Typer(help='Introspect a database table and print its OINO data model.')


async def _describe(db_params: DbParams, api_params: ApiParams) -> str:
    factory = OINOFactory()
    db = await factory.create_db(db_params)
    try:
        api = await factory.create_api(db, api_params)
        return f'{api.datamodel.describe()}\n\n{api.datamodel.print_sql_select()}'
    finally:
        await db.close()


@app.command()
def describe(
    table: Annotated[
        str,
        typer.Argument(help='Table to introspect'),
    ],
    url: Annotated[
        str,
        typer.Option('--url', '-u', help='SQLAlchemy async database URL (e.g. sqlite+aiosqlite:///data.db)'),
    ],
    dialect: Annotated[
        Dialect,
        typer.Option('--dialect', '-d', help='Database dialect'),
    ] = Dialect.SQLITE,
    database: Annotated[
        str,
        typer.Option('--database', help='Database name used by catalog queries'),
    ] = '',
) -> None:
    """
    Print the fields of a table and the SELECT statement generated for it.

    Examples:

        uv run oino-describe orders --url sqlite+aiosqlite:///shop.db

        uv run oino-describe orders -d postgresql --database shop --url postgresql+asyncpg://user@host/shop
    """
    try:
        output = asyncio.run(_describe(DbParams(dialect, url, database), ApiParams(table)))
    except OINOError as e:
        typer.echo(f'Error: {e}', err=True)
        raise typer.Exit(1) from e
    typer.echo(output)


def main() -> None:
    """Entry point for the script."""
    app()


if __name__ == '__main__':
    main()
