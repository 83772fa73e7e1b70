"""Database dialect adapters."""

from namerec.oino.dialects.base import IntrospectionKind
from namerec.oino.dialects.base import LengthRule
from namerec.oino.dialects.base import SelectParts
from namerec.oino.dialects.base import SqlDialect
from namerec.oino.dialects.base import TypeMapping
from namerec.oino.dialects.mariadb import MARIADB
from namerec.oino.dialects.mssql import MSSQL
from namerec.oino.dialects.postgresql import POSTGRESQL
from namerec.oino.dialects.sqlite import SQLITE

BUILTIN_DIALECTS = (SQLITE, POSTGRESQL, MARIADB, MSSQL)

__all__ = [
    'BUILTIN_DIALECTS',
    'IntrospectionKind',
    'LengthRule',
    'MARIADB',
    'MSSQL',
    'POSTGRESQL',
    'SQLITE',
    'SelectParts',
    'SqlDialect',
    'TypeMapping',
]
