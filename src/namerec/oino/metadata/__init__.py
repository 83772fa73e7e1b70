"""Table introspection for OINO."""

from namerec.oino.metadata.ddl import parse_create_table
from namerec.oino.metadata.introspector import introspect_fields

__all__ = [
    'introspect_fields',
    'parse_create_table',
]
