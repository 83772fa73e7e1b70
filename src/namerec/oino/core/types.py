"""Type definitions for OINO."""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TypeAlias


class ContentType(str, Enum):
    """Wire formats understood by the codecs."""

    JSON = 'application/json'
    CSV = 'text/csv'
    FORMDATA = 'multipart/form-data'
    URLENCODE = 'application/x-www-form-urlencoded'
    HTML = 'text/html'

    @classmethod
    def from_header(cls, header: str | None) -> 'ContentType | None':
        """
        Resolve a Content-Type or Accept header value.

        Parameters after ';' are ignored. For Accept headers the first
        supported media type wins.

        Args:
            header: Raw header value

        Returns:
            Matching content type or None
        """
        if not header:
            return None
        for media_range in header.split(','):
            media_type = media_range.split(';')[0].strip().lower()
            for content_type in cls:
                if content_type.value == media_type:
                    return content_type
        return None


class FieldKind(str, Enum):
    """Typed variant of a column."""

    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    BLOB = 'blob'
    DATETIME = 'datetime'


class HttpMethod(str, Enum):
    """Verbs handled by the request orchestrator."""

    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'


class _Undefined:
    """Marker for a cell that was not supplied (distinct from SQL NULL)."""

    _instance: '_Undefined | None' = None

    def __new__(cls) -> '_Undefined':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'UNDEFINED'

    def __reduce__(self) -> str:
        return 'UNDEFINED'


UNDEFINED = _Undefined()

Cell: TypeAlias = str | int | float | Decimal | bool | bytes | dt.datetime | dt.date | _Undefined | None
Row: TypeAlias = list[Cell]


@dataclass(frozen=True)
class FieldParams:
    """Constraint flags of a column."""

    is_primary_key: bool = False
    is_foreign_key: bool = False
    is_not_null: bool = False
    is_auto_increment: bool = False

    def flags(self) -> list[str]:
        """Get names of the flags that are set."""
        names = []
        if self.is_primary_key:
            names.append('PK')
        if self.is_foreign_key:
            names.append('FK')
        if self.is_not_null:
            names.append('NOTNULL')
        if self.is_auto_increment:
            names.append('AUTOINC')
        return names
