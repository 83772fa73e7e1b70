"""Query parameters rendered into SQL clauses."""

from namerec.oino.sql.params import SqlAggregate
from namerec.oino.sql.params import SqlFilter
from namerec.oino.sql.params import SqlLimit
from namerec.oino.sql.params import SqlOrder
from namerec.oino.sql.params import SqlParams
from namerec.oino.sql.params import SqlSelect

__all__ = [
    'SqlAggregate',
    'SqlFilter',
    'SqlLimit',
    'SqlOrder',
    'SqlParams',
    'SqlSelect',
]
