"""Database access for OINO."""

from namerec.oino.db.database import Database
from namerec.oino.db.dataset import DataSet
from namerec.oino.db.dataset import MemoryDataSet

__all__ = [
    'Database',
    'DataSet',
    'MemoryDataSet',
]
