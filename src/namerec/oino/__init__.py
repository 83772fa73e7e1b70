"""
OINO - REST resources over SQL tables

Serves database tables as REST resources: introspects a table, converts
rows between wire formats and SQL, and handles GET/POST/PUT/DELETE requests.
"""

from namerec.oino.api import Api
from namerec.oino.api import ApiRequest
from namerec.oino.api import ApiResult
from namerec.oino.core.config import ApiParams
from namerec.oino.core.config import DbParams
from namerec.oino.core.config import Dialect
from namerec.oino.core.config import OINOConfig
from namerec.oino.core.exceptions import OINOConfigError
from namerec.oino.core.exceptions import OINOError
from namerec.oino.core.exceptions import OINOFilterError
from namerec.oino.core.exceptions import OINOIdError
from namerec.oino.core.result import MessageLevel
from namerec.oino.core.result import OINOResult
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import FieldKind
from namerec.oino.core.types import HttpMethod
from namerec.oino.core.utils import is_truthy
from namerec.oino.db.database import Database
from namerec.oino.factory import OINOFactory
from namerec.oino.hashid import Hashid
from namerec.oino.model.datamodel import DataModel
from namerec.oino.model.fields import DataField
from namerec.oino.model.modelset import ModelSet
from namerec.oino.registry import DialectRegistry
from namerec.oino.sql.params import SqlParams

__version__ = '0.1.0'

__all__ = [
    # Entry points
    'OINOFactory',
    'Api',
    'ApiRequest',
    'ApiResult',
    'Database',
    'DialectRegistry',
    # Configuration
    'ApiParams',
    'DbParams',
    'Dialect',
    'OINOConfig',
    # Model
    'DataModel',
    'DataField',
    'ModelSet',
    'SqlParams',
    'Hashid',
    # Types
    'ContentType',
    'FieldKind',
    'HttpMethod',
    'UNDEFINED',
    'MessageLevel',
    'OINOResult',
    # Exceptions
    'OINOError',
    'OINOConfigError',
    'OINOIdError',
    'OINOFilterError',
    # Utils
    'is_truthy',
]
