"""Core OINO components."""

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
from namerec.oino.core.types import Cell
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import FieldKind
from namerec.oino.core.types import FieldParams
from namerec.oino.core.types import HttpMethod
from namerec.oino.core.types import Row
from namerec.oino.core.utils import is_truthy

__all__ = [
    'ApiParams',
    'DbParams',
    'Dialect',
    'OINOConfig',
    'OINOError',
    'OINOConfigError',
    'OINOIdError',
    'OINOFilterError',
    'MessageLevel',
    'OINOResult',
    'UNDEFINED',
    'Cell',
    'Row',
    'ContentType',
    'FieldKind',
    'FieldParams',
    'HttpMethod',
    'is_truthy',
]
