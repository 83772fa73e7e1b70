"""Data model: fields, OINO-IDs and result sets."""

from namerec.oino.model.datamodel import DataModel
from namerec.oino.model.fields import DataField
from namerec.oino.model.modelset import ModelSet
from namerec.oino.model.oino_id import compose_id
from namerec.oino.model.oino_id import split_id

__all__ = [
    'DataField',
    'DataModel',
    'ModelSet',
    'compose_id',
    'split_id',
]
