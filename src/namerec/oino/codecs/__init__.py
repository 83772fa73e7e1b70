"""Row codecs for the supported wire formats."""

from typing import TYPE_CHECKING

from namerec.oino.codecs import csv_codec
from namerec.oino.codecs import formdata
from namerec.oino.codecs import json_codec
from namerec.oino.codecs import urlencode
from namerec.oino.core.result import OINOResult
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import Row

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel

SUPPORTED_CONTENT_TYPES = (ContentType.JSON, ContentType.CSV, ContentType.FORMDATA, ContentType.URLENCODE)


def read_rows(
    datamodel: 'DataModel',
    body: str | bytes,
    content_type: ContentType,
    result: OINOResult,
    multipart_boundary: str = '',
) -> list[Row]:
    """
    Decode a request body into rows.

    Decode problems never raise; they are reported as warnings or info
    messages on the result and the affected rows or cells are skipped.

    Args:
        datamodel: Model of the resource
        body: Raw body
        content_type: Body format
        result: Receives decode messages
        multipart_boundary: Boundary for form-data bodies

    Returns:
        Decoded rows

    Raises:
        ValueError: If the content type has no codec
    """
    if content_type == ContentType.FORMDATA:
        return formdata.read_rows(datamodel, body, result, multipart_boundary)
    text = body.decode('utf-8', errors='replace') if isinstance(body, bytes) else body
    match content_type:
        case ContentType.JSON:
            return json_codec.read_rows(datamodel, text, result)
        case ContentType.CSV:
            return csv_codec.read_rows(datamodel, text, result)
        case ContentType.URLENCODE:
            return urlencode.read_rows(datamodel, text, result)
    msg = f'Unsupported request content type: {content_type.value}'
    raise ValueError(msg)


def write_rows(
    datamodel: 'DataModel',
    rows: list[Row],
    content_type: ContentType,
    result: OINOResult,
    multipart_boundary: str = formdata.DEFAULT_BOUNDARY,
) -> str:
    """
    Encode rows in a wire format.

    Raises:
        ValueError: If the content type has no codec
    """
    match content_type:
        case ContentType.JSON:
            return json_codec.write_rows(datamodel, rows, result)
        case ContentType.CSV:
            return csv_codec.write_rows(datamodel, rows, result)
        case ContentType.FORMDATA:
            return formdata.write_rows(datamodel, rows, result, multipart_boundary)
        case ContentType.URLENCODE:
            return urlencode.write_rows(datamodel, rows, result)
    msg = f'Unsupported response content type: {content_type.value}'
    raise ValueError(msg)


__all__ = [
    'SUPPORTED_CONTENT_TYPES',
    'read_rows',
    'write_rows',
]
