"""OINO resource endpoints."""

import structlog
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import Response
from fastapi.responses import JSONResponse

from namerec.oino import Api
from namerec.oino import ApiRequest
from namerec.oino import ContentType
from namerec.oino import OINOFactory
from namerec.oino.codecs.formdata import DEFAULT_BOUNDARY
from src.dependencies import container
from src.dependencies import get_api
from src.dependencies import get_factory
from src.exceptions import result_to_error
from src.models.responses import ResourceDescriptionResponse
from src.models.responses import ResourceListResponse

logger = structlog.get_logger()

router = APIRouter(prefix='/api', tags=['OINO'])


def _media_type(content_type: ContentType) -> str:
    if content_type == ContentType.FORMDATA:
        return f'{content_type.value}; boundary={DEFAULT_BOUNDARY}'
    return content_type.value


async def _handle(request: Request, api: Api, factory: OINOFactory, oino_id: str = '') -> Response:
    """
    Pass one HTTP request to a resource.

    Result messages are returned as X-OINO-MESSAGE-n headers; failed results
    become error bodies with the result status code.
    """
    api_request: ApiRequest = factory.create_request(
        dict(request.query_params),
        request.headers.get('content-type'),
        request.headers.get('accept'),
    )
    body = await request.body()

    logger.info('Resource request', resource=api.name, method=request.method, oino_id=oino_id)
    result = await api.do_request(request.method, oino_id, body, api_request)
    content = await result.write_string(api_request.response_type)
    headers = result.messages_as_headers()

    if not result.success:
        logger.warning('Resource request failed', resource=api.name, status_code=result.status_code)
        error = result_to_error(result)
        return JSONResponse(status_code=result.status_code, content=error.model_dump(), headers=headers)

    logger.info('Resource request completed', resource=api.name, message_count=len(result.messages))
    return Response(content, media_type=_media_type(api_request.response_type), headers=headers)


@router.get('/', response_model=ResourceListResponse)
async def list_resources() -> dict:
    """
    List configured resources.

    Returns:
        Resource names
    """
    return {'resources': sorted(container.apis())}


@router.get('/{resource}/describe', response_model=ResourceDescriptionResponse)
async def describe_resource(api: Api = Depends(get_api)) -> dict:
    """
    Describe the fields of a resource.

    Args:
        api: Resource named in the path

    Returns:
        Resource name, table and field descriptions
    """
    return {
        'name': api.name,
        'table': api.params.table_name,
        'fields': [field.describe() for field in api.datamodel.fields],
    }


@router.api_route('/{resource}', methods=['GET', 'POST'])
async def collection_endpoint(
    request: Request,
    api: Api = Depends(get_api),
    factory: OINOFactory = Depends(get_factory),
) -> Response:
    """
    Select rows or insert a batch of rows.

    Args:
        request: HTTP request with query parameters and body
        api: Resource named in the path
        factory: Factory building request parameters

    Returns:
        Serialized rows for GET, empty body for POST
    """
    return await _handle(request, api, factory)


@router.api_route('/{resource}/{oino_id}', methods=['GET', 'PUT', 'DELETE'])
async def row_endpoint(
    request: Request,
    oino_id: str,
    api: Api = Depends(get_api),
    factory: OINOFactory = Depends(get_factory),
) -> Response:
    """
    Select, update or delete the row addressed by an OINO-ID.

    Args:
        request: HTTP request with query parameters and body
        oino_id: OINO-ID of the row
        api: Resource named in the path
        factory: Factory building request parameters

    Returns:
        Serialized rows for GET, empty body otherwise
    """
    return await _handle(request, api, factory, oino_id)
