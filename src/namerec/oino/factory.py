"""Factory building databases, resources and requests."""

import logging
from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncEngine

from namerec.oino.api import Api
from namerec.oino.api import ApiRequest
from namerec.oino.codecs import SUPPORTED_CONTENT_TYPES
from namerec.oino.core.config import ApiParams
from namerec.oino.core.config import DbParams
from namerec.oino.core.config import OINOConfig
from namerec.oino.core.exceptions import OINOConfigError
from namerec.oino.core.types import ContentType
from namerec.oino.db.database import Database
from namerec.oino.registry import DialectRegistry
from namerec.oino.sql.params import SqlParams

logger = logging.getLogger(__name__)


def parse_multipart_boundary(header: str | None) -> str:
    """Boundary parameter of a multipart Content-Type header, or empty string."""
    if not header:
        return ''
    for parameter in header.split(';')[1:]:
        name, _, value = parameter.strip().partition('=')
        if name.strip().lower() == 'boundary':
            return value.strip().strip('"')
    return ''


class OINOFactory:
    """
    Builds the objects of one deployment.

    Example:
        factory = OINOFactory()
        db = await factory.create_db(DbParams(Dialect.SQLITE, 'sqlite+aiosqlite:///data.db'))
        api = await factory.create_api(db, ApiParams('orders', hashid_key=key))
        request = factory.create_request(query, content_type, accept)
        result = await api.do_request('GET', '', '', request)

    Attributes:
        registry: Dialect adapters available to databases
        config: Protocol constants shared by every resource
    """

    def __init__(self, registry: DialectRegistry | None = None, config: OINOConfig | None = None) -> None:
        self.registry = registry or DialectRegistry()
        self.config = config or OINOConfig()

    async def create_db(self, params: DbParams, engine: AsyncEngine | None = None) -> Database:
        """
        Create and connect a database.

        Args:
            params: Connection parameters
            engine: Optional pre-built engine

        Returns:
            Connected database

        Raises:
            OINOConfigError: If the dialect is not registered or the connection fails
        """
        db = Database(params, self.registry.get(params.dialect), engine)
        result = await db.connect()
        if not result.success:
            raise OINOConfigError(result.status_message)
        return db

    async def create_api(self, db: Database, params: ApiParams) -> Api:
        """
        Create a resource and introspect its table.

        Raises:
            OINOConfigError: If the table cannot be modelled or hashids are misconfigured
        """
        api = await Api(db, params, self.config).initialize()
        logger.info(f'Created api {api.name} for {db.name}.{params.table_name}')
        return api

    def create_request(
        self,
        query: Mapping[str, str] | None = None,
        content_type: str | None = None,
        accept: str | None = None,
    ) -> ApiRequest:
        """
        Build request parameters from URL query and headers.

        Missing or unknown headers fall back to JSON.

        Args:
            query: URL query parameters
            content_type: Content-Type header
            accept: Accept header

        Returns:
            Request parameters

        Raises:
            OINOFilterError: If a query parameter expression is invalid
        """
        request_type = ContentType.from_header(content_type)
        response_type = ContentType.from_header(accept)
        return ApiRequest(
            request_type=request_type if request_type in SUPPORTED_CONTENT_TYPES else ContentType.JSON,
            response_type=response_type if response_type in SUPPORTED_CONTENT_TYPES else ContentType.JSON,
            multipart_boundary=parse_multipart_boundary(content_type),
            sql_params=SqlParams.from_query(query or {}, self.config),
        )
