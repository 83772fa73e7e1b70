"""REST resource over one table: request orchestration for GET/POST/PUT/DELETE."""

import logging
from dataclasses import dataclass
from dataclasses import field

from namerec.oino.codecs import read_rows
from namerec.oino.core.config import ApiParams
from namerec.oino.core.config import OINOConfig
from namerec.oino.core.exceptions import OINOFilterError
from namerec.oino.core.exceptions import OINOIdError
from namerec.oino.core.result import OINOResult
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import HttpMethod
from namerec.oino.core.types import Row
from namerec.oino.db.database import Database
from namerec.oino.hashid import Hashid
from namerec.oino.metadata.introspector import introspect_fields
from namerec.oino.model.datamodel import DataModel
from namerec.oino.model.modelset import ModelSet
from namerec.oino.sql.params import SqlParams

logger = logging.getLogger(__name__)


@dataclass
class ApiRequest:
    """
    Per-request parameters besides verb, id and body.

    Attributes:
        request_type: Format of the request body
        response_type: Format the caller will serialize the result in
        multipart_boundary: Boundary of a form-data body
        sql_params: Filter, order, limit, select and aggregate parameters
    """

    request_type: ContentType = ContentType.JSON
    response_type: ContentType = ContentType.JSON
    multipart_boundary: str = ''
    sql_params: SqlParams = field(default_factory=SqlParams)


@dataclass
class ApiResult(OINOResult):
    """Result of one request; GET results carry the selected rows."""

    data: ModelSet | None = None

    async def write_string(self, content_type: ContentType = ContentType.JSON) -> str:
        """
        Serialize the rows of a GET result.

        Writer warnings are appended to the result messages.

        Returns:
            Serialized rows, or empty string when there is no data
        """
        if self.data is None:
            return ''
        text = await self.data.write_string(content_type)
        self.messages.extend(self.data.result.messages)
        return text


class Api:
    """
    REST resource mapping one table.

    The data model is introspected once by initialize() and shared read-only
    by all requests afterwards.

    Attributes:
        db: Database collaborator
        params: Resource configuration
        config: Protocol constants (id field, separator, parameter names)
        hashid: Primary key obfuscation, or None when disabled
        datamodel: Typed fields of the table
    """

    def __init__(self, db: Database, params: ApiParams, config: OINOConfig | None = None) -> None:
        """
        Initialize resource (the data model stays empty until initialize()).

        Raises:
            OINOConfigError: If the hashid configuration is invalid
        """
        self.db = db
        self.params = params
        self.config = config or OINOConfig()
        self.hashid: Hashid | None = None
        if params.hashid_key:
            self.hashid = Hashid(
                params.hashid_key,
                f'{db.name} {params.table_name}',
                min_length=params.hashid_length,
                random_ids=params.hashid_random_ids,
            )
        self.datamodel = DataModel(self)

    @property
    def name(self) -> str:
        return self.params.api_name

    async def initialize(self) -> 'Api':
        """
        Introspect the table and freeze the data model.

        Returns:
            Self

        Raises:
            OINOConfigError: If the table is missing, a primary key is excluded or missing
        """
        for data_field in await introspect_fields(self.db, self.params):
            self.datamodel.add_field(data_field)
        self.datamodel.freeze()
        logger.debug(f'Api {self.name} initialized:\n{self.datamodel.describe()}')
        return self

    async def do_request(
        self,
        method: HttpMethod | str,
        oino_id: str = '',
        body: str | bytes = '',
        request: ApiRequest | None = None,
    ) -> ApiResult:
        """
        Handle one request.

        Never raises: id and query parameter errors become 400 results, SQL
        and unexpected errors 500 results.

        Args:
            method: HTTP verb
            oino_id: OINO-ID of the row, or empty
            body: Request body
            request: Formats and query parameters

        Returns:
            Result with status, messages and (for GET) the rows
        """
        request = request or ApiRequest()
        result = ApiResult()
        try:
            verb = HttpMethod(str(getattr(method, 'value', method)).upper())
        except ValueError:
            result.set_error(405, f'Unsupported HTTP method {method}', 'request')
            return result

        try:
            match verb:
                case HttpMethod.GET:
                    await self._do_get(result, oino_id, request)
                case HttpMethod.POST:
                    await self._do_post(result, oino_id, body, request)
                case HttpMethod.PUT:
                    await self._do_put(result, oino_id, body, request)
                case HttpMethod.DELETE:
                    await self._do_delete(result, oino_id)
        except (OINOIdError, OINOFilterError) as e:
            result.set_error(400, str(e), verb.value)
        except Exception as e:
            logger.exception(f'Unhandled exception in {verb.value} {self.name}')
            result.set_error(500, f'Unhandled exception: {e}', verb.value)

        logger.debug(f'{verb.value} {self.name}/{oino_id}: {result.print_log()}')
        return result

    def _validate_row(self, row: Row, operation: str, require_primary_key: bool) -> OINOResult:
        validation = OINOResult()
        for data_field, cell in zip(self.datamodel.fields, row, strict=True):
            name = data_field.name
            if cell is None and (data_field.is_not_null or data_field.is_primary_key):
                validation.set_error(405, f'Field {name} is not allowed to be null', operation)
            elif (
                cell is UNDEFINED
                and require_primary_key
                and data_field.is_primary_key
                and not data_field.is_auto_increment
            ):
                validation.set_error(405, f'Primary key {name} is missing', operation)
            elif cell is not UNDEFINED and data_field.is_auto_increment and self.params.fail_on_update_on_autoinc:
                validation.set_error(405, f'Auto increment field {name} is not allowed to be set', operation)

            length = data_field.value_length(cell) if data_field.max_length > 0 else 0
            if 0 < data_field.max_length < length:
                message = f'Field {name} length {length} exceeds max length {data_field.max_length}'
                if self.params.fail_on_oversized_values:
                    validation.set_error(405, message, operation)
                else:
                    validation.add_warning(message, operation)
        return validation

    async def _exec(self, result: ApiResult, sql: str, operation: str) -> None:
        dataset = await self.db.exec(sql)
        if dataset.has_errors():
            result.set_error(500, dataset.first_error(), operation)
            result.add_debug(f'SQL: {sql}', operation)

    async def _do_get(self, result: ApiResult, oino_id: str, request: ApiRequest) -> None:
        sql = self.datamodel.print_sql_select(oino_id, request.sql_params)
        dataset = await self.db.select(sql)
        if dataset.has_errors():
            result.set_error(500, dataset.first_error(), 'GET')
            result.add_debug(f'SQL: {sql}', 'GET')
            return
        result.data = ModelSet(self.datamodel, dataset)

    async def _do_post(self, result: ApiResult, oino_id: str, body: str | bytes, request: ApiRequest) -> None:
        if oino_id:
            result.set_error(400, 'HTTP POST method must not have an id', 'POST')
            return
        rows = read_rows(self.datamodel, body, request.request_type, result, request.multipart_boundary)
        if not rows:
            result.set_error(400, 'No rows in POST body', 'POST')
            return

        statements = []
        invalid_rows = 0
        for number, row in enumerate(rows, start=1):
            operation = f'POST row {number}'
            validation = self._validate_row(row, operation, self.params.fail_on_insert_without_key)
            if validation.success:
                try:
                    statements.append(self.datamodel.print_sql_insert(row))
                except ValueError as e:
                    validation.set_error(405, str(e), operation)
            if not validation.success:
                invalid_rows += 1
                result.messages.append(validation.status_message)
            result.messages.extend(validation.messages)

        if invalid_rows and self.params.fail_on_any_invalid_rows:
            result.set_error(405, f'{invalid_rows} of {len(rows)} rows are invalid', 'POST')
            return
        if not statements:
            result.set_error(405, 'No valid rows for POST', 'POST')
            return
        await self._exec(result, '\n'.join(statements), 'POST')

    async def _do_put(self, result: ApiResult, oino_id: str, body: str | bytes, request: ApiRequest) -> None:
        if not oino_id:
            result.set_error(400, 'HTTP PUT method requires an id', 'PUT')
            return
        rows = read_rows(self.datamodel, body, request.request_type, result, request.multipart_boundary)
        if len(rows) != 1:
            result.set_error(400, f'HTTP PUT method requires exactly one row, got {len(rows)}', 'PUT')
            return

        row = rows[0]
        validation = self._validate_row(row, 'PUT', require_primary_key=False)
        result.messages.extend(validation.messages)
        if not validation.success:
            result.success = False
            result.status_code = validation.status_code
            result.status_message = validation.status_message
            return
        if not self.datamodel.has_update_values(row):
            result.set_error(405, 'No values to update', 'PUT')
            return
        try:
            sql = self.datamodel.print_sql_update(oino_id, row)
        except ValueError as e:
            result.set_error(405, str(e), 'PUT')
            return
        await self._exec(result, sql, 'PUT')

    async def _do_delete(self, result: ApiResult, oino_id: str) -> None:
        if not oino_id:
            result.set_error(400, 'HTTP DELETE method requires an id', 'DELETE')
            return
        await self._exec(result, self.datamodel.print_sql_delete(oino_id), 'DELETE')
