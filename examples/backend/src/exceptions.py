"""Exception handling for OINO errors."""

import traceback
from typing import Any

from namerec.oino import OINOConfigError
from namerec.oino import OINOFilterError
from namerec.oino import OINOIdError
from namerec.oino import OINOResult

from src.models.responses import ErrorResponse


class ResourceNotFoundError(Exception):
    """Raised for a path naming no configured resource."""

    def __init__(self, resource: str) -> None:
        super().__init__(f'Resource not found: {resource}')
        self.resource = resource


def handle_oino_exception(exc: Exception, debug_mode: bool) -> tuple[ErrorResponse, int]:
    """
    Convert exception to ErrorResponse with HTTP status code.

    Args:
        exc: Exception to handle
        debug_mode: If True, include detailed traceback in response

    Returns:
        Tuple of (ErrorResponse, HTTP status code)
    """
    error_id = exc.__class__.__name__
    details: dict[str, Any] = {}

    if isinstance(exc, ResourceNotFoundError):
        status_code = 404
        details = {'resource': exc.resource}
    elif isinstance(exc, (OINOIdError, OINOFilterError)):
        status_code = 400
    elif isinstance(exc, OINOConfigError):
        status_code = 500
    else:
        # Unknown exception
        status_code = 500
        details = {'exception_type': error_id}

    # Add debug information if enabled
    if debug_mode:
        details['traceback'] = traceback.format_exc()
        details['debug_mode'] = True

    return ErrorResponse(id=error_id, message=str(exc), details=details), status_code


def result_to_error(result: OINOResult) -> ErrorResponse:
    """
    Convert a failed request result to ErrorResponse.

    Args:
        result: Failed result

    Returns:
        Error with the status message and all result messages
    """
    return ErrorResponse(
        id=f'HTTP{result.status_code}',
        message=result.status_message,
        details={'messages': result.messages},
    )
