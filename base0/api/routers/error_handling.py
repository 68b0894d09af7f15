"""
API error handling utilities.

Provides a decorator for consistent error handling across endpoints. Domain
errors already carry their HTTP status, so the decorator only renders them;
anything else is logged and reported as a 500.
"""

import functools
import json
import logging
from typing import Any, Callable, TypeVar

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from base0.core.exceptions import Base0Exception, UpstreamError
from base0.models.common import ErrorResponse
from base0.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def error_response(exc: Base0Exception) -> JSONResponse:
    """Render a domain error as `{"error", "kind", "details"}` with its status code."""
    details: Any = exc.details or None
    if isinstance(exc, UpstreamError) and "body" in exc.details:
        details = exc.details["body"]
    body = ErrorResponse(error=exc.message, kind=exc.kind.value, details=details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def handle_api_errors(func: F) -> F:
    """
    Decorator to turn errors raised by a route into JSON error responses.

    This centralizes:
    - Logging of errors with their kind
    - Using the status code each Base0 error carries
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except Base0Exception as e:
            log = logger.error if e.status_code >= 500 else logger.warning
            log(
                f"{func.__name__} failed: {e.message}",
                extra={"kind": e.kind.value, "status_code": e.status_code},
            )
            return error_response(e)

        except PydanticValidationError as e:
            logger.warning("Pydantic validation error", extra={"error": str(e)})
            body = ErrorResponse(error="Invalid request", kind="validation", details=json.loads(e.json(include_url=False)))
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=body.model_dump(),
            )

        except Exception as e:
            log_exception_with_context(logger, f"Unexpected failure in {func.__name__}", e)
            body = ErrorResponse(error="Internal server error", details=str(e))
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=body.model_dump(),
            )

    return wrapper  # type: ignore
