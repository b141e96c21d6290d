"""Global exception handlers rendering RFC 7807 problem details."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskflow_service.core.exceptions import AppException, RateLimitException
from taskflow_service.core.schemas import ProblemDetails
from taskflow_service.infra.metrics import tracking

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"
GENERIC_ERROR_DETAIL = "An unexpected error occurred while processing your request"


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _create_problem_detail(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create an RFC 7807 body. ``extra`` keys are merged at the top level."""
    problem = ProblemDetails(
        type=type_,
        title=title or AppException._default_title(status_code),
        status=status_code,
        detail=detail,
        instance=instance,
    )

    response_data = problem.model_dump(exclude_none=True)
    if extra:
        response_data.update(extra)
    return response_data


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert :class:`AppException` subclasses into problem detail responses.

    Rate limit errors get a ``Retry-After`` header and authentication
    errors a ``WWW-Authenticate: Bearer`` challenge.
    """
    request_id = _get_request_id(request)

    tracking.track_error(
        error_type=exc.type,
        endpoint=request.url.path,
        status_code=exc.status_code,
        extra={"detail": exc.detail},
    )

    logger.warning(
        "Application exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )

    problem_data = _create_problem_detail(
        status_code=exc.status_code,
        detail=exc.detail,
        type_=exc.type,
        title=exc.title,
        instance=exc.instance or request.url.path,
        extra=exc.extra,
    )
    if request_id:
        problem_data["request_id"] = request_id

    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitException) and "retry_after" in exc.extra:
        headers["Retry-After"] = str(exc.extra["retry_after"])
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"

    return JSONResponse(
        status_code=exc.status_code,
        content=problem_data,
        headers=headers or None,
        media_type=PROBLEM_JSON,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convert request validation errors into a 422 with field-level errors."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    tracking.track_error(
        error_type="validation-error",
        endpoint=request.url.path,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "errors": errors,
        },
    )

    problem_data = _create_problem_detail(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Request validation failed for {len(errors)} field(s)",
        type_="validation-error",
        title="Validation Error",
        instance=request.url.path,
        extra={"errors": errors},
    )
    request_id = _get_request_id(request)
    if request_id:
        problem_data["request_id"] = request_id

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=problem_data,
        media_type=PROBLEM_JSON,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback and return a generic 500 without internals."""
    tracking.track_error(
        error_type=type(exc).__name__,
        endpoint=request.url.path,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    logger.error(
        "Unexpected exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=exc,
    )

    problem_data = _create_problem_detail(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=GENERIC_ERROR_DETAIL,
        type_="internal-error",
        title="Internal Server Error",
        instance=request.url.path,
    )
    request_id = _get_request_id(request)
    if request_id:
        problem_data["request_id"] = request_id

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=problem_data,
        media_type=PROBLEM_JSON,
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on ``app``.

    Example:
        ```python
        app = FastAPI()
        configure_exception_handlers(app)
        ```
    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
